"""
Methods for Base58 and Base58Check encoding
"""
from hdkeychain.core import DataEncodingError, InvalidChecksum, InvalidLength, XKEYS
from hdkeychain.crypto import hash256

__all__ = ["BASE58_ALPHABET", "encode_base58", "decode_base58", "encode_base58check", "decode_base58check",
           "base58_checksum"]

# --- BASE58 ENCODING --- #
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: i for i, char in enumerate(BASE58_ALPHABET)}


def encode_base58(data: bytes) -> str:
    """
    We return the base58 encoding of the given bytes data
    """
    base = len(BASE58_ALPHABET)
    n = int.from_bytes(data, byteorder="big")
    digits = []

    while n > 0:
        n, remainder = divmod(n, base)
        digits.append(BASE58_ALPHABET[remainder])

    # Each leading zero byte is a leading '1'
    leading_zeros = len(data) - len(data.lstrip(b'\x00'))
    return "1" * leading_zeros + "".join(reversed(digits))


def decode_base58(data: str) -> bytes:
    """
    Given a base58 encoded string, return the encoded bytes. Raises DataEncodingError on characters outside the
    alphabet.
    """
    if not isinstance(data, str):
        raise DataEncodingError(f"Expected str but received: {type(data)}")

    total = 0
    for char in data:
        char_i = _BASE58_INDEX.get(char)
        if char_i is None:
            raise DataEncodingError(f"Invalid Base58 character: {char!r}")
        total = total * 58 + char_i

    decoded_bytes = total.to_bytes((total.bit_length() + 7) // 8, "big")

    # Each leading '1' is a leading zero byte
    leading_ones = len(data) - len(data.lstrip("1"))
    return b'\x00' * leading_ones + decoded_bytes


def base58_checksum(data: bytes) -> bytes:
    """First 4 bytes of HASH256(data)"""
    return hash256(data)[:XKEYS.CHECKSUM_LENGTH]


def encode_base58check(data: bytes) -> str:
    """
    Given bytes data, we return the base58 encoding along with checksum
    """
    return encode_base58(data + base58_checksum(data))


def decode_base58check(data: str) -> bytes:
    """
    Given a string of base58Check chars, we decode it and return the payload without its checksum.
    Raise InvalidLength if there are fewer bytes than the checksum and InvalidChecksum if the checksum fails.
    """
    decoded = decode_base58(data)
    if len(decoded) < XKEYS.CHECKSUM_LENGTH:
        raise InvalidLength(f"Base58Check data of {len(decoded)} bytes is shorter than its checksum")

    payload, checksum = decoded[:-XKEYS.CHECKSUM_LENGTH], decoded[-XKEYS.CHECKSUM_LENGTH:]
    if base58_checksum(payload) != checksum:
        raise InvalidChecksum("Decoded checksum does not equal given checksum")
    return payload
