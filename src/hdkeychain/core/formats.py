"""
The BIP32/BIP39/BIP44 standard formats
"""
from typing import Final

__all__ = ["ECC", "WALLET", "XKEYS", "BIP44"]


class ECC:
    COORD_BYTES: Final[int] = 32
    COMPRESSED_BYTES: Final[int] = 33
    EVEN_PREFIX: Final[int] = 0x02
    ODD_PREFIX: Final[int] = 0x03


class WALLET:
    """
    We provide a Mnemonic dictionary which is BIP39 compliant. This forces the Mnemonic to be of a certain size
    depending on the entropy byte length chosen
    """
    MNEMONIC: Final[dict] = {
        16: {"bit_length": 128, "word_count": 12, "checksum_bits": 4},
        20: {"bit_length": 160, "word_count": 15, "checksum_bits": 5},
        24: {"bit_length": 192, "word_count": 18, "checksum_bits": 6},
        28: {"bit_length": 224, "word_count": 21, "checksum_bits": 7},
        32: {"bit_length": 256, "word_count": 24, "checksum_bits": 8},
    }
    DEFAULT_ENTROPY_BYTES: Final[int] = 16
    WORD_BITS: Final[int] = 11
    WORDLIST_SIZE: Final[int] = 2048
    UNIQUE_PREFIX_LEN: Final[int] = 4
    BITLEN_KEY: Final[str] = "bit_length"
    WORD_KEY: Final[str] = "word_count"
    CHECKSUM_KEY: Final[str] = "checksum_bits"
    SEED_ITERATIONS: Final[int] = 2048
    SEED_SALT: Final[str] = "mnemonic"
    DKLEN: Final[int] = 64


class XKEYS:
    """
    Constants related to the extended public and private keys
    """
    SEED_KEY: Final[bytes] = b'Bitcoin seed'
    MIN_SEED_BYTES: Final[int] = 16
    MAX_SEED_BYTES: Final[int] = 64
    CHAIN_LENGTH: Final[int] = 32
    FINGERPRINT_LENGTH: Final[int] = 4
    PRIVATE_KEY_LENGTH: Final[int] = 32
    KEY_DATA_LENGTH: Final[int] = 33
    PAYLOAD_LENGTH: Final[int] = 78
    CHECKSUM_LENGTH: Final[int] = 4
    MAX_DEPTH: Final[int] = 255

    # Version bytes for different key types
    MAINNET_PRIVATE: Final[bytes] = bytes.fromhex("0488ade4")  # xprv
    MAINNET_PUBLIC: Final[bytes] = bytes.fromhex("0488b21e")  # xpub
    TESTNET_PRIVATE: Final[bytes] = bytes.fromhex("04358394")  # tprv
    TESTNET_PUBLIC: Final[bytes] = bytes.fromhex("043587cf")  # tpub

    # Hardened derivation threshold
    HARDENED_OFFSET: Final[int] = 0x80000000
    MAX_INDEX: Final[int] = 0xffffffff


class BIP44:
    PURPOSE: Final[int] = 44
    LEVELS: Final[int] = 5
    EXTERNAL_CHAIN: Final[int] = 0
    INTERNAL_CHAIN: Final[int] = 1
