"""
Extended Keys (xprv/xpub) for the hdkeychain Wallet
Implements BIP32 Hierarchical Deterministic key derivation

ExtendedPrivateKey and ExtendedPublicKey are separate immutable types. Only the private variant holds a scalar, so
only the private variant can derive hardened children. Both satisfy the ExtendedKey protocol.
"""
from dataclasses import dataclass, field
from functools import cached_property
from io import BytesIO
from typing import Iterable, Protocol, runtime_checkable

from hdkeychain.core import XKEYS, DataEncodingError, DepthOverflow, HardenedDerivationNotSupported, \
    InvalidChildKey, InvalidKeyData, InvalidLength, InvalidEncoding, InvalidMasterKey, InvalidSeedLength, \
    PubKeyError, ReadError, VersionKindMismatch, DerivationError, assert_exhausted, get_logger, get_stream, \
    read_big_int, read_stream
from hdkeychain.crypto import SECP256K1, PubKey, hash160, hmac_sha512
from hdkeychain.data import decode_base58check, encode_base58check
from hdkeychain.wallet.derivation import ChildNumber, DerivationPath
from hdkeychain.wallet.mnemonic import Seed
from hdkeychain.wallet.network import KeyKind, Network

__all__ = ["ExtendedKey", "ExtendedPrivateKey", "ExtendedPublicKey", "new_master", "parse_extended_key"]

logger = get_logger(__name__)

ZERO_FINGERPRINT = b'\x00' * XKEYS.FINGERPRINT_LENGTH
PRIVATE_PREFIX = b'\x00'


@runtime_checkable
class ExtendedKey(Protocol):
    """
    The capabilities shared by both extended key variants
    """
    chain_code: bytes
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    network: Network

    @property
    def is_private(self) -> bool: ...

    @property
    def public_key(self) -> bytes: ...

    def identifier(self) -> bytes: ...

    def fingerprint(self) -> bytes: ...

    def serialize(self) -> bytes: ...

    def to_string(self) -> str: ...


# --- HELPERS --- #

def _validate_metadata(chain_code: bytes, depth: int, parent_fingerprint: bytes, child_number: ChildNumber,
                       network: Network):
    if not isinstance(chain_code, bytes) or len(chain_code) != XKEYS.CHAIN_LENGTH:
        raise InvalidKeyData(f"Chain code must be {XKEYS.CHAIN_LENGTH} bytes")
    if isinstance(depth, bool) or not isinstance(depth, int) or not 0 <= depth <= XKEYS.MAX_DEPTH:
        raise InvalidKeyData(f"Depth must be an int in [0, {XKEYS.MAX_DEPTH}]")
    if not isinstance(parent_fingerprint, bytes) or len(parent_fingerprint) != XKEYS.FINGERPRINT_LENGTH:
        raise InvalidKeyData(f"Parent fingerprint must be {XKEYS.FINGERPRINT_LENGTH} bytes")
    if not isinstance(child_number, ChildNumber):
        raise InvalidKeyData("Child number must be a ChildNumber")
    if not isinstance(network, Network):
        raise InvalidKeyData("Network must be a Network")

    # A master key has no parent
    if depth == 0 and (parent_fingerprint != ZERO_FINGERPRINT or child_number.value != 0):
        raise InvalidKeyData("Zero depth key with non-zero parent fingerprint or child number")


def _serialize(version: bytes, key: "ExtendedKey", key_data: bytes) -> bytes:
    """
    version || depth || parent fingerprint || child number || chain code || key data
    """
    parts = [
        version,
        key.depth.to_bytes(1, "big"),
        key.parent_fingerprint,
        key.child_number.to_bytes(),
        key.chain_code,
        key_data
    ]
    return b''.join(parts)


def _ckd_hmac(chain_code: bytes, data: bytes, child_number: ChildNumber) -> tuple[int, bytes]:
    """
    Return (IL as int, IR) for a derivation step. Raises InvalidChildKey if IL is not below the curve order.
    """
    key_hash = hmac_sha512(key=chain_code, message=data + child_number.to_bytes())
    il, ir = key_hash[:XKEYS.PRIVATE_KEY_LENGTH], key_hash[XKEYS.PRIVATE_KEY_LENGTH:]

    tweak = int.from_bytes(il, "big")
    if tweak >= SECP256K1.order:
        raise InvalidChildKey(f"Invalid child key at index {child_number}: IL not below curve order",
                              child_number=child_number)
    return tweak, ir


def _coerce_child_number(child: ChildNumber | int) -> ChildNumber:
    if isinstance(child, ChildNumber):
        return child
    return ChildNumber.from_value(child)


def _coerce_path(path: DerivationPath | str | Iterable[ChildNumber]) -> DerivationPath:
    if isinstance(path, DerivationPath):
        return path
    if isinstance(path, str):
        return DerivationPath.from_str(path)
    return DerivationPath(tuple(path))


def _walk(key, path: DerivationPath):
    """Fold derive_child over the path, recording the failing position on error"""
    for position, child_number in enumerate(path):
        try:
            key = key.derive_child(child_number)
        except DerivationError as e:
            e.position = position
            logger.debug(f"Derivation failed at position {position} ({child_number}): {e}")
            raise
    return key


def _decode_payload(payload: bytes | BytesIO, expected: KeyKind | None = None) -> tuple[Network, KeyKind, dict]:
    """
    Read the 78-byte payload. Returns the network, key kind and the remaining fields keyed by name.
    The version is checked against the expected kind before any key data is interpreted.
    """
    if isinstance(payload, (bytes, bytearray)) and len(payload) != XKEYS.PAYLOAD_LENGTH:
        raise InvalidLength(f"Extended key payload must be {XKEYS.PAYLOAD_LENGTH} bytes, received {len(payload)}")

    stream = get_stream(payload)
    try:
        version = read_stream(stream, 4, "version")
        network, kind = Network.from_version(version)
        if expected is not None and kind is not expected:
            raise VersionKindMismatch(f"Expected a {expected.value} extended key but found a {kind.value} version")
        fields = {
            "depth": read_big_int(stream, 1, "depth"),
            "parent_fingerprint": read_stream(stream, XKEYS.FINGERPRINT_LENGTH, "parent_fingerprint"),
            "child_number": ChildNumber.from_value(read_big_int(stream, 4, "child_number")),
            "chain_code": read_stream(stream, XKEYS.CHAIN_LENGTH, "chain_code"),
        }
        key_data = read_stream(stream, XKEYS.KEY_DATA_LENGTH, "key_data")
        assert_exhausted(stream, "extended key")
    except ReadError as e:
        raise InvalidLength(str(e)) from e

    if kind is KeyKind.PRIVATE:
        if key_data[:1] != PRIVATE_PREFIX:
            raise InvalidKeyData(f"Private key data must begin with 0x00, received {key_data[0]:#04x}")
        fields["private_key"] = key_data[1:]
    else:
        fields["public_key"] = key_data

    return network, kind, fields


def _decode_string(text: str) -> bytes:
    try:
        return decode_base58check(text)
    except DataEncodingError as e:
        raise InvalidEncoding(f"Extended key is not valid Base58Check: {e}") from e


def _decode(data: str | bytes | BytesIO, expected: KeyKind | None = None):
    """
    Decode a string or payload into the variant named by its version prefix
    """
    payload = _decode_string(data) if isinstance(data, str) else data
    network, kind, fields = _decode_payload(payload, expected)
    key_class = ExtendedPrivateKey if kind is KeyKind.PRIVATE else ExtendedPublicKey
    key = key_class(network=network, **fields)
    logger.debug(f"Parsed {network} {kind.value} extended key at depth {key.depth}")
    return key


# --- EXTENDED KEYS --- #

@dataclass(frozen=True, repr=False)
class ExtendedPrivateKey:
    """
    An extended private key: a 32-byte secp256k1 scalar together with its chain code and derivation metadata.

    Created with new_master, by derivation from another ExtendedPrivateKey, or by parsing an xprv/tprv string.
    """
    private_key: bytes
    chain_code: bytes
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    network: Network = Network.BITCOIN

    def __post_init__(self):
        # --- Validation --- #
        if not isinstance(self.private_key, bytes) or len(self.private_key) != XKEYS.PRIVATE_KEY_LENGTH:
            raise InvalidKeyData(f"Private key must be {XKEYS.PRIVATE_KEY_LENGTH} bytes")
        if not SECP256K1.is_valid_scalar(int.from_bytes(self.private_key, "big")):
            raise InvalidKeyData("Private key outside [1, curve order)")
        _validate_metadata(self.chain_code, self.depth, self.parent_fingerprint, self.child_number, self.network)

    # --- OVERRIDES --- #
    def __repr__(self):
        return (f"ExtendedPrivateKey(network={self.network}, depth={self.depth}, "
                f"child_number={self.child_number}, fingerprint={self.fingerprint().hex()})")

    def __str__(self):
        return self.to_string()

    # --- CLASS METHODS --- #
    @classmethod
    def new_master(cls, seed: bytes | Seed, network: Network = Network.BITCOIN) -> "ExtendedPrivateKey":
        """
        Create the master key from a 16 to 64 byte seed.
        """
        if isinstance(seed, Seed):
            seed = seed.as_bytes()
        if not isinstance(seed, (bytes, bytearray)):
            raise TypeError(f"Seed must be bytes or Seed, received {type(seed)}")
        if not XKEYS.MIN_SEED_BYTES <= len(seed) <= XKEYS.MAX_SEED_BYTES:
            raise InvalidSeedLength(f"Seed must be between {XKEYS.MIN_SEED_BYTES} and {XKEYS.MAX_SEED_BYTES} bytes, "
                                    f"received {len(seed)}")

        # 1. Run the HMAC-512
        seed_hash = hmac_sha512(key=XKEYS.SEED_KEY, message=bytes(seed))

        # 2. Get private_key and chain code
        private_key, chain_code = seed_hash[:XKEYS.PRIVATE_KEY_LENGTH], seed_hash[XKEYS.PRIVATE_KEY_LENGTH:]
        if not SECP256K1.is_valid_scalar(int.from_bytes(private_key, "big")):
            raise InvalidMasterKey("Seed produced a master key outside [1, curve order)")

        # 3. Use 0 values for remaining params
        master = cls(private_key, chain_code, depth=0, parent_fingerprint=ZERO_FINGERPRINT,
                     child_number=ChildNumber(0), network=network)
        logger.debug(f"Created {network} master key with fingerprint {master.fingerprint().hex()}")
        return master

    @classmethod
    def from_str(cls, text: str) -> "ExtendedPrivateKey":
        return _decode(text, expected=KeyKind.PRIVATE)

    @classmethod
    def from_bytes(cls, payload: bytes | BytesIO) -> "ExtendedPrivateKey":
        """From the 78-byte payload without checksum"""
        return _decode(payload, expected=KeyKind.PRIVATE)

    # --- PROPERTIES --- #
    @property
    def is_private(self) -> bool:
        return True

    @property
    def secret(self) -> int:
        return int.from_bytes(self.private_key, "big")

    @cached_property
    def pubkey(self) -> PubKey:
        return PubKey(self.secret)

    @property
    def public_key(self) -> bytes:
        return self.pubkey.compressed()

    # --- METHODS --- #
    def identifier(self) -> bytes:
        return hash160(self.public_key)

    def fingerprint(self) -> bytes:
        return self.identifier()[:XKEYS.FINGERPRINT_LENGTH]

    def derive_child(self, child: ChildNumber | int) -> "ExtendedPrivateKey":
        """
        CKDpriv. An int is read as the serialized child number, so indices >= 2^31 are hardened.
        """
        child_number = _coerce_child_number(child)
        if self.depth >= XKEYS.MAX_DEPTH:
            raise DepthOverflow(f"Cannot derive past depth {XKEYS.MAX_DEPTH}", child_number=child_number)

        # Hardened children hash the scalar, normal children hash the public key
        if child_number.hardened:
            data = PRIVATE_PREFIX + self.private_key
        else:
            data = self.public_key

        tweak, child_chain_code = _ckd_hmac(self.chain_code, data, child_number)
        child_secret = (tweak + self.secret) % SECP256K1.order
        if child_secret == 0:
            raise InvalidChildKey(f"Invalid child key at index {child_number}: zero scalar",
                                  child_number=child_number)

        child = ExtendedPrivateKey(
            private_key=child_secret.to_bytes(XKEYS.PRIVATE_KEY_LENGTH, "big"),
            chain_code=child_chain_code,
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint(),
            child_number=child_number,
            network=self.network
        )
        logger.debug(f"Derived private child {child_number} at depth {child.depth}")
        return child

    def derive_path(self, path: DerivationPath | str | Iterable[ChildNumber]) -> "ExtendedPrivateKey":
        """
        Derive each child in turn. On failure the raised DerivationError carries the position of the failing step.
        """
        return _walk(self, _coerce_path(path))

    def to_extended_public_key(self) -> "ExtendedPublicKey":
        return ExtendedPublicKey(
            public_key=self.public_key,
            chain_code=self.chain_code,
            depth=self.depth,
            parent_fingerprint=self.parent_fingerprint,
            child_number=self.child_number,
            network=self.network
        )

    def serialize(self) -> bytes:
        return _serialize(self.network.private_version, self, PRIVATE_PREFIX + self.private_key)

    def to_string(self) -> str:
        return encode_base58check(self.serialize())


@dataclass(frozen=True)
class ExtendedPublicKey:
    """
    An extended public key: a compressed secp256k1 point together with its chain code and derivation metadata.
    """
    public_key: bytes
    chain_code: bytes
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    network: Network = Network.BITCOIN
    _pubkey: PubKey = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        if not isinstance(self.public_key, bytes):
            raise InvalidKeyData("Public key must be bytes")
        try:
            pubkey = PubKey.from_compressed(self.public_key)
        except PubKeyError as e:
            raise InvalidKeyData(f"Invalid public key: {e}") from e
        _validate_metadata(self.chain_code, self.depth, self.parent_fingerprint, self.child_number, self.network)
        object.__setattr__(self, "_pubkey", pubkey)

    def __str__(self):
        return self.to_string()

    # --- CLASS METHODS --- #
    @classmethod
    def from_str(cls, text: str) -> "ExtendedPublicKey":
        return _decode(text, expected=KeyKind.PUBLIC)

    @classmethod
    def from_bytes(cls, payload: bytes | BytesIO) -> "ExtendedPublicKey":
        return _decode(payload, expected=KeyKind.PUBLIC)

    # --- PROPERTIES --- #
    @property
    def is_private(self) -> bool:
        return False

    @property
    def pubkey(self) -> PubKey:
        return self._pubkey

    # --- METHODS --- #
    def identifier(self) -> bytes:
        return hash160(self.public_key)

    def fingerprint(self) -> bytes:
        return self.identifier()[:XKEYS.FINGERPRINT_LENGTH]

    def derive_child(self, child: ChildNumber | int) -> "ExtendedPublicKey":
        """
        CKDpub. Hardened children cannot be derived from a public key.
        """
        child_number = _coerce_child_number(child)
        if child_number.hardened:
            raise HardenedDerivationNotSupported(
                f"Cannot derive hardened child {child_number} from a public key", child_number=child_number
            )
        if self.depth >= XKEYS.MAX_DEPTH:
            raise DepthOverflow(f"Cannot derive past depth {XKEYS.MAX_DEPTH}", child_number=child_number)

        tweak, child_chain_code = _ckd_hmac(self.chain_code, self.public_key, child_number)
        child_point = SECP256K1.add_points(SECP256K1.multiply_generator(tweak), self._pubkey.to_point())
        if not child_point:
            raise InvalidChildKey(f"Invalid child key at index {child_number}: point at infinity",
                                  child_number=child_number)

        child = ExtendedPublicKey(
            public_key=PubKey.from_point(child_point).compressed(),
            chain_code=child_chain_code,
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint(),
            child_number=child_number,
            network=self.network
        )
        logger.debug(f"Derived public child {child_number} at depth {child.depth}")
        return child

    def derive_path(self, path: DerivationPath | str | Iterable[ChildNumber]) -> "ExtendedPublicKey":
        return _walk(self, _coerce_path(path))

    def to_extended_public_key(self) -> "ExtendedPublicKey":
        return self

    def serialize(self) -> bytes:
        return _serialize(self.network.public_version, self, self.public_key)

    def to_string(self) -> str:
        return encode_base58check(self.serialize())


# --- MODULE FUNCTIONS --- #

def new_master(seed: bytes | Seed, network: Network = Network.BITCOIN) -> ExtendedPrivateKey:
    return ExtendedPrivateKey.new_master(seed, network)


def parse_extended_key(text: str) -> ExtendedPrivateKey | ExtendedPublicKey:
    """
    Parse an xprv/xpub/tprv/tpub string into whichever variant its version prefix names
    """
    return _decode(text)


# --- TESTING --- #
if __name__ == "__main__":
    test_seed = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    master = new_master(test_seed)
    print(f"MASTER XPRV: {master}")
    print(f"MASTER XPUB: {master.to_extended_public_key()}")
    leaf = master.derive_path("m/0'/1/2'/2/1000000000")
    print(f"LEAF XPRV: {leaf}")
