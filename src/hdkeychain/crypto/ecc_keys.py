"""
The PubKey class: a secp256k1 point with its compressed SEC encoding
"""
from hdkeychain.core import ECC, PubKeyError
from hdkeychain.crypto.ecc import SECP256K1, Point

__all__ = ["PubKey"]


class PubKey:
    """
    Used for serializing a public key in hdkeychain
    """
    __slots__ = ("x", "y")

    def __init__(self, private_key: int | bytes):
        private_key = int.from_bytes(private_key, "big") if isinstance(private_key, bytes) else private_key
        if not SECP256K1.is_valid_scalar(private_key):
            raise PubKeyError("Private key out of range for secp256k1")
        self.x, self.y = SECP256K1.multiply_generator(private_key)

    # --- OVERRIDES --- #
    def __eq__(self, other) -> bool:
        if not isinstance(other, PubKey):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self):
        return f"PubKey({self.compressed().hex()})"

    # --- CLASS METHODS --- #
    @classmethod
    def from_point(cls, point: Point):
        if not point:
            raise PubKeyError("The point at infinity is not a valid public key")
        if not SECP256K1.is_point_on_curve(point):
            raise PubKeyError("Point not on SECP256K1 curve")

        obj = object.__new__(cls)  # bypass __init__
        obj.x, obj.y = point
        return obj

    @classmethod
    def from_compressed(cls, compressed_pubkey: bytes):
        if len(compressed_pubkey) != ECC.COMPRESSED_BYTES:
            raise PubKeyError("Compressed pubkey must be 33 bytes")

        prefix = compressed_pubkey[0]
        if prefix not in (ECC.EVEN_PREFIX, ECC.ODD_PREFIX):
            raise PubKeyError(f"Invalid prefix for compressed pubkey: {prefix:#04x}")

        x = int.from_bytes(compressed_pubkey[1:], "big")
        if not SECP256K1.is_x_on_curve(x):
            raise PubKeyError("Given x coordinate not on curve")

        y = SECP256K1.find_y_from_x(x, odd=(prefix == ECC.ODD_PREFIX))

        obj = object.__new__(cls)  # bypass __init__
        obj.x, obj.y = x, y
        return obj

    # --- METHODS --- #
    def to_point(self) -> Point:
        return Point(self.x, self.y)

    def compressed(self) -> bytes:
        prefix = ECC.ODD_PREFIX if self.y & 1 else ECC.EVEN_PREFIX
        return prefix.to_bytes(1, "big") + self.x.to_bytes(ECC.COORD_BYTES, "big")
