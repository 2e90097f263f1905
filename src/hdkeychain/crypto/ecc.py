"""
Affine arithmetic over short Weierstrass curves, and the secp256k1 instance used for BIP32 derivation
"""
from dataclasses import dataclass
from typing import Optional

from hdkeychain.crypto.ecc_math import is_quadratic_residue, sqrt_mod_prime

__all__ = ["EllipticCurve", "Point", "SECP256K1"]


@dataclass(frozen=True)
class Point:
    """
    An affine point (x, y). Point() with both coordinates None is the point at infinity and is falsy.
    """
    x: Optional[int] = None
    y: Optional[int] = None

    def __post_init__(self):
        if (self.x is None) ^ (self.y is None):
            raise ValueError("Point at infinity must have both coordinates as None")

    def __bool__(self) -> bool:
        return self.x is not None

    def __iter__(self):
        yield self.x
        yield self.y


class EllipticCurve:
    """
    y^2 = x^3 + ax + b over F_p, with a generator of the given order
    """

    def __init__(self, a: int, b: int, p: int, order: int, generator: tuple[int, int] | Point,
                 name: Optional[str] = None):
        if (4 * a ** 3 + 27 * b ** 2) % p == 0:
            raise ValueError("Curve is singular")

        self.a, self.b, self.p = a, b, p
        self.order = order
        self.name = name
        self.generator = generator if isinstance(generator, Point) else Point(*generator)

        if not self.generator or not self.is_point_on_curve(self.generator):
            raise ValueError("Generator is not on the curve")

        # 2^i * G for each bit of the order
        self._generator_doublings = [self.generator]
        for _ in range(order.bit_length() - 1):
            self._generator_doublings.append(self._double_point(self._generator_doublings[-1]))

    def __repr__(self):
        label = self.name or f"y^2 = x^3 + {self.a}x + {self.b}"
        return f"EllipticCurve({label}, p={self.p:#x}, order={self.order:#x})"

    # --- PREDICATES --- #
    def rhs(self, x: int) -> int:
        """x^3 + ax + b mod p"""
        return (x * x * x + self.a * x + self.b) % self.p

    def is_point_on_curve(self, point: Point) -> bool:
        if not point:
            return True
        x, y = point
        return 0 <= x < self.p and 0 <= y < self.p and (y * y - self.rhs(x)) % self.p == 0

    def is_x_on_curve(self, x: int) -> bool:
        return 0 <= x < self.p and is_quadratic_residue(self.rhs(x), self.p)

    def is_valid_scalar(self, n: int) -> bool:
        """1 <= n < order"""
        return 0 < n < self.order

    # --- COORDINATES --- #
    def find_y_from_x(self, x: int, odd: bool = False) -> int:
        """
        Lift x to the curve, choosing the root with the requested parity
        """
        if not self.is_x_on_curve(x):
            raise ValueError(f"No point on the curve has x = {x}")
        y = sqrt_mod_prime(self.rhs(x), self.p)
        return y if y & 1 == odd else (-y) % self.p

    # --- GROUP LAW --- #
    def _double_point(self, point: Point) -> Point:
        if not point or point.y == 0:
            return Point()

        x, y = point
        slope = (3 * x * x + self.a) * pow(2 * y, -1, self.p) % self.p
        new_x = (slope * slope - 2 * x) % self.p
        return Point(new_x, (slope * (x - new_x) - y) % self.p)

    def add_points(self, point1: Point, point2: Point) -> Point:
        if not point1:
            return point2
        if not point2:
            return point1

        if point1.x == point2.x:
            # Either the same point or inverses
            return self._double_point(point1) if point1.y == point2.y else Point()

        slope = (point2.y - point1.y) * pow(point2.x - point1.x, -1, self.p) % self.p
        new_x = (slope * slope - point1.x - point2.x) % self.p
        return Point(new_x, (slope * (point1.x - new_x) - point1.y) % self.p)

    def multiply_generator(self, n: int) -> Point:
        """
        n * G by summing the precomputed doublings for each set bit of n mod order
        """
        n %= self.order
        result = Point()
        for doubling in self._generator_doublings:
            if not n:
                break
            if n & 1:
                result = self.add_points(result, doubling)
            n >>= 1
        return result


SECP256K1 = EllipticCurve(
    a=0,
    b=7,
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    order=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    generator=(0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
               0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8),
    name="secp256k1"
)
