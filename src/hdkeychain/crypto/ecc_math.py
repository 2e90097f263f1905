"""
Helper functions for the mathematics of elliptic curves
"""

__all__ = ["is_quadratic_residue", "sqrt_mod_prime"]


def is_quadratic_residue(n: int, p: int) -> bool:
    """
    Returns True if (n|p) != -1, using Euler's criterion. (We include 0 as quadratic residues.)
    """
    n = n % p
    if n == 0:
        return True

    return pow(n, (p - 1) >> 1, p) == 1


def sqrt_mod_prime(n: int, p: int) -> int:
    """
    Assuming n is a quadratic residue mod p and p = 3 (mod 4), we return an integer r such that r^2 = n (mod p).
    """
    if p & 3 != 3:
        raise ValueError("Square root shortcut requires p = 3 (mod 4)")

    n = n % p
    if n == 0:
        return 0

    r = pow(n, (p + 1) >> 2, p)
    if (r * r) % p != n:
        raise ValueError("Square root requested for quadratic non-residue")
    return r
