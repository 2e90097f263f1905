"""
Fixtures used in the tests
"""
from secrets import token_bytes

import pytest

from hdkeychain.crypto import EllipticCurve
from hdkeychain.wallet import ExtendedPrivateKey, Mnemonic, new_master

# BIP32 test vector 1
VECTOR1_SEED = "000102030405060708090a0b0c0d0e0f"

# BIP39 all-zero entropy
ZERO_ENTROPY_PHRASE = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"


@pytest.fixture()
def fixed_rng():
    """
    Returns a factory: fixed_rng(value) is an rng(n) callable which always returns value
    """

    def factory(value: bytes):
        def rng(n: int) -> bytes:
            return value

        return rng

    return factory


@pytest.fixture()
def random_master() -> ExtendedPrivateKey:
    return new_master(token_bytes(32))


@pytest.fixture()
def vector1_master() -> ExtendedPrivateKey:
    return new_master(bytes.fromhex(VECTOR1_SEED))


@pytest.fixture()
def zero_mnemonic() -> Mnemonic:
    return Mnemonic.from_phrase(ZERO_ENTROPY_PHRASE)


@pytest.fixture()
def small_curve() -> EllipticCurve:
    """
    y^2 = x^3 + 7 (mod 11) with generator (2, 2) of order 4
    """
    return EllipticCurve(a=0, b=7, p=11, order=4, generator=(2, 2))
