"""
Shortcuts for the hash functions used by BIP32 and BIP39. Each function returns the bytes digest
"""
import hashlib
import hmac
import unicodedata

from ripemd.ripemd160 import ripemd160 as _ripemd160

from hdkeychain.core import WALLET

__all__ = ["hash160", "hash256", "hmac_sha512", "pbkdf2", "ripemd160", "sha256", "sha512"]


# --- SHA --- #
def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


# --- RIPEMD --- #
def ripemd160(data: bytes) -> bytes:
    # hashlib only exposes ripemd160 when OpenSSL ships the legacy provider
    return _ripemd160(data)


# --- BTC HASH FUNCTIONS --- #
def hash256(data: bytes) -> bytes:
    """SHA256(SHA256(data))"""
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    return ripemd160(sha256(data))


# --- WALLET HASHES --- #
def hmac_sha512(key: bytes, message: bytes) -> bytes:
    return hmac.new(key=key, msg=message, digestmod=hashlib.sha512).digest()


def pbkdf2(words: tuple[str, ...], passphrase: str = "") -> bytes:
    """
    BIP39 seed stretching: PBKDF2-HMAC-SHA512 over the NFKD space-joined words, salted with "mnemonic" + passphrase
    """
    password = unicodedata.normalize("NFKD", " ".join(words)).encode()
    salt = unicodedata.normalize("NFKD", WALLET.SEED_SALT + passphrase).encode()
    return hashlib.pbkdf2_hmac("sha512", password, salt, WALLET.SEED_ITERATIONS, WALLET.DKLEN)
