"""
Elliptic curve cryptography and hash functions
"""
# crypto/__init__.py
from hdkeychain.crypto.ecc import *
from hdkeychain.crypto.ecc_keys import *
from hdkeychain.crypto.hash_functions import *
