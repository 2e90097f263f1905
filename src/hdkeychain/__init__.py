"""
hdkeychain: BIP32 extended keys, BIP39 mnemonics and BIP44 derivation paths

Sub-packages:
    -core: constants, exceptions, logging and byte stream helpers
    -crypto: secp256k1 arithmetic, public keys and hash functions
    -data: Base58Check and the BIP39 wordlists
    -wallet: networks, derivation paths, extended keys, mnemonics and BIP44 paths
"""
# hdkeychain/__init__.py
from hdkeychain.core.exceptions import *
from hdkeychain.data.wordlist import Language, Wordlist
from hdkeychain.wallet import *

__version__ = "0.1.0"
