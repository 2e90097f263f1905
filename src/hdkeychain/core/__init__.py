"""
Contains the core elements that are used within hdkeychain

Core:
    -Provides the reference formats for BIP32/BIP39/BIP44 values
    -Provides custom exceptions for the wallet elements
    -Provides logging and byte stream helpers
"""
# core/__init__.py
from hdkeychain.core.byte_stream import *
from hdkeychain.core.exceptions import *
from hdkeychain.core.formats import *
from hdkeychain.core.logging import *
