"""
All methods for encoding data and loading data tables in hdkeychain
"""

# data/__init__.py
from hdkeychain.data.encoding import *
from hdkeychain.data.wordlist import *
