"""
All classes and methods which have to do with the hierarchical deterministic wallet
"""
# wallet/__init__.py
from hdkeychain.wallet.network import *
from hdkeychain.wallet.derivation import *
from hdkeychain.wallet.mnemonic import *
from hdkeychain.wallet.xkeys import *
from hdkeychain.wallet.bip44 import *
