"""
The BIP44 path builder: m / purpose' / coin_type' / account' / change / address_index

Purpose, coin type and account are always hardened; change and address index never are. Bip44Path cannot be built
in any other shape.
"""
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from hdkeychain.core import BIP44, XKEYS, IndexOutOfRange, InvalidBip44Path
from hdkeychain.wallet.derivation import ChildNumber, DerivationPath
from hdkeychain.wallet.network import Network

__all__ = ["CoinType", "AccountLevel", "Change", "AddressIndex", "Bip44Path"]

PURPOSE = ChildNumber.harden(BIP44.PURPOSE)


def _check_index(index: int, level: str):
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"{level} must be an int, received {type(index)}")
    if not 0 <= index < XKEYS.HARDENED_OFFSET:
        raise IndexOutOfRange(f"{level} {index} outside [0, 2^31)")


@dataclass(frozen=True)
class CoinType:
    """
    SLIP-44 coin type. The common registrations are available as class attributes.
    """
    index: int

    BITCOIN: ClassVar["CoinType"]
    BITCOIN_TESTNET: ClassVar["CoinType"]
    LITECOIN: ClassVar["CoinType"]
    DOGECOIN: ClassVar["CoinType"]
    ETHEREUM: ClassVar["CoinType"]

    def __post_init__(self):
        _check_index(self.index, "Coin type")

    @classmethod
    def for_network(cls, network: Network) -> "CoinType":
        return cls.BITCOIN_TESTNET if network is Network.TESTNET else cls.BITCOIN


CoinType.BITCOIN = CoinType(0)
CoinType.BITCOIN_TESTNET = CoinType(1)
CoinType.LITECOIN = CoinType(2)
CoinType.DOGECOIN = CoinType(3)
CoinType.ETHEREUM = CoinType(60)


@dataclass(frozen=True)
class AccountLevel:
    index: int

    def __post_init__(self):
        _check_index(self.index, "Account")


@dataclass(frozen=True)
class AddressIndex:
    index: int

    def __post_init__(self):
        _check_index(self.index, "Address index")


class Change(Enum):
    EXTERNAL = BIP44.EXTERNAL_CHAIN
    INTERNAL = BIP44.INTERNAL_CHAIN

    @property
    def index(self) -> int:
        return self.value


@dataclass(frozen=True)
class Bip44Path:
    coin_type: CoinType
    account: AccountLevel
    change: Change
    address_index: AddressIndex

    def __post_init__(self):
        for name, expected in (("coin_type", CoinType), ("account", AccountLevel), ("change", Change),
                               ("address_index", AddressIndex)):
            if not isinstance(getattr(self, name), expected):
                raise TypeError(f"{name} must be a {expected.__name__}")

    def __str__(self):
        return self.to_string()

    # --- CLASS METHODS --- #
    @classmethod
    def standard(cls, coin_type: CoinType | int = CoinType.BITCOIN, account: AccountLevel | int = 0,
                 change: Change | int = Change.EXTERNAL, address_index: AddressIndex | int = 0) -> "Bip44Path":
        """
        Build the path from typed levels or plain ints
        """
        if not isinstance(coin_type, CoinType):
            coin_type = CoinType(coin_type)
        if not isinstance(account, AccountLevel):
            account = AccountLevel(account)
        if not isinstance(change, Change):
            try:
                change = Change(change)
            except ValueError:
                raise InvalidBip44Path(f"Change must be 0 (external) or 1 (internal), received {change}") from None
        if not isinstance(address_index, AddressIndex):
            address_index = AddressIndex(address_index)
        return cls(coin_type, account, change, address_index)

    @classmethod
    def from_derivation_path(cls, path: DerivationPath) -> "Bip44Path":
        if len(path) != BIP44.LEVELS:
            raise InvalidBip44Path(f"BIP44 path must have {BIP44.LEVELS} levels, received {len(path)}")

        purpose, coin_type, account, change, address_index = path
        if purpose != PURPOSE:
            raise InvalidBip44Path(f"BIP44 purpose must be {PURPOSE}, received {purpose}")
        if not (coin_type.hardened and account.hardened):
            raise InvalidBip44Path("BIP44 coin type and account levels must be hardened")
        if change.hardened or address_index.hardened:
            raise InvalidBip44Path("BIP44 change and address index levels must not be hardened")

        return cls.standard(coin_type.index, account.index, change.index, address_index.index)

    @classmethod
    def from_str(cls, path: str) -> "Bip44Path":
        return cls.from_derivation_path(DerivationPath.from_str(path))

    # --- METHODS --- #
    def account_path(self) -> DerivationPath:
        """m/44'/coin'/account'"""
        return DerivationPath((PURPOSE, ChildNumber.harden(self.coin_type.index),
                               ChildNumber.harden(self.account.index)))

    def to_derivation_path(self) -> DerivationPath:
        return self.account_path().child(ChildNumber.normal(self.change.index),
                                         ChildNumber.normal(self.address_index.index))

    def to_string(self) -> str:
        return self.to_derivation_path().to_string()
