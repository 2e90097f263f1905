"""
The Network registry: maps a network to the version prefixes of its extended keys
"""
from enum import Enum

from hdkeychain.core import XKEYS, UnknownVersion

__all__ = ["Network", "KeyKind"]


class KeyKind(Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class Network(Enum):
    BITCOIN = ("bitcoin", XKEYS.MAINNET_PRIVATE, XKEYS.MAINNET_PUBLIC)
    TESTNET = ("testnet", XKEYS.TESTNET_PRIVATE, XKEYS.TESTNET_PUBLIC)

    def __init__(self, label: str, private_version: bytes, public_version: bytes):
        self.label = label
        self.private_version = private_version
        self.public_version = public_version

    def __str__(self):
        return self.label

    def version(self, kind: KeyKind) -> bytes:
        return self.private_version if kind is KeyKind.PRIVATE else self.public_version

    @classmethod
    def from_version(cls, version: bytes) -> tuple["Network", KeyKind]:
        """
        Return the network and key kind a 4-byte version prefix belongs to
        """
        for network in cls:
            if version == network.private_version:
                return network, KeyKind.PRIVATE
            if version == network.public_version:
                return network, KeyKind.PUBLIC
        raise UnknownVersion(f"Unknown extended key version: {version.hex()}")

    @classmethod
    def from_label(cls, label: str) -> "Network":
        for network in cls:
            if network.label == label.lower():
                return network
        raise ValueError(f"Unknown network: {label!r}")
