"""
The ChildNumber and DerivationPath classes for use in the Wallet

A ChildNumber is a single derivation index together with its hardened flag. A DerivationPath is the ordered sequence
of ChildNumbers from the root key to a descendant, written as m/44'/0'/0'/0/0.
"""
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from hdkeychain.core import XKEYS, IndexOutOfRange, MalformedPath

__all__ = ["ChildNumber", "DerivationPath", "HARDENED_MARKERS"]

HARDENED_MARKERS = ("'", "h", "H")
ROOT = "m"
SEPARATOR = "/"

_SEGMENT = re.compile(r"(0|[1-9][0-9]*)(['hH]?)")
_MAX_DIGITS = len(str(XKEYS.MAX_INDEX))


@dataclass(frozen=True)
class ChildNumber:
    """
    index is always the un-offset value in [0, 2^31); the serialized value adds 2^31 when hardened.
    """
    index: int
    hardened: bool = False

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError(f"Child index must be an int, received {type(self.index)}")
        if not 0 <= self.index < XKEYS.HARDENED_OFFSET:
            raise IndexOutOfRange(f"Child index {self.index} outside [0, 2^31)")
        if not isinstance(self.hardened, bool):
            raise TypeError("Hardened flag must be a bool")

    # --- CLASS METHODS --- #
    @classmethod
    def normal(cls, index: int) -> "ChildNumber":
        return cls(index, hardened=False)

    @classmethod
    def harden(cls, index: int) -> "ChildNumber":
        return cls(index, hardened=True)

    @classmethod
    def from_value(cls, value: int) -> "ChildNumber":
        """
        From the serialized 32-bit value, where bit 31 marks a hardened index
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Child number must be an int, received {type(value)}")
        if not 0 <= value <= XKEYS.MAX_INDEX:
            raise IndexOutOfRange(f"Child number {value} outside [0, 2^32)")
        if value >= XKEYS.HARDENED_OFFSET:
            return cls(value - XKEYS.HARDENED_OFFSET, hardened=True)
        return cls(value)

    @classmethod
    def from_str(cls, segment: str) -> "ChildNumber":
        """
        Parse a single path segment: decimal digits optionally followed by ' (or h). Leading zeros are rejected so
        that every accepted string formats back unchanged.
        """
        match = _SEGMENT.fullmatch(segment)
        if match is None:
            raise MalformedPath(f"Invalid path segment: {segment!r}")

        digits, marker = match.groups()
        if len(digits) > _MAX_DIGITS:
            raise IndexOutOfRange(f"Path index of {len(digits)} digits does not fit in 32 bits")
        index = int(digits)
        if index > XKEYS.MAX_INDEX:
            raise IndexOutOfRange(f"Path index {digits} does not fit in 32 bits")
        if index >= XKEYS.HARDENED_OFFSET:
            raise IndexOutOfRange(f"Path index {digits} must be below 2^31; mark hardened indices with '")
        return cls(index, hardened=bool(marker))

    # --- PROPERTIES --- #
    @property
    def value(self) -> int:
        """The 32-bit serialized child number"""
        return self.index + XKEYS.HARDENED_OFFSET if self.hardened else self.index

    # --- METHODS --- #
    def to_bytes(self) -> bytes:
        return self.value.to_bytes(4, "big")

    def to_string(self) -> str:
        return f"{self.index}'" if self.hardened else str(self.index)

    def __str__(self):
        return self.to_string()


@dataclass(frozen=True)
class DerivationPath:
    path: tuple[ChildNumber, ...] = ()

    def __post_init__(self):
        path = tuple(self.path)
        if not all(isinstance(c, ChildNumber) for c in path):
            raise TypeError("DerivationPath elements must be ChildNumber instances")
        object.__setattr__(self, "path", path)

    # --- OVERRIDES --- #
    def __iter__(self) -> Iterator[ChildNumber]:
        return iter(self.path)

    def __len__(self) -> int:
        return len(self.path)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return DerivationPath(self.path[item])
        return self.path[item]

    def __str__(self):
        return self.to_string()

    # --- CLASS METHODS --- #
    @classmethod
    def root(cls) -> "DerivationPath":
        return cls(())

    @classmethod
    def from_str(cls, path: str) -> "DerivationPath":
        """
        Parse m/a/b'/c... into a DerivationPath. The bare root "m" is the empty path.
        """
        if not isinstance(path, str):
            raise MalformedPath(f"Expected str but received: {type(path)}")
        if path == ROOT:
            return cls.root()
        if not path.startswith(ROOT + SEPARATOR):
            raise MalformedPath(f"Derivation path must start with '{ROOT}/': {path!r}")

        segments = path[len(ROOT) + 1:].split(SEPARATOR)
        return cls(tuple(ChildNumber.from_str(segment) for segment in segments))

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "DerivationPath":
        """From serialized 32-bit child numbers"""
        return cls(tuple(ChildNumber.from_value(v) for v in values))

    # --- PROPERTIES --- #
    @property
    def is_empty(self) -> bool:
        return not self.path

    @property
    def depth(self) -> int:
        return len(self.path)

    # --- METHODS --- #
    def child(self, *child_numbers: ChildNumber) -> "DerivationPath":
        """Return a new path extended by the given child numbers"""
        return DerivationPath(self.path + tuple(child_numbers))

    def to_string(self) -> str:
        return SEPARATOR.join([ROOT, *(c.to_string() for c in self.path)])
