"""
Loads the BIP39 wordlists

A Wordlist is an ordered table of 2048 words. The Language enum names the tables which ship with hdkeychain; a
caller may also build a Wordlist directly from any validated table.
"""
import unicodedata
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from hdkeychain.core import WALLET, InvalidWordlist, UnknownWord, UnsupportedLanguage, get_logger

__all__ = ["Language", "Wordlist", "load_wordlist", "get_wordlist", "WORDLIST_DIR"]

logger = get_logger(__name__)

WORDLIST_DIR = Path(__file__).parent / "wordlists"


class Language(Enum):
    ENGLISH = "english"

    @property
    def wordlist_file(self) -> Path:
        return WORDLIST_DIR / f"{self.value}.txt"

    @classmethod
    def from_name(cls, name: str) -> "Language":
        try:
            return cls(name.strip().lower())
        except (ValueError, AttributeError):
            raise UnsupportedLanguage(f"Unsupported mnemonic language: {name!r}") from None


class Wordlist:
    """
    Word -> index and index -> word lookup over a fixed table
    """
    __slots__ = ("name", "words", "_index")

    def __init__(self, words: Iterable[str], name: str = "custom"):
        words = tuple(unicodedata.normalize("NFKD", w.strip()) for w in words)

        # --- Validation --- #
        if len(words) != WALLET.WORDLIST_SIZE:
            raise InvalidWordlist(f"Wordlist must contain {WALLET.WORDLIST_SIZE} words, received {len(words)}")
        if any(not w or any(c.isspace() for c in w) for w in words):
            raise InvalidWordlist("Wordlist entries must be non-empty single words")
        if len(set(words)) != len(words):
            raise InvalidWordlist("Wordlist contains duplicate words")
        prefixes = {w[:WALLET.UNIQUE_PREFIX_LEN] for w in words}
        if len(prefixes) != len(words):
            raise InvalidWordlist(f"Wordlist words are not unique in their first {WALLET.UNIQUE_PREFIX_LEN} letters")

        self.name = name
        self.words = words
        self._index = {w: i for i, w in enumerate(words)}

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: str) -> bool:
        return word in self._index

    def __eq__(self, other) -> bool:
        if not isinstance(other, Wordlist):
            return NotImplemented
        return self.words == other.words

    def __hash__(self) -> int:
        return hash(self.words)

    def __repr__(self):
        return f"Wordlist({self.name!r})"

    def index(self, word: str) -> int:
        try:
            return self._index[word]
        except KeyError:
            raise UnknownWord(word) from None

    def word(self, index: int) -> str:
        if not 0 <= index < len(self.words):
            raise IndexError(f"Word index {index} out of range")
        return self.words[index]


def load_wordlist(wordlist_file: Path = Language.ENGLISH.wordlist_file) -> list[str]:
    """Return the BIP39 wordlist in the given file as a list of strings."""
    with wordlist_file.open(encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


@lru_cache(maxsize=None)
def _cached_wordlist(language: Language) -> Wordlist:
    if not language.wordlist_file.is_file():
        raise UnsupportedLanguage(f"No wordlist installed for {language.value}")
    logger.debug(f"Loading {language.value} wordlist")
    return Wordlist(load_wordlist(language.wordlist_file), name=language.value)


def get_wordlist(language: "Language | Wordlist | str" = Language.ENGLISH) -> Wordlist:
    """
    Resolve a Language, language name or ready-made Wordlist to a Wordlist
    """
    if isinstance(language, Wordlist):
        return language
    if isinstance(language, str):
        language = Language.from_name(language)
    if not isinstance(language, Language):
        raise UnsupportedLanguage(f"Unsupported mnemonic language: {language!r}")
    return _cached_wordlist(language)
