"""
The Mnemonic class - an object created for seed retrieval. Constructed from fresh entropy, from known entropy or by
importing a phrase of 12, 15, 18, 21 or 24 words.

Entropy and checksum are packed as a single integer: entropy bits followed by the first entropy_bits/32 bits of
SHA256(entropy). Each 11-bit group of that integer indexes the wordlist.
"""
import secrets
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from hdkeychain.core import WALLET, InvalidChecksum, InvalidEntropyLength, InvalidSeedLength, InvalidWordCount, \
    MnemonicError, get_logger
from hdkeychain.crypto import pbkdf2, sha256
from hdkeychain.data import Language, Wordlist, get_wordlist

__all__ = ["Mnemonic", "MnemonicType", "Seed"]

logger = get_logger(__name__)

# --- CONSTANTS --- #
CHECKSUM_KEY = WALLET.CHECKSUM_KEY
WORD_KEY = WALLET.WORD_KEY
BITLEN_KEY = WALLET.BITLEN_KEY
WORD_BITS = WALLET.WORD_BITS
WORD_MASK = (1 << WORD_BITS) - 1


class MnemonicType(Enum):
    WORDS_12 = 12
    WORDS_15 = 15
    WORDS_18 = 18
    WORDS_21 = 21
    WORDS_24 = 24

    @property
    def word_count(self) -> int:
        return self.value

    @property
    def entropy_bytes(self) -> int:
        return next(k for k, v in WALLET.MNEMONIC.items() if v[WORD_KEY] == self.value)

    @property
    def entropy_bits(self) -> int:
        return WALLET.MNEMONIC[self.entropy_bytes][BITLEN_KEY]

    @property
    def checksum_bits(self) -> int:
        return WALLET.MNEMONIC[self.entropy_bytes][CHECKSUM_KEY]

    @classmethod
    def from_word_count(cls, word_count: int) -> "MnemonicType":
        try:
            return cls(word_count)
        except ValueError:
            raise InvalidWordCount(
                f"Mnemonic must have one of {[t.value for t in cls]} words, received {word_count}") from None

    @classmethod
    def from_entropy_length(cls, length: int) -> "MnemonicType":
        config = WALLET.MNEMONIC.get(length)
        if config is None:
            raise InvalidEntropyLength(
                f"Entropy byte length {length} not BIP39 compliant. Must be one of {list(WALLET.MNEMONIC)}")
        return cls(config[WORD_KEY])


@dataclass(frozen=True, repr=False)
class Seed:
    """
    The 64-byte output of Mnemonic.to_seed
    """
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, bytes) or len(self.value) != WALLET.DKLEN:
            raise InvalidSeedLength(f"Seed must be {WALLET.DKLEN} bytes")

    def __repr__(self):
        return f"Seed(<{len(self.value)} bytes>)"

    def __len__(self):
        return len(self.value)

    def as_bytes(self) -> bytes:
        return self.value

    def hex(self) -> str:
        return self.value.hex()


def _checksum(entropy: bytes, checksum_bits: int) -> int:
    """
    Return the first checksum_bits of SHA256(entropy) as an integer
    """
    entropy_hash_int = int.from_bytes(sha256(entropy), "big")
    return entropy_hash_int >> (256 - checksum_bits)


class Mnemonic:
    """
    An ordered sequence of words from a wordlist, encoding entropy plus its checksum
    """
    __slots__ = ("words", "wordlist", "entropy")

    def __init__(self, entropy: bytes, language: Language | Wordlist = Language.ENGLISH):
        """
        We create the mnemonic phrase for the given entropy. The entropy byte length fixes the word count
        (16 bytes = 12 words, 32 bytes = 24 words)
        """
        if not isinstance(entropy, (bytes, bytearray)):
            raise TypeError(f"Entropy must be bytes, received {type(entropy)}")
        mnemonic_type = MnemonicType.from_entropy_length(len(entropy))

        object.__setattr__(self, "entropy", bytes(entropy))
        object.__setattr__(self, "wordlist", get_wordlist(language))

        # Shift entropy by checksum_bits then OR the checksum to append it
        checksum_bits = mnemonic_type.checksum_bits
        ent_check = (int.from_bytes(self.entropy, "big") << checksum_bits) | _checksum(self.entropy, checksum_bits)

        # Extract 11-bit groups from right to left
        words = []
        for _ in range(mnemonic_type.word_count):
            words.append(self.wordlist.word(ent_check & WORD_MASK))
            ent_check >>= WORD_BITS
        object.__setattr__(self, "words", tuple(reversed(words)))

    # --- OVERRIDES --- #
    def __setattr__(self, name, value):
        raise AttributeError(f"Mnemonic is immutable; cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Mnemonic is immutable; cannot delete {name!r}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mnemonic):
            return NotImplemented
        return self.words == other.words and self.wordlist == other.wordlist

    def __hash__(self) -> int:
        return hash((self.words, self.wordlist))

    def __str__(self):
        return self.phrase

    def __repr__(self):
        return f"Mnemonic(<{self.word_count} words>, {self.wordlist.name})"

    # --- CLASS METHODS --- #
    @classmethod
    def generate(cls, word_count: int | MnemonicType = MnemonicType.WORDS_12,
                 language: Language | Wordlist = Language.ENGLISH,
                 rng: Callable[[int], bytes] = secrets.token_bytes) -> "Mnemonic":
        """
        Generate a new mnemonic from fresh entropy. rng(n) must return n random bytes.
        """
        mnemonic_type = word_count if isinstance(word_count, MnemonicType) else MnemonicType.from_word_count(
            word_count)

        entropy = rng(mnemonic_type.entropy_bytes)
        if not isinstance(entropy, (bytes, bytearray)) or len(entropy) != mnemonic_type.entropy_bytes:
            raise InvalidEntropyLength(f"Random source must return {mnemonic_type.entropy_bytes} bytes")

        mnemonic = cls(entropy, language)
        logger.debug(f"Generated {mnemonic.word_count}-word {mnemonic.wordlist.name} mnemonic")
        return mnemonic

    @classmethod
    def from_entropy(cls, entropy: bytes, language: Language | Wordlist = Language.ENGLISH) -> "Mnemonic":
        return cls(entropy, language)

    @classmethod
    def from_phrase(cls, phrase: str | list | tuple, language: Language | Wordlist = Language.ENGLISH) -> "Mnemonic":
        """
        Import a phrase, verifying word count, wordlist membership and checksum
        """
        wordlist = get_wordlist(language)
        if isinstance(phrase, str):
            words = unicodedata.normalize("NFKD", phrase).split()
        else:
            words = [unicodedata.normalize("NFKD", w) for w in phrase]

        mnemonic_type = MnemonicType.from_word_count(len(words))

        # Convert phrase to combined integer
        ent_check = 0
        for word in words:
            ent_check = (ent_check << WORD_BITS) | wordlist.index(word)

        # Extract checksum and entropy
        checksum_bits = mnemonic_type.checksum_bits
        checksum = ent_check & ((1 << checksum_bits) - 1)
        entropy = (ent_check >> checksum_bits).to_bytes(mnemonic_type.entropy_bytes, "big")

        if _checksum(entropy, checksum_bits) != checksum:
            logger.debug(f"Rejected {len(words)}-word mnemonic: checksum mismatch")
            raise InvalidChecksum("Mnemonic checksum does not match its entropy")

        mnemonic = cls(entropy, wordlist)
        logger.debug(f"Imported {mnemonic.word_count}-word {wordlist.name} mnemonic")
        return mnemonic

    # --- STATIC METHODS --- #
    @staticmethod
    def validate(phrase: str | list | tuple, language: Language | Wordlist = Language.ENGLISH) -> bool:
        """
        Return True if the phrase would import; never raises on malformed input
        """
        try:
            Mnemonic.from_phrase(phrase, language)
        except (MnemonicError, TypeError, AttributeError):
            return False
        return True

    # --- PROPERTIES --- #
    @property
    def phrase(self) -> str:
        return " ".join(self.words)

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def mnemonic_type(self) -> MnemonicType:
        return MnemonicType(len(self.words))

    # --- METHODS --- #
    def to_seed(self, passphrase: str = "") -> Seed:
        """
        Returns the seed associated with the mnemonic phrase and passphrase
        """
        return Seed(pbkdf2(self.words, passphrase))


# --- TESTING --- #
if __name__ == "__main__":
    random_mnemonic = Mnemonic.generate()
    print(f"RANDOM MNEMONIC: {random_mnemonic.phrase}")
    recovered_mnemonic = Mnemonic.from_phrase(random_mnemonic.phrase)
    print(f"TWO SEED VALUES EQUAL: {random_mnemonic.to_seed() == recovered_mnemonic.to_seed()}")
