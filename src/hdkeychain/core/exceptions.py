"""
The custom exceptions used throughout hdkeychain

Every failure a caller can trigger with external input is one of the classes below, all rooted at WalletError.
"""
__all__ = ["ReadError", "StreamError", "PubKeyError", "DataEncodingError", "WalletError", "ExtendedKeyError",
           "InvalidSeedLength", "InvalidMasterKey", "DerivationError", "InvalidChildKey", "DepthOverflow",
           "HardenedDerivationNotSupported", "KeyDecodeError", "InvalidLength", "InvalidChecksum", "UnknownVersion",
           "VersionKindMismatch", "InvalidEncoding", "InvalidKeyData", "MnemonicError", "InvalidWordCount",
           "UnknownWord", "InvalidEntropyLength", "UnsupportedLanguage", "InvalidWordlist", "DerivationPathError",
           "MalformedPath", "IndexOutOfRange", "InvalidBip44Path"]


# --- LOW LEVEL --- #

class StreamError(Exception):
    """
    Catchall for stream errors
    """
    pass


class ReadError(StreamError):
    """
    For when trying to read data of length n from the stream and receiving data of length < n
    """
    pass


class PubKeyError(Exception):
    """
    Used for compressed public key encoding and decoding
    """
    pass


class DataEncodingError(Exception):
    """
    For use in encoding/decoding algorithms
    """
    pass


# --- WALLET --- #

class WalletError(Exception):
    """
    Parent class for Wallet errors
    """
    pass


class ExtendedKeyError(WalletError):
    """Custom exception for extended key operations"""
    pass


class InvalidSeedLength(ExtendedKeyError):
    """
    Master seed outside the 16..64 byte range
    """
    pass


class InvalidMasterKey(ExtendedKeyError):
    """
    HMAC-SHA512 of the seed produced a scalar of 0 or >= the curve order
    """
    pass


class DerivationError(ExtendedKeyError):
    """
    Parent class for a failed derivation step. Carries the child number which failed and, when raised inside a
    path walk, the zero-based position of that step in the path.
    """

    def __init__(self, message: str, child_number=None, position: int | None = None):
        super().__init__(message)
        self.child_number = child_number
        self.position = position

    @property
    def hardened(self) -> bool:
        return bool(self.child_number is not None and self.child_number.hardened)


class InvalidChildKey(DerivationError):
    """
    IL >= curve order, or the resulting key is zero / the point at infinity
    """
    pass


class DepthOverflow(DerivationError):
    """
    Deriving past depth 255
    """
    pass


class HardenedDerivationNotSupported(DerivationError):
    """
    A public key was asked for a hardened child
    """
    pass


class KeyDecodeError(ExtendedKeyError):
    """
    Parent class for failures while reading a serialized extended key
    """
    pass


class InvalidLength(KeyDecodeError):
    pass


class InvalidEncoding(KeyDecodeError):
    """
    The string contains characters outside the Base58 alphabet
    """
    pass


class UnknownVersion(KeyDecodeError):
    pass


class VersionKindMismatch(KeyDecodeError):
    """
    A private key string where a public key was expected, or vice versa
    """
    pass


class InvalidKeyData(KeyDecodeError):
    """
    Key material or metadata which cannot belong to a valid extended key
    """
    pass


class MnemonicError(WalletError):
    """
    Parent class for mnemonic errors
    """
    pass


class InvalidChecksum(KeyDecodeError, MnemonicError):
    """
    Raised for both a Base58Check checksum mismatch and a BIP39 mnemonic checksum mismatch
    """
    pass


class InvalidWordCount(MnemonicError):
    pass


class UnknownWord(MnemonicError):

    def __init__(self, word: str):
        super().__init__(f"Word not in wordlist: {word!r}")
        self.word = word


class InvalidEntropyLength(MnemonicError):
    pass


class UnsupportedLanguage(MnemonicError):
    pass


class InvalidWordlist(MnemonicError):
    """
    A supplied wordlist is not 2048 unique words with unique 4-letter prefixes
    """
    pass


class DerivationPathError(WalletError):
    """
    Parent class for derivation path parsing errors
    """
    pass


class MalformedPath(DerivationPathError):
    pass


class IndexOutOfRange(DerivationPathError):
    pass


class InvalidBip44Path(DerivationPathError):
    """
    A well-formed path which does not have the m/44'/coin'/account'/change/index shape
    """
    pass
