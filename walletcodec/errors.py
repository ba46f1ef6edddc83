"""
Exception hierarchy.

Every failure raised by walletcodec derives from WalletCodecError, which is a
ValueError so that callers already guarding against bad input keep working.
"""


class WalletCodecError(ValueError): ...


# -------------------------
# Structural / alphabet
# -------------------------

class InvalidLengthError(WalletCodecError): ...


class InvalidCharacterError(WalletCodecError): ...


class ChecksumMismatchError(WalletCodecError): ...


# -------------------------
# Witness addresses
# -------------------------

class InvalidWitnessVersionError(WalletCodecError): ...


class InvalidProgramLengthError(WalletCodecError): ...


class InvalidPaddingError(WalletCodecError): ...


class InvalidPrefixError(WalletCodecError):
    def __init__(self, prefix: str, expected) -> None:
        super().__init__(f"unexpected prefix {prefix!r} (expected {expected!r})")
        self.prefix = prefix
        self.expected = expected


# -------------------------
# Mnemonics
# -------------------------

class UnknownWordError(WalletCodecError):
    def __init__(self, word: str, language: str | None = None) -> None:
        where = f" in {language} wordlist" if language else ""
        super().__init__(f"unknown word {word!r}{where}")
        self.word = word
        self.language = language


class InvalidPhraseLengthError(WalletCodecError): ...


class UnknownLanguageError(WalletCodecError): ...


# -------------------------
# Hierarchical keys
# -------------------------

class InvalidSeedLengthError(WalletCodecError): ...


class InvalidKeyError(WalletCodecError): ...


class HardenedDerivationError(InvalidKeyError): ...


class InvalidIndexError(WalletCodecError): ...


class InvalidPathError(WalletCodecError): ...


class UnknownVersionError(WalletCodecError): ...


class UnknownNetworkError(WalletCodecError): ...
