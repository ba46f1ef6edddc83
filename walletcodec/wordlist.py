"""
BIP39 wordlists.

The word tables ship with the `mnemonic` package; they are loaded once per
language and kept as read-only tuples with a reverse index.
"""

import functools
import unicodedata
from dataclasses import dataclass, field

from mnemonic import Mnemonic as _WordlistSource

from .errors import UnknownLanguageError, UnknownWordError

WORDLIST_SIZE = 2048
DEFAULT_LANGUAGE = "english"

# Languages whose phrases are joined with an ideographic space.
IDEOGRAPHIC_SPACE = "\u3000"
_IDEOGRAPHIC_LANGUAGES = frozenset({"japanese"})


def normalize(text: str) -> str:
    return unicodedata.normalize("NFKD", text)


@dataclass(frozen=True)
class Wordlist:
    language: str
    words: tuple = field(repr=False)
    index: dict = field(repr=False, compare=False)

    @property
    def separator(self) -> str:
        return IDEOGRAPHIC_SPACE if self.language in _IDEOGRAPHIC_LANGUAGES else " "

    def word(self, i: int) -> str:
        return self.words[i]

    def index_of(self, word: str) -> int:
        try:
            return self.index[normalize(word)]
        except KeyError:
            raise UnknownWordError(word, self.language) from None

    def __contains__(self, word) -> bool:
        return normalize(word) in self.index


@functools.lru_cache(maxsize=None)
def _available() -> tuple:
    return tuple(sorted(_WordlistSource.list_languages()))


def languages() -> list:
    return list(_available())


@functools.lru_cache(maxsize=None)
def get_wordlist(language: str = DEFAULT_LANGUAGE) -> Wordlist:
    if language not in _available():
        raise UnknownLanguageError(f"no wordlist for language {language!r}")
    words = tuple(_WordlistSource(language).wordlist)
    if len(words) != WORDLIST_SIZE:
        raise UnknownLanguageError(f"{language} wordlist has {len(words)} words, expected {WORDLIST_SIZE}")
    index = {normalize(w): i for i, w in enumerate(words)}
    return Wordlist(language, words, index)
