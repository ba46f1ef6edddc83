"""
BIP39 mnemonic phrases.

Entropy of ENT bits is extended with the leading ENT/32 bits of
SHA256(entropy) and cut into 11-bit word indexes. The seed is
PBKDF2-HMAC-SHA512 over the NFKD phrase, salted with "mnemonic" + passphrase.
"""

import logging
import os
from dataclasses import dataclass, field

from .crypto import pbkdf2_sha512, sha256
from .errors import (
    ChecksumMismatchError,
    InvalidLengthError,
    InvalidPhraseLengthError,
    UnknownWordError,
)
from .wordlist import DEFAULT_LANGUAGE, get_wordlist, languages, normalize

log = logging.getLogger(__name__)

ENTROPY_BITS = (128, 160, 192, 224, 256)
WORD_COUNTS = (12, 15, 18, 21, 24)
SALT_PREFIX = "mnemonic"
SEED_ROUNDS = 2048
SEED_LENGTH = 64


# -------------------------
# Entropy <-> word indexes
# -------------------------

def _checksum(entropy: bytes, bits: int) -> int:
    return sha256(entropy)[0] >> (8 - bits)


def entropy_to_indexes(entropy: bytes) -> list:
    ent = len(entropy) * 8
    if ent not in ENTROPY_BITS:
        raise InvalidLengthError(f"entropy must be one of {ENTROPY_BITS} bits, got {ent}")
    cs_bits = ent // 32
    data = (int.from_bytes(entropy, "big") << cs_bits) | _checksum(entropy, cs_bits)
    nwords = (ent + cs_bits) // 11
    return [(data >> (11 * (nwords - 1 - i))) & 0x7FF for i in range(nwords)]


def indexes_to_entropy(indexes) -> bytes:
    indexes = list(indexes)
    if len(indexes) not in WORD_COUNTS:
        raise InvalidPhraseLengthError(f"phrase must have one of {WORD_COUNTS} words, got {len(indexes)}")
    cs_bits = len(indexes) // 3
    ent = len(indexes) * 11 - cs_bits

    data = 0
    for i in indexes:
        data = (data << 11) | i
    entropy = (data >> cs_bits).to_bytes(ent // 8, "big")
    if data & ((1 << cs_bits) - 1) != _checksum(entropy, cs_bits):
        raise ChecksumMismatchError("mnemonic checksum does not match")
    return entropy


def detect_language(words) -> str:
    """
    First supported language whose wordlist holds every word.

    The two Chinese lists share most characters at the same indexes, so a
    phrase made only of shared characters is reported as chinese_simplified.
    Its entropy is the same under either list.
    """
    candidates = [DEFAULT_LANGUAGE] + [lang for lang in languages() if lang != DEFAULT_LANGUAGE]
    for language in candidates:
        wordlist = get_wordlist(language)
        if all(w in wordlist for w in words):
            return language
    # report the first word missing from the wordlist the phrase starts in
    first = next((lang for lang in candidates if words[0] in get_wordlist(lang)), DEFAULT_LANGUAGE)
    wordlist = get_wordlist(first)
    raise UnknownWordError(next(w for w in words if w not in wordlist), first)


# -------------------------
# Mnemonic
# -------------------------

@dataclass(frozen=True)
class Mnemonic:
    language: str
    bits: int
    entropy: bytes = field(repr=False)
    words: tuple = field(repr=False)
    passphrase: str = field(default="", repr=False)

    def __post_init__(self):
        if self.bits not in ENTROPY_BITS or len(self.entropy) * 8 != self.bits:
            raise InvalidLengthError(f"{len(self.entropy)} bytes of entropy do not make a {self.bits}-bit mnemonic")
        if len(self.words) != (self.bits + self.bits // 32) // 11:
            raise InvalidPhraseLengthError(f"{len(self.words)} words do not match {self.bits} bits of entropy")

    @property
    def phrase(self) -> str:
        return get_wordlist(self.language).separator.join(self.words)

    @classmethod
    def from_entropy(cls, entropy: bytes, language: str = DEFAULT_LANGUAGE, passphrase: str = "") -> "Mnemonic":
        entropy = bytes(entropy)
        wordlist = get_wordlist(language)
        words = tuple(wordlist.word(i) for i in entropy_to_indexes(entropy))
        return cls(language, len(entropy) * 8, entropy, words, passphrase)

    @classmethod
    def generate(cls, bits: int = 256, language: str = DEFAULT_LANGUAGE, passphrase: str = "") -> "Mnemonic":
        if bits not in ENTROPY_BITS:
            raise InvalidLengthError(f"entropy must be one of {ENTROPY_BITS} bits, got {bits}")
        mnemonic = cls.from_entropy(os.urandom(bits // 8), language, passphrase)
        log.debug("generated %d-word %s mnemonic", len(mnemonic.words), language)
        return mnemonic

    @classmethod
    def from_phrase(cls, phrase: str, language: str | None = None, passphrase: str = "") -> "Mnemonic":
        """
        Parse and verify a phrase. Without a language the first wordlist
        containing every word is used.
        """
        words = normalize(phrase).split()
        if len(words) not in WORD_COUNTS:
            raise InvalidPhraseLengthError(f"phrase must have one of {WORD_COUNTS} words, got {len(words)}")
        if language is None:
            language = detect_language(words)
            log.debug("detected %s wordlist", language)

        wordlist = get_wordlist(language)
        indexes = [wordlist.index_of(w) for w in words]
        entropy = indexes_to_entropy(indexes)
        return cls(language, len(entropy) * 8, entropy, tuple(wordlist.word(i) for i in indexes), passphrase)

    def with_passphrase(self, passphrase: str) -> "Mnemonic":
        return Mnemonic(self.language, self.bits, self.entropy, self.words, passphrase)

    def to_seed(self) -> bytes:
        password = normalize(self.phrase).encode("utf-8")
        salt = (SALT_PREFIX + normalize(self.passphrase)).encode("utf-8")
        return pbkdf2_sha512(password, salt, SEED_ROUNDS, SEED_LENGTH)
