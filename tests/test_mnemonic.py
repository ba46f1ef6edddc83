"""Tests for BIP39 mnemonic phrases and seeds."""

import dataclasses
import unicodedata

import pytest
from mnemonic import Mnemonic as ReferenceMnemonic

from walletcodec import wordlist
from walletcodec.errors import (
    ChecksumMismatchError,
    InvalidLengthError,
    InvalidPhraseLengthError,
    UnknownLanguageError,
    UnknownWordError,
)
from walletcodec.hd import ExtendedKey
from walletcodec.mnemonic import ENTROPY_BITS, Mnemonic, entropy_to_indexes, indexes_to_entropy
from walletcodec.wordlist import IDEOGRAPHIC_SPACE, get_wordlist

ABANDON_ABOUT = " ".join(["abandon"] * 11 + ["about"])

# Japanese BIP39 vector: zero entropy with a passphrase that only matches
# after NFKD normalization.
JAPANESE_PHRASE = IDEOGRAPHIC_SPACE.join(["あいこくしん"] * 11 + ["あおぞら"])
JAPANESE_PASSPHRASE = "㍍ガバヴァぱばぐゞちぢ十人十色"
JAPANESE_SEED = (
    "a262d6fb6122ecf45be09c50492b31f92e9beb7d9a845987a02cefda57a15f9c"
    "467a17872029a9e92299b5cbdf306e3a0ee620245cbd508959b6cb7ca637bd55"
)
JAPANESE_XPRV = "xprv9s21ZrQH143K258jAiWPAM6JYT9hLA91MV3AZUKfxmLZJCjCHeSjBvMbDy8C1mJ2FL5ytExyS97FAe6pQ6SD5Jt9SwHaLorA8i5Eojokfo1"

VECTORS = [
    ("00" * 16, ABANDON_ABOUT),
    ("7f" * 16, "legal winner thank year wave sausage worth useful legal winner thank yellow"),
    ("80" * 16, "letter advice cage absurd amount doctor acoustic avoid letter advice cage above"),
    ("ff" * 16, "zoo zoo zoo zoo zoo zoo zoo zoo zoo zoo zoo wrong"),
    ("00" * 32, " ".join(["abandon"] * 23 + ["art"])),
]


class TestKnownVectors:
    @pytest.mark.parametrize("entropy,phrase", VECTORS)
    def test_from_entropy(self, entropy, phrase):
        m = Mnemonic.from_entropy(bytes.fromhex(entropy))
        assert m.phrase == phrase
        assert m.language == "english"

    @pytest.mark.parametrize("entropy,phrase", VECTORS)
    def test_from_phrase(self, entropy, phrase):
        m = Mnemonic.from_phrase(phrase)
        assert m.entropy == bytes.fromhex(entropy)
        assert m.bits == len(entropy) * 4

    def test_seed_with_passphrase(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT, passphrase="TREZOR")
        assert m.to_seed().hex() == (
            "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e5349553"
            "1f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
        )

    def test_seed_without_passphrase(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT)
        assert m.to_seed().hex() == (
            "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
            "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
        )


class TestGenerate:
    @pytest.mark.parametrize("bits", ENTROPY_BITS)
    def test_round_trip(self, bits):
        m = Mnemonic.generate(bits)
        assert len(m.entropy) == bits // 8
        assert len(m.words) == (bits + bits // 32) // 11
        parsed = Mnemonic.from_phrase(m.phrase, "english")
        assert parsed.entropy == m.entropy
        assert parsed == m

    def test_bad_bits(self):
        with pytest.raises(InvalidLengthError):
            Mnemonic.generate(100)

    def test_bad_entropy_length(self):
        with pytest.raises(InvalidLengthError):
            Mnemonic.from_entropy(bytes(15))

    def test_unknown_language(self):
        with pytest.raises(UnknownLanguageError):
            Mnemonic.generate(128, "klingon")

    def test_immutable(self):
        m = Mnemonic.generate(128)
        with pytest.raises(dataclasses.FrozenInstanceError):
            m.passphrase = "x"

    def test_repr_hides_secrets(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT, passphrase="TREZOR")
        assert "abandon" not in repr(m)
        assert "TREZOR" not in repr(m)


class TestParse:
    def test_word_count(self):
        with pytest.raises(InvalidPhraseLengthError):
            Mnemonic.from_phrase(" ".join(["abandon"] * 11))

    def test_unknown_word(self):
        with pytest.raises(UnknownWordError) as info:
            Mnemonic.from_phrase(" ".join(["abandon"] * 11 + ["xyzzy"]), "english")
        assert info.value.word == "xyzzy"

    def test_unknown_word_without_language(self):
        with pytest.raises(UnknownWordError, match="xyzzy"):
            Mnemonic.from_phrase(" ".join(["abandon"] * 11 + ["xyzzy"]))

    def test_checksum(self):
        with pytest.raises(ChecksumMismatchError):
            Mnemonic.from_phrase(" ".join(["abandon"] * 12))

    def test_extra_whitespace(self):
        m = Mnemonic.from_phrase("  abandon\tabandon abandon abandon abandon abandon\n"
                                 "abandon abandon abandon abandon abandon about ")
        assert m.phrase == ABANDON_ABOUT

    def test_japanese_round_trip(self):
        m = Mnemonic.from_entropy(bytes(16), "japanese")
        assert IDEOGRAPHIC_SPACE in m.phrase
        parsed = Mnemonic.from_phrase(m.phrase)
        assert parsed.language == "japanese"
        assert parsed.entropy == bytes(16)

    def test_shared_chinese_characters(self):
        m = Mnemonic.from_entropy(bytes(16), "chinese_traditional")
        simplified = get_wordlist("chinese_simplified")
        assert all(w in simplified for w in m.words)
        parsed = Mnemonic.from_phrase(m.phrase)
        assert parsed.language == "chinese_simplified"
        assert parsed.entropy == m.entropy
        assert Mnemonic.from_phrase(m.phrase, "chinese_traditional") == m


class TestConstruction:
    def test_consistent_fields(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT)
        assert Mnemonic(m.language, m.bits, m.entropy, m.words) == m

    def test_bits_disagree_with_entropy(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT)
        with pytest.raises(InvalidLengthError):
            Mnemonic(m.language, 160, m.entropy, m.words)

    def test_unsupported_bits(self):
        with pytest.raises(InvalidLengthError):
            Mnemonic("english", 64, bytes(8), ("abandon",) * 6)

    def test_word_count_disagrees_with_bits(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT)
        with pytest.raises(InvalidPhraseLengthError):
            Mnemonic(m.language, m.bits, m.entropy, m.words[:-1])


class TestNormalization:
    def test_japanese_vector(self):
        m = Mnemonic.from_entropy(bytes(16), "japanese", JAPANESE_PASSPHRASE)
        assert m.phrase == JAPANESE_PHRASE
        assert m.to_seed().hex() == JAPANESE_SEED
        assert ExtendedKey.from_mnemonic(m).serialize() == JAPANESE_XPRV

    def test_japanese_phrase_parses_to_same_seed(self):
        m = Mnemonic.from_phrase(JAPANESE_PHRASE, passphrase=JAPANESE_PASSPHRASE)
        assert m.language == "japanese"
        assert m.to_seed().hex() == JAPANESE_SEED

    @pytest.mark.parametrize("form", ["NFC", "NFD", "NFKC", "NFKD"])
    def test_passphrase_forms_agree(self, form):
        passphrase = unicodedata.normalize(form, "pässphrase")
        m = Mnemonic.from_phrase(ABANDON_ABOUT, passphrase=passphrase)
        assert m.to_seed() == ReferenceMnemonic.to_seed(ABANDON_ABOUT, "pässphrase")

    @pytest.mark.parametrize("form", ["NFC", "NFD"])
    def test_accented_phrase_forms_agree(self, form):
        m = Mnemonic.from_entropy(bytes(range(16)), "french", "pässphrase")
        parsed = Mnemonic.from_phrase(unicodedata.normalize(form, m.phrase), passphrase="pässphrase")
        assert parsed.language == "french"
        assert parsed.entropy == m.entropy
        assert parsed.to_seed() == m.to_seed()

    @pytest.mark.parametrize("language", ["english", "japanese", "spanish", "french", "czech"])
    def test_seed_matches_reference(self, language):
        m = Mnemonic.from_entropy(bytes(range(32)), language, "pässphrase")
        expected = ReferenceMnemonic.to_seed(ReferenceMnemonic(language).to_mnemonic(bytes(range(32))), "pässphrase")
        assert m.to_seed() == expected


class TestSeed:
    def test_deterministic(self):
        m = Mnemonic.generate(128)
        assert m.to_seed() == m.to_seed()
        assert len(m.to_seed()) == 64

    def test_passphrase_changes_seed(self):
        m = Mnemonic.generate(128, passphrase="correct horse")
        assert m.to_seed() != m.with_passphrase("correct hors").to_seed()

    def test_with_passphrase_keeps_words(self):
        m = Mnemonic.from_phrase(ABANDON_ABOUT)
        other = m.with_passphrase("TREZOR")
        assert other.words == m.words
        assert m.passphrase == ""


class TestIndexes:
    def test_indexes_cover_11_bits(self):
        indexes = entropy_to_indexes(bytes.fromhex("ff" * 16))
        assert indexes[0] == 2047
        assert len(indexes) == 12

    def test_round_trip(self):
        entropy = bytes(range(32))
        assert indexes_to_entropy(entropy_to_indexes(entropy)) == entropy

    def test_languages_listed_once(self, monkeypatch):
        calls = []
        original = wordlist._WordlistSource.list_languages

        def counting():
            calls.append(1)
            return original()

        wordlist._available.cache_clear()
        monkeypatch.setattr(wordlist._WordlistSource, "list_languages", staticmethod(counting))
        try:
            for _ in range(3):
                Mnemonic.from_phrase(JAPANESE_PHRASE)
            wordlist.languages().append("klingon")
            assert "klingon" not in wordlist.languages()
        finally:
            wordlist._available.cache_clear()
        assert len(calls) == 1

    def test_wordlist_is_bijective(self):
        english = get_wordlist("english")
        assert len(set(english.words)) == 2048
        assert english.index_of(english.word(1234)) == 1234
