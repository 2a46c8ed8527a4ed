"""
Tests for phonetic encoding and edit distance.
"""
from voice_order.phonetics import encode, levenshtein, similarity


class TestEncode:
    def test_deterministic(self):
        assert encode("malai kofta") == encode("malai kofta")

    def test_keeps_word_boundaries(self):
        codes = encode("malai kofta")
        assert codes
        assert " " in codes[0]

    def test_sound_alikes_share_first_word_code(self):
        """'malay' and 'malai' differ only in spelling."""
        assert encode("malay")[0] == encode("malai")[0]

    def test_returns_at_most_two_codes(self):
        for phrase in ["schmidt", "chicken tikka", "gnocchi", "jalapeno"]:
            assert 1 <= len(encode(phrase)) <= 2

    def test_nothing_encodable(self):
        assert encode("") == []
        assert encode(None) == []
        assert encode("123") == []


class TestLevenshtein:
    def test_identity_is_zero(self):
        assert levenshtein("kofta", "kofta") == 0

    def test_classic_values(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("malay", "malai") == 1

    def test_non_identical_is_positive(self):
        assert levenshtein("a", "b") > 0


class TestSimilarity:
    def test_bounds(self):
        assert similarity("abc", "abc") == 1.0
        assert similarity("abc", "xyz") == 0.0
        assert similarity("", "") == 1.0

    def test_normalized_by_longer_string(self):
        assert similarity("malay", "malai") == 1 - 1 / 5
