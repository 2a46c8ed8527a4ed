"""
Tests for text normalization.
"""
import re

import pytest

from voice_order.text import normalize, tokenize


class TestNormalize:
    """normalize() is the shared front door for every scorer."""

    @pytest.mark.parametrize("raw, expected", [
        ("Malai Kofta", "malai kofta"),
        ("  Paneer   Tikka (Spicy) ", "paneer tikka spicy"),
        ("Chicken Dum Biryani (Regular)", "chicken dum biryani regular"),
        ("pick-up", "pickup"),
        ("That's it!", "thats it"),
        ("Crème Brûlée", "creme brulee"),
        ("7-Up\tCan\n", "7up can"),
    ])
    def test_examples(self, raw, expected):
        assert normalize(raw) == expected

    def test_none_and_empty_yield_empty_string(self):
        assert normalize(None) == ""
        assert normalize("") == ""
        assert normalize("   ") == ""
        assert normalize("!!!") == ""

    @pytest.mark.parametrize("raw", [
        "Malai Kofta", "  A & B  ", "Chicken-65 (Dry)!", "ÅÆ ø ß", "\t\n", "x  y   z",
    ])
    def test_idempotent_and_charset(self, raw):
        once = normalize(raw)
        assert normalize(once) == once
        assert re.fullmatch(r"[a-z0-9 ]*", once)
        assert "  " not in once
        assert once == once.strip()


class TestTokenize:
    def test_splits_normalized_words(self):
        assert tokenize("Butter  Chicken!") == ["butter", "chicken"]

    def test_empty(self):
        assert tokenize(None) == []
        assert tokenize("...") == []
