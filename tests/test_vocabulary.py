"""
Tests for the speech recognizer vocabulary extractor.
"""
import logging

from voice_order.cuisines import get_cuisine_profile
from voice_order.schemas.menu import MenuItem
from voice_order.vocabulary import extract_keywords, to_recognizer_boosts


def item(item_id, name, **extra):
    return MenuItem(id=item_id, name=name, price=500, **extra)


class TestExtractKeywords:
    def test_names_and_long_tokens(self, indian_catalog):
        keywords = extract_keywords(indian_catalog)

        assert keywords[:3] == ["malai kofta", "malai", "kofta"]
        assert "garlic naan" in keywords
        assert "garlic" in keywords
        assert "biryani" in keywords

    def test_short_single_word_names_are_skipped(self):
        keywords = extract_keywords([item("1", "Rice"), item("2", "Lassi"), item("3", "Naan")])
        assert keywords == ["lassi"]

    def test_blacklisted_tokens_are_skipped(self):
        """'naan' sounds like 'an' and must never be boosted on its own."""
        keywords = extract_keywords([item("1", "Garlic Naan"), item("2", "Butter Naan")])
        assert "naan" not in keywords
        assert "butter naan" in keywords

    def test_paneer_tikka(self):
        keywords = extract_keywords([item("1", "Paneer Tikka")])
        assert keywords == ["paneer tikka", "paneer", "tikka"]

    def test_enrichment_fields_are_included(self):
        enriched = item(
            "1", "Butter Chicken",
            phonetic_name="butter chicken",
            stt_keywords=["Murgh Makhani", "makhani", "bc"],
        )
        keywords = extract_keywords([enriched])

        assert "murgh makhani" in keywords
        assert "makhani" in keywords
        assert "bc" not in keywords
        assert keywords.count("butter chicken") == 1

    def test_cuisine_aliases_add_both_sides(self):
        aliases = get_cuisine_profile("indian").phonetic_corrections
        keywords = extract_keywords([item("1", "Malai Kofta")], aliases)

        assert "malay" in keywords
        assert "costa" in keywords
        assert "pista" in keywords
        assert keywords.count("malai") == 1

    def test_deduplicated_case_insensitively(self):
        keywords = extract_keywords([
            item("1", "Chicken Tikka"),
            item("2", "CHICKEN TIKKA"),
            item("3", "Chicken Curry"),
        ])
        assert len(keywords) == len(set(keywords))
        assert keywords.count("chicken") == 1
        assert all(k == k.lower() for k in keywords)

    def test_capped(self, caplog):
        items = [item(str(i), f"Special Dish{i:03d} Platter") for i in range(100)]
        with caplog.at_level(logging.INFO, logger="voice_order.vocabulary"):
            keywords = extract_keywords(items, max_keywords=25)

        assert len(keywords) == 25
        assert "truncated" in caplog.text

    def test_cap_keeps_cuisine_pairs(self):
        """A large menu fills the cap, but every misheard/corrected pair is still boosted."""
        aliases = get_cuisine_profile("indian").phonetic_corrections
        items = [item(str(i), f"House Curry{i:03d} Thali") for i in range(80)]

        keywords = extract_keywords(items, aliases)

        assert len(keywords) <= 190
        for misheard, corrected in aliases.items():
            assert misheard in keywords
            assert corrected in keywords
        assert keywords[0] == "house curry000 thali"

    def test_pairs_alone_respect_the_ceiling(self):
        aliases = get_cuisine_profile("indian").phonetic_corrections
        keywords = extract_keywords([item("1", "Malai Kofta")], aliases, max_keywords=5)
        assert len(keywords) == 5

    def test_item_limit(self):
        items = [item(str(i), f"Thali Number{i:03d}") for i in range(10)]
        keywords = extract_keywords(items, max_items=2)
        assert "thali number002" not in keywords
        assert "thali number001" in keywords

    def test_empty(self):
        assert extract_keywords([]) == []
        assert extract_keywords(None) == []


class TestRecognizerBoosts:
    def test_pairs_with_weight(self):
        assert to_recognizer_boosts(["malai kofta"], weight=3.0) == [("malai kofta", 3.0)]

    def test_default_weight(self):
        assert to_recognizer_boosts(["kofta"]) == [("kofta", 2.0)]
