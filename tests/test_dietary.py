"""
Tests for the dietary safety validator.
"""
import pytest

from voice_order.dietary import check_restriction, restriction_category, validate
from voice_order.matching import resolve
from voice_order.schemas.menu import MenuItem


def item(name, **extra):
    return MenuItem(id=name.lower().replace(" ", "_"), name=name, price=1000, **extra)


class TestRestrictionCategory:
    @pytest.mark.parametrize("text, category", [
        ("nuts", "nuts"),
        ("Peanut allergy", "nuts"),
        ("lactose intolerant", "dairy"),
        ("no milk", "dairy"),
        ("Gluten free", "gluten"),
        ("wheat", "gluten"),
        ("shellfish", "shellfish"),
        ("prawns", "shellfish"),
        ("vegetarian", "vegan_unfriendly"),
        ("vegan", "vegan_unfriendly"),
    ])
    def test_sniffs_category(self, text, category):
        assert restriction_category(text) == category

    def test_unknown(self):
        assert restriction_category("sesame") is None
        assert restriction_category("") is None
        assert restriction_category(None) is None


class TestCheckRestriction:
    def test_korma_is_a_nut_risk(self):
        verdict = check_restriction("Chicken Korma", "nut allergy")
        assert verdict.safe is False
        assert '"korma"' in verdict.reason
        assert "Chicken Korma" in verdict.reason

    def test_prawn_is_a_shellfish_risk(self):
        verdict = check_restriction("Prawn Masala", "shellfish")
        assert verdict.safe is False
        assert "prawn" in verdict.reason

    def test_naan_is_a_gluten_risk(self):
        assert check_restriction("Garlic Naan", "gluten").safe is False

    def test_safe_item(self):
        assert check_restriction("Fish Curry", "nuts").safe is True

    def test_unknown_restriction_is_unverifiable_and_passes(self):
        verdict = check_restriction("Chicken Korma", "sesame")
        assert verdict.safe is True
        assert verdict.reason is None


class TestValidate:
    def test_no_allergies_is_always_safe(self):
        risky = item("Butter Chicken Cashew", dietary_tags=["nuts", "dairy"])
        assert validate(risky, set()).safe is True
        assert validate(risky, None).safe is True
        assert validate(risky, [" ", ""]).safe is True

    def test_tag_conflict_blocks(self):
        kofta = item("Malai Kofta", dietary_tags=["dairy", "nuts"])
        verdict = validate(kofta, {"nuts"})
        assert verdict.safe is False
        assert '"nuts"' in verdict.reason

    def test_tag_overlap_is_fuzzy(self):
        """'nuts' tag vs 'tree nuts' declaration, 'dairy' vs 'dairy free'."""
        assert validate(item("Pasanda", dietary_tags=["nuts"]), {"tree nuts"}).safe is False
        assert validate(item("Lassi", dietary_tags=["dairy"]), {"Dairy Free"}).safe is False

    def test_tag_matches_restriction_category(self):
        """How customers actually phrase it: "nut allergy", "lactose intolerant"."""
        kofta = item("Malai Kofta", dietary_tags=["nuts"])
        verdict = validate(kofta, {"nut allergy"})
        assert verdict.safe is False
        assert '"nuts"' in verdict.reason

        lassi = item("Mango Lassi", dietary_tags=["dairy"])
        verdict = validate(lassi, {"lactose intolerant"})
        assert verdict.safe is False
        assert '"dairy"' in verdict.reason

    def test_category_match_does_not_cross_categories(self):
        assert validate(item("Mango Lassi", dietary_tags=["dairy"]), {"nut allergy"}).safe is True

    def test_table_runs_without_enrichment(self):
        """Static table catches the risk even when the item was never tagged."""
        verdict = validate(item("Chicken Korma"), {"nuts"})
        assert verdict.safe is False
        assert "korma" in verdict.reason

    def test_table_runs_when_tags_miss_the_risk(self):
        verdict = validate(item("Paneer Butter Masala", dietary_tags=["vegetarian"]), {"lactose"})
        assert verdict.safe is False
        assert "paneer" in verdict.reason

    def test_unrelated_allergy_passes(self):
        assert validate(item("Fish Curry", dietary_tags=["fish"]), {"gluten"}).safe is True

    def test_unknown_restriction_passes(self):
        assert validate(item("Chicken Korma"), {"sesame"}).safe is True

    def test_any_of_several_allergies_blocks(self):
        assert validate(item("Garlic Naan"), {"shellfish", "gluten"}).safe is False


class TestCashewScenario:
    def test_nut_allergy_blocks_cashew_variant(self):
        catalog = [item("Butter Chicken"), item("Butter Chicken Cashew")]
        result = resolve("Butter Chicken Cashew", catalog)
        assert result.match.name == "Butter Chicken Cashew"

        verdict = validate(result.match, {"nuts"})
        assert verdict.safe is False
        assert "cashew" in verdict.reason
