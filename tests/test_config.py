"""
Tests for configuration defaults.
"""
from voice_order import config
from voice_order.config import MatchThresholds


class TestMatchThresholds:
    def test_defaults_are_preserved(self):
        thresholds = MatchThresholds()
        assert (thresholds.phonetic_weight, thresholds.token_weight, thresholds.keyword_weight) == (0.5, 0.4, 0.1)
        assert thresholds.min_score == 0.55
        assert thresholds.ambiguity_margin == 0.08
        assert thresholds.suggestion_floor == 0.35
        assert thresholds.max_suggestions == 2

    def test_weights_sum_to_one(self):
        t = MatchThresholds()
        assert abs(t.phonetic_weight + t.token_weight + t.keyword_weight - 1.0) < 1e-9

    def test_override(self):
        assert MatchThresholds(min_score=0.7).min_score == 0.7


class TestStaticTables:
    def test_risk_table_categories(self):
        assert set(config.DIETARY_RISK_TABLE) == {"nuts", "dairy", "gluten", "shellfish", "vegan_unfriendly"}
        assert "cashew" in config.DIETARY_RISK_TABLE["nuts"]
        assert "korma" in config.DIETARY_RISK_TABLE["nuts"]

    def test_naan_is_never_boosted(self):
        assert "naan" in config.COMMON_WORD_BLACKLIST

    def test_limits(self):
        assert config.ENRICHMENT_BATCH_SIZE == 20
        assert config.VOCAB_MAX_KEYWORDS == 190
        assert config.VOCAB_MAX_ITEMS == 150
