"""
Configuration Module for the Voice Order Engine
===============================================

This module centralizes all configuration settings, environment variables, and
static tables used by the order resolution pipeline. Values are read once at
import time from the process environment (and from a `.env` file at the
project root, if present).

Configuration Categories:
-------------------------
- **Matching**: Signal weights and decision-gate thresholds used by the
  resolution engine. These were tuned against real call transcripts; keep the
  defaults unless you have a regression suite to back a change.

- **Enrichment**: Batch size and model used for menu intelligence.

- **Vocabulary**: Limits for the speech recognizer keyword list.

- **Database**: SQLAlchemy URL for the enrichment store.

- **Safety Data**: Static allergen risk table, keyword blacklist and
  conversational stop words.

Environment Variables:
----------------------
- MATCH_PHONETIC_WEIGHT / MATCH_TOKEN_WEIGHT / MATCH_KEYWORD_WEIGHT
- MATCH_MIN_SCORE (default: 0.55)
- MATCH_AMBIGUITY_MARGIN (default: 0.08)
- MATCH_SUGGESTION_FLOOR (default: 0.35)
- ENRICHMENT_BATCH_SIZE (default: 20)
- AI_MENU_INTELLIGENCE_MODEL (default: "gpt-4o")
- VOCAB_MAX_ITEMS (default: 150), VOCAB_MAX_KEYWORDS (default: 190)
- DATABASE_URL (default: local SQLite file)

Usage:
------
    from voice_order.config import MatchThresholds, DIETARY_RISK_TABLE

    thresholds = MatchThresholds(min_score=0.6)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


# =============================================================================
# Matching Configuration
# =============================================================================
# Phonetic similarity is the main recovery mechanism for STT mis-hearings,
# token similarity anchors on word structure, curated keywords only nudge ties.

MATCH_PHONETIC_WEIGHT: float = _env_float("MATCH_PHONETIC_WEIGHT", 0.5)
MATCH_TOKEN_WEIGHT: float = _env_float("MATCH_TOKEN_WEIGHT", 0.4)
MATCH_KEYWORD_WEIGHT: float = _env_float("MATCH_KEYWORD_WEIGHT", 0.1)

# Decision gates
MATCH_MIN_SCORE: float = _env_float("MATCH_MIN_SCORE", 0.55)
MATCH_AMBIGUITY_MARGIN: float = _env_float("MATCH_AMBIGUITY_MARGIN", 0.08)
MATCH_SUGGESTION_FLOOR: float = _env_float("MATCH_SUGGESTION_FLOOR", 0.35)
MATCH_MAX_SUGGESTIONS: int = _env_int("MATCH_MAX_SUGGESTIONS", 2)

# Per-token similarities at or below this are floored to zero
TOKEN_SIMILARITY_FLOOR: float = _env_float("TOKEN_SIMILARITY_FLOOR", 0.6)


@dataclass(frozen=True)
class MatchThresholds:
    """Tunable weights and gates for the resolution engine."""
    phonetic_weight: float = MATCH_PHONETIC_WEIGHT
    token_weight: float = MATCH_TOKEN_WEIGHT
    keyword_weight: float = MATCH_KEYWORD_WEIGHT
    min_score: float = MATCH_MIN_SCORE
    ambiguity_margin: float = MATCH_AMBIGUITY_MARGIN
    suggestion_floor: float = MATCH_SUGGESTION_FLOOR
    max_suggestions: int = MATCH_MAX_SUGGESTIONS
    token_similarity_floor: float = TOKEN_SIMILARITY_FLOOR


# =============================================================================
# Enrichment Configuration
# =============================================================================

# Items per model call; keeps prompts inside the context window
ENRICHMENT_BATCH_SIZE: int = _env_int("ENRICHMENT_BATCH_SIZE", 20)
MENU_INTELLIGENCE_MODEL: str = os.getenv("AI_MENU_INTELLIGENCE_MODEL", "gpt-4o")


# =============================================================================
# Vocabulary Configuration
# =============================================================================
# Recognizers reject keyword lists over ~200 entries.

VOCAB_MAX_ITEMS: int = _env_int("VOCAB_MAX_ITEMS", 150)
VOCAB_MAX_KEYWORDS: int = _env_int("VOCAB_MAX_KEYWORDS", 190)
VOCAB_MIN_TOKEN_LENGTH: int = _env_int("VOCAB_MIN_TOKEN_LENGTH", 5)
VOCAB_BOOST_WEIGHT: float = _env_float("VOCAB_BOOST_WEIGHT", 2.0)


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{BASE_DIR / 'menu_enrichment.db'}"
)


# =============================================================================
# Safety Data
# =============================================================================

# Restriction category -> substrings that make a dish high risk.
# This runs even when enrichment tags are missing.
DIETARY_RISK_TABLE: Dict[str, List[str]] = {
    "nuts": [
        "korma", "massaman", "pesto", "satay", "pad thai", "cashew",
        "almond", "walnut", "peanut", "butter chicken",  # cashew paste
    ],
    "dairy": [
        "korma", "paneer", "malai", "butter chicken", "cream", "cheese",
        "alfredo", "milk", "yogurt", "shake", "smoothie",
    ],
    "gluten": [
        "naan", "bread", "bun", "pasta", "pizza", "ravioli", "samosa",
        "tempura", "noodle", "tortilla", "wrap",
    ],
    "shellfish": ["prawn", "shrimp", "lobster", "crab", "mussel", "scallop"],
    "vegan_unfriendly": [
        "chicken", "lamb", "beef", "pork", "egg", "fish", "dairy", "honey",
        "paneer",
    ],
}

# Words that must never be boosted as recognizer keywords: they sound like
# common English filler ("naan" is heard as "a/an") and cause hallucinations.
COMMON_WORD_BLACKLIST: List[str] = [
    "naan", "nan",
    "the", "and", "with", "for", "from",
    "order", "please", "like", "want", "would",
    "have", "some", "many", "more", "that",
    "this", "what", "when", "where", "which",
]

# Conversational words that are never orderable on their own
ORDER_STOP_WORDS: List[str] = [
    "pickup", "pick up", "delivery", "menu", "cancel", "checkout",
    "check out", "order", "yes", "no", "thanks", "thank you", "done",
    "thats it",
]
