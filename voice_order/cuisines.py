"""
Cuisine profiles.

Each profile carries the phonetic corrections that speech recognizers get
wrong for that cuisine (misheard form -> corrected form). They feed two
places:

- the vocabulary extractor, which boosts both sides of every pair;
- menu search, which silently rewrites misheard words before matching.

Cart resolution never applies these corrections: several of them ("butter"
-> "pakora") only make sense for free-form questions, not for item names.
"""

import re
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class CuisineProfile:
    name: str
    phonetic_corrections: Dict[str, str] = field(default_factory=dict)


CUISINE_PROFILES: Dict[str, CuisineProfile] = {
    "indian": CuisineProfile(
        name="Indian",
        phonetic_corrections={
            "bone": "goan",
            "cone": "goan",
            "gourd": "goan",
            "gone": "goan",
            "biden": "baingan",
            "byun": "baingan",
            "bertha": "bharta",
            "barra": "vada",
            "power": "pav",
            "pao": "pav",
            "butter": "pakora",
            "batura": "bhatura",
            "hakka": "schezwan",
            "manchurian": "gobhi manchurian",
            "curry": "kadai",
            "pan": "paneer",
            "pen": "paneer",
            "shahi": "shahi paneer",
            "malay": "malai",
            "costa": "pista",
            "pasta": "pista",
        },
    ),
    "chinese": CuisineProfile(
        name="Chinese",
        phonetic_corrections={
            "dimsum": "dim sum",
            "shrimp": "prawn",
            "chow mein": "chowmein",
            "zhao": "xiao",
        },
    ),
    "american": CuisineProfile(
        name="American",
        phonetic_corrections={"burger": "hamburger", "fries": "french fries"},
    ),
    "mexican": CuisineProfile(
        name="Mexican",
        phonetic_corrections={"guac": "guacamole", "queso": "cheese", "taco": "tacos"},
    ),
    "italian": CuisineProfile(
        name="Italian",
        phonetic_corrections={"pasta": "pastas", "pizza": "pizzas"},
    ),
    "thai": CuisineProfile(
        name="Thai",
        phonetic_corrections={"pad": "pad", "thai": "thai", "panang": "panang", "massaman": "massaman"},
    ),
    "japanese": CuisineProfile(
        name="Japanese",
        phonetic_corrections={"ramen": "ramen", "sashimi": "sashimi", "nigiri": "nigiri", "tempura": "tempura"},
    ),
    "korean": CuisineProfile(
        name="Korean",
        phonetic_corrections={"bulgogi": "bulgogi", "kimchi": "kimchi", "bibimbap": "bibimbap"},
    ),
    "vietnamese": CuisineProfile(
        name="Vietnamese",
        phonetic_corrections={"pho": "pho", "banh": "banh", "bun": "bun"},
    ),
    "mediterranean": CuisineProfile(
        name="Mediterranean",
        phonetic_corrections={"gyros": "gyro", "hummus": "hummus", "falafel": "falafel", "tzatziki": "tzatziki"},
    ),
    "middle_eastern": CuisineProfile(
        name="Middle Eastern",
        phonetic_corrections={"shwarma": "shawarma", "kebab": "kebab", "kofta": "kofta", "tabbouleh": "tabbouleh"},
    ),
    "greek": CuisineProfile(
        name="Greek",
        phonetic_corrections={"gyros": "gyro", "souvlaki": "souvlaki", "spanakopita": "spanakopita"},
    ),
    "default": CuisineProfile(name="General"),
}


def get_cuisine_profile(name: str | None) -> CuisineProfile:
    """Case-insensitive lookup; unknown or empty names get the default profile."""
    key = (name or "").strip().lower().replace(" ", "_").replace("-", "_")
    return CUISINE_PROFILES.get(key, CUISINE_PROFILES["default"])


def apply_phonetic_corrections(query: str, profile: CuisineProfile) -> str:
    """
    Rewrite misheard words in a lowercase copy of `query`.

    Matches whole words only, longest misheard form first, so "pan" does not
    touch "paneer". Each word is rewritten at most once.
    """
    fixed = (query or "").lower()
    if not profile.phonetic_corrections or not fixed:
        return fixed

    misheard = sorted(profile.phonetic_corrections, key=len, reverse=True)
    pattern = re.compile(r"\b(" + "|".join(re.escape(m) for m in misheard) + r")\b")
    return pattern.sub(lambda m: profile.phonetic_corrections[m.group(1)], fixed)
