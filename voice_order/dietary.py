"""
Dietary Safety Validator.

Two independent checks guard every cart addition:

1. Tag check: enrichment-provided `dietary_tags` fuzzily overlapping any
   declared allergy or its canonical category ("dairy" vs "dairy free",
   "nuts" vs "nut allergy", "dairy" vs "lactose intolerant").
2. Risk-table check: the declared restriction is mapped to a canonical
   category and the item name is searched for that category's high-risk
   substrings. This runs whether or not the item has been enriched.

A restriction that maps to no known category cannot be verified here and
passes; the kitchen still has to be told about it.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import DIETARY_RISK_TABLE
from .schemas.menu import MenuItem
from .text import normalize

logger = logging.getLogger(__name__)

# Checked in order; the first keyword found in the restriction text wins.
RESTRICTION_KEYWORDS = [
    ("nuts", ["nut"]),
    ("dairy", ["dairy", "milk", "lactose"]),
    ("gluten", ["gluten", "wheat"]),
    ("shellfish", ["shell", "shrimp", "prawn"]),
    ("vegan_unfriendly", ["vegan", "vegetarian"]),
]


@dataclass(frozen=True)
class SafetyVerdict:
    safe: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "SafetyVerdict":
        return cls(safe=True)

    @classmethod
    def blocked(cls, reason: str) -> "SafetyVerdict":
        return cls(safe=False, reason=reason)


def restriction_category(restriction: str | None) -> str | None:
    """Map free-text like "lactose intolerant" to a risk-table key, or None."""
    text = (restriction or "").lower()
    if not text:
        return None
    for category, keywords in RESTRICTION_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return None


def check_restriction(item_name: str, restriction: str) -> SafetyVerdict:
    """
    Check one item name against one restriction using the static risk table.

    Returns a blocked verdict quoting the first risky substring found.
    """
    category = restriction_category(restriction)
    name = normalize(item_name)
    if not category or not name:
        return SafetyVerdict.ok()

    for risk in DIETARY_RISK_TABLE.get(category, []):
        if risk in name:
            return SafetyVerdict.blocked(
                f'Item "{item_name}" contains "{risk}", which is a risk for {restriction} allergies.'
            )
    return SafetyVerdict.ok()


def _tag_conflict(tags: Iterable[str], allergies: Iterable[str]) -> tuple[str, str] | None:
    """Match tags against the declaration text and its canonical category.

    "nut allergy" must hit a "nuts" tag and "lactose intolerant" a "dairy"
    tag, neither of which is a substring match on the raw text.
    """
    for allergy in allergies:
        if not allergy:
            continue
        terms = [allergy]
        category = restriction_category(allergy)
        if category:
            terms.append(category)
        for tag in tags:
            tag = (tag or "").strip().lower()
            if tag and any(tag in term or term in tag for term in terms):
                return tag, allergy
    return None


def validate(item: MenuItem, active_allergies: Iterable[str] | None) -> SafetyVerdict:
    """
    Decide whether `item` may enter the cart for a customer with the given
    declared allergies.

    Args:
        item: The resolved menu item.
        active_allergies: Session-scoped declarations (any case).

    Returns:
        SafetyVerdict; `reason` names the offending tag or ingredient.
    """
    allergies = sorted({a.strip().lower() for a in (active_allergies or []) if a and a.strip()})
    if not allergies:
        return SafetyVerdict.ok()

    if item.dietary_tags:
        conflict = _tag_conflict(item.dietary_tags, allergies)
        if conflict:
            tag, allergy = conflict
            logger.warning("Blocked %r: tagged %r conflicts with declared %r", item.name, tag, allergy)
            return SafetyVerdict.blocked(
                f'Item "{item.name}" is tagged "{tag}", which conflicts with the declared {allergy} restriction.'
            )

    for allergy in allergies:
        verdict = check_restriction(item.name, allergy)
        if not verdict.safe:
            logger.warning("Blocked %r for %r: %s", item.name, allergy, verdict.reason)
            return verdict

    return SafetyVerdict.ok()
