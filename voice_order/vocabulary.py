"""
Speech Recognizer Vocabulary.

Builds the keyword bias list handed to the speech recognizer at session
start. A good list makes the transcript resemble real menu names before the
resolution engine ever sees it; a bad one makes the recognizer hallucinate
dish names out of filler words. The rules are therefore conservative:

- full names only when multi-word, or single words of 5+ characters
- individual name tokens of 5+ characters
- enrichment phonetic names and synonym keywords (3+ characters)
- both sides of the cuisine's phonetic-correction pairs
- nothing on the common-word blacklist ("naan" sounds like "an")

Entries are lowercased, deduplicated in first-seen order and capped. The
cuisine pairs always survive the cap; item keywords are cut first.
"""

import logging
from typing import Iterable, Mapping

from .config import (
    COMMON_WORD_BLACKLIST,
    VOCAB_BOOST_WEIGHT,
    VOCAB_MAX_ITEMS,
    VOCAB_MAX_KEYWORDS,
    VOCAB_MIN_TOKEN_LENGTH,
)
from .schemas.menu import MenuItem
from .text import normalize

logger = logging.getLogger(__name__)

_BLACKLIST = frozenset(COMMON_WORD_BLACKLIST)


class _OrderedKeywords:
    def __init__(self):
        self._seen: set[str] = set()
        self.items: list[str] = []

    def add(self, keyword: str | None) -> None:
        keyword = " ".join((keyword or "").lower().split())
        if keyword and keyword not in self._seen:
            self._seen.add(keyword)
            self.items.append(keyword)


def _name_keywords(name: str, min_length: int) -> list[str]:
    normalized = normalize(name)
    tokens = normalized.split()
    keywords = []

    if len(tokens) > 1:
        keywords.append(normalized)
    elif len(normalized) >= min_length and normalized not in _BLACKLIST:
        keywords.append(normalized)

    for token in tokens:
        if len(token) >= min_length and token not in _BLACKLIST:
            keywords.append(token)
    return keywords


def _enrichment_keywords(item: MenuItem) -> list[str]:
    candidates = []
    if item.phonetic_name:
        candidates.append(item.phonetic_name)
    candidates.extend(item.stt_keywords or [])

    keywords = []
    for candidate in candidates:
        cleaned = " ".join(str(candidate).lower().split())
        if len(cleaned) > 2 and cleaned not in _BLACKLIST:
            keywords.append(cleaned)
    return keywords


def extract_keywords(
    items: Iterable[MenuItem],
    cuisine_aliases: Mapping[str, str] | None = None,
    max_items: int = VOCAB_MAX_ITEMS,
    max_keywords: int = VOCAB_MAX_KEYWORDS,
    min_token_length: int = VOCAB_MIN_TOKEN_LENGTH,
) -> list[str]:
    """
    Derive the recognizer keyword list from an (enriched) catalog.

    Args:
        items: Catalog items; only the first `max_items` are considered.
        cuisine_aliases: Misheard -> corrected pairs from the cuisine profile.
        max_items: Items processed at most.
        max_keywords: Hard ceiling on the returned list.
        min_token_length: Minimum length for single words.

    Returns:
        Ordered, deduplicated (case-insensitive) keywords.
    """
    aliases = _OrderedKeywords()
    for misheard, corrected in (cuisine_aliases or {}).items():
        aliases.add(misheard)
        aliases.add(corrected)

    item_keywords = _OrderedKeywords()
    for index, item in enumerate(items or []):
        if index >= max_items:
            break
        for keyword in _name_keywords(item.name, min_token_length):
            item_keywords.add(keyword)
        for keyword in _enrichment_keywords(item):
            item_keywords.add(keyword)

    # Cuisine pairs always fit; item keywords get what is left
    budget = max(0, max_keywords - len(aliases.items))
    if len(item_keywords.items) > budget:
        logger.info(
            "Recognizer vocabulary truncated from %d to %d item keywords (%d reserved for cuisine pairs)",
            len(item_keywords.items), budget, len(aliases.items),
        )

    keywords = _OrderedKeywords()
    for keyword in item_keywords.items[:budget]:
        keywords.add(keyword)
    for keyword in aliases.items:
        keywords.add(keyword)
    return keywords.items[:max_keywords]


def to_recognizer_boosts(keywords: Iterable[str], weight: float = VOCAB_BOOST_WEIGHT) -> list[tuple[str, float]]:
    """Format keywords as (term, weight) pairs for recognizers that take weights."""
    return [(keyword, weight) for keyword in keywords]
