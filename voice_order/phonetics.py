"""
Phonetic encoding and edit distance.

Sound-alike comparison uses double metaphone codes: each word of a phrase is
encoded separately and the word codes are joined with a space, so a phrase
keeps its word boundaries ("malai kofta" -> "ML KFT"). A phrase gets a primary
code and, when any word has an alternate pronunciation, a second code built
from the alternates.
"""

from functools import lru_cache

from metaphone import doublemetaphone
from rapidfuzz.distance import Levenshtein

from .text import tokenize


@lru_cache(maxsize=4096)
def _word_codes(word: str) -> tuple[str, str]:
    primary, secondary = doublemetaphone(word)
    return primary or "", secondary or primary or ""


def encode(text: str | None) -> list[str]:
    """
    Encode a phrase into 0-2 phonetic codes.

    Words that produce no code (digits, stray symbols) are skipped.

    Returns:
        [] when nothing is encodable, [primary] when every word has a single
        pronunciation, [primary, alternate] otherwise.
    """
    primaries = []
    alternates = []
    for word in tokenize(text):
        primary, alternate = _word_codes(word)
        if not primary:
            continue
        primaries.append(primary)
        alternates.append(alternate)

    if not primaries:
        return []

    codes = [" ".join(primaries)]
    alternate_code = " ".join(alternates)
    if alternate_code != codes[0]:
        codes.append(alternate_code)
    return codes


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert/delete/substitute, unit cost)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """1 - distance / max_len; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest
