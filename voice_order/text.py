"""
Text normalization shared by every scorer.

Transcripts and catalog names go through the same function so that
"Paneer Tikka (Spicy)" and "paneer tikka spicy" compare equal.
"""

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """
    Lowercase, strip punctuation and collapse whitespace.

    Accents are folded to ASCII first ("Crème Brûlée" -> "creme brulee").
    Punctuation is removed rather than replaced, so "pick-up" becomes
    "pickup" and "that's" becomes "thats".

    Args:
        text: Any string; None is treated as empty.

    Returns:
        A string containing only [a-z0-9] and single spaces, trimmed.
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKD", str(text))
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    stripped = _NON_ALNUM.sub("", folded)
    return _WHITESPACE.sub(" ", stripped).strip()


def tokenize(text: str | None) -> list[str]:
    """Normalize then split into whitespace tokens."""
    normalized = normalize(text)
    return normalized.split() if normalized else []
