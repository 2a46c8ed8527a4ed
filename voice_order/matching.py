"""
Menu Resolution Engine.

Resolves one spoken item reference against the (possibly partially enriched)
catalog. Each catalog item gets three independent similarity signals:

- phonetic: double metaphone codes of transcript vs. phonetic name
- token: per-word edit similarity, normalized by the longer word count
- keyword: curated synonyms from enrichment

The signals are fused with fixed weights; an exact/prefix/substring hit on
the raw name overrides the fused score. The ranked candidates then go through
the decision gates (reject / suggest / perfect match / ambiguous / match).

The engine is pure and synchronous. It never raises on bad input: anything it
cannot resolve comes back as NO_RESULT, which the caller must turn into
"please repeat that", never into a silent no-op.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from .config import MatchThresholds, ORDER_STOP_WORDS
from .phonetics import encode, similarity
from .schemas.menu import MenuItem
from .text import normalize, tokenize

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    """Outcome of one matching attempt."""
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    SUGGESTIONS = "suggestions"
    NO_RESULT = "no_result"


@dataclass(frozen=True)
class SignalBreakdown:
    """Per-signal scores for one candidate (diagnostics only)."""
    phonetic: float
    token: float
    keyword: float
    direct: float


@dataclass(frozen=True)
class ScoredCandidate:
    item: MenuItem
    score: float
    breakdown: SignalBreakdown


@dataclass(frozen=True)
class ResolutionResult:
    """
    Exactly one of: a match (with score), an ambiguous pair, a suggestion
    list, or nothing. Use the constructors below; they keep the other
    outcome fields empty.
    """
    status: ResolutionStatus
    match: Optional[MenuItem] = None
    score: Optional[float] = None
    ambiguous: tuple = ()
    suggestions: tuple = ()
    candidates: tuple = field(default=(), compare=False)

    @classmethod
    def matched(cls, candidate: ScoredCandidate, candidates: Sequence[ScoredCandidate] = ()) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.MATCHED,
            match=candidate.item,
            score=candidate.score,
            candidates=tuple(candidates),
        )

    @classmethod
    def ambiguous_pair(
        cls, first: MenuItem, second: MenuItem, candidates: Sequence[ScoredCandidate] = ()
    ) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.AMBIGUOUS,
            ambiguous=(first, second),
            candidates=tuple(candidates),
        )

    @classmethod
    def suggest(cls, items: Sequence[MenuItem], candidates: Sequence[ScoredCandidate] = ()) -> "ResolutionResult":
        return cls(
            status=ResolutionStatus.SUGGESTIONS,
            suggestions=tuple(items),
            candidates=tuple(candidates),
        )

    @classmethod
    def no_result(cls, candidates: Sequence[ScoredCandidate] = ()) -> "ResolutionResult":
        return cls(status=ResolutionStatus.NO_RESULT, candidates=tuple(candidates))

    @property
    def is_match(self) -> bool:
        return self.status is ResolutionStatus.MATCHED


# =============================================================================
# Signal scorers
# =============================================================================

def phonetic_score(transcript: str, item: MenuItem) -> float:
    """
    Compare the sound skeleton of the transcript with the item.

    Uses `item.phonetic_name` when enrichment supplied one, otherwise the
    display name. Identical codes score 1.0, a code contained in the other
    0.8, anything else its normalized edit similarity. The best pairing of
    primary/alternate codes wins.
    """
    transcript_codes = encode(transcript)
    item_codes = encode(item.phonetic_name or item.name)
    if not transcript_codes or not item_codes:
        return 0.0

    best = 0.0
    for a in transcript_codes:
        for b in item_codes:
            if a == b:
                return 1.0
            if a in b or b in a:
                score = 0.8
            else:
                score = similarity(a, b)
            best = max(best, score)
    return best


def token_score(transcript: str, name: str, floor: float = 0.6) -> float:
    """
    Word-level similarity.

    Each transcript word takes its best similarity against the item's words
    (similarities at or below `floor` count as zero). The sum is divided by
    the larger word count, so both missing and extra words cost the same.
    """
    spoken = tokenize(transcript)
    target = tokenize(name)
    if not spoken or not target:
        return 0.0

    total = 0.0
    for word in spoken:
        best = 0.0
        for candidate in target:
            if word == candidate:
                best = 1.0
                break
            sim = similarity(word, candidate)
            if sim > floor and sim > best:
                best = sim
        total += best

    return total / max(len(spoken), len(target))


def keyword_score(transcript: str, item: MenuItem) -> float:
    """
    Curated synonym hit: 1.0 exact, 0.8 when a synonym contains the
    transcript, 0 otherwise (and always 0 for un-enriched items).
    """
    if not item.stt_keywords:
        return 0.0
    spoken = normalize(transcript)
    if not spoken:
        return 0.0

    keywords = [normalize(k) for k in item.stt_keywords]
    keywords = [k for k in keywords if k]
    if spoken in keywords:
        return 1.0
    if any(spoken in k for k in keywords):
        return 0.8
    return 0.0


def direct_match_bonus(transcript: str, name: str) -> float:
    """Exact 1.0, prefix 0.95, substring 0.85 (normalized, either direction)."""
    spoken = normalize(transcript)
    target = normalize(name)
    if not spoken or not target:
        return 0.0
    if spoken == target:
        return 1.0
    if target.startswith(spoken) or spoken.startswith(target):
        return 0.95
    if spoken in target or target in spoken:
        return 0.85
    return 0.0


# =============================================================================
# Resolver
# =============================================================================

class MenuResolver:
    """
    Fuses the signal scores and applies the decision gates.

    Safe to share between concurrent sessions: it holds only its
    configuration.
    """

    def __init__(
        self,
        thresholds: MatchThresholds | None = None,
        stop_words: Iterable[str] | None = None,
    ):
        self.thresholds = thresholds or MatchThresholds()
        words = ORDER_STOP_WORDS if stop_words is None else stop_words
        self.stop_words = frozenset(normalize(w) for w in words)

    def score_item(self, transcript: str, item: MenuItem) -> ScoredCandidate:
        """Compute the final score for one catalog item."""
        t = self.thresholds
        breakdown = SignalBreakdown(
            phonetic=phonetic_score(transcript, item),
            token=token_score(transcript, item.name, floor=t.token_similarity_floor),
            keyword=keyword_score(transcript, item),
            direct=direct_match_bonus(transcript, item.name),
        )
        weighted = (
            breakdown.phonetic * t.phonetic_weight
            + breakdown.token * t.token_weight
            + breakdown.keyword * t.keyword_weight
        )
        return ScoredCandidate(item=item, score=max(weighted, breakdown.direct), breakdown=breakdown)

    def rank(self, transcript: str, catalog: Iterable[MenuItem]) -> list[ScoredCandidate]:
        """Score every item and sort descending; ties keep catalog order."""
        scored = [self.score_item(transcript, item) for item in catalog]
        scored.sort(key=lambda c: c.score, reverse=True)
        return scored

    def resolve(self, transcript: str, catalog: Iterable[MenuItem] | None) -> ResolutionResult:
        """
        Resolve a transcript to a catalog item.

        Args:
            transcript: Raw speech-to-text output for one item reference.
            catalog: Current menu items, enriched or not.

        Returns:
            A ResolutionResult with exactly one outcome populated.
        """
        t = self.thresholds
        spoken = normalize(transcript)

        if not spoken:
            logger.debug("Empty transcript, nothing to resolve")
            return ResolutionResult.no_result()

        if spoken in self.stop_words:
            logger.info("Transcript %r is a conversational stop word, not an item", spoken)
            return ResolutionResult.no_result()

        ranked = self.rank(spoken, catalog or [])
        if not ranked:
            logger.info("No catalog items to match %r against", spoken)
            return ResolutionResult.no_result()

        debug_candidates = ranked[:3]
        top = ranked[0]

        # Gate 1: minimum score, with a softer band for suggestions
        if top.score < t.min_score:
            suggestions = [c.item for c in ranked if c.score >= t.suggestion_floor][: t.max_suggestions]
            if suggestions:
                logger.info(
                    "Low confidence for %r (%.2f < %.2f), suggesting %s",
                    spoken, top.score, t.min_score, [s.name for s in suggestions],
                )
                return ResolutionResult.suggest(suggestions, debug_candidates)
            logger.info("No match for %r (best %.2f)", spoken, top.score)
            return ResolutionResult.no_result(debug_candidates)

        # Gate 2: an exact or near-exact hit is trusted even with a close runner-up
        if top.score >= 1.0:
            logger.info("Exact match: %r -> %r", spoken, top.item.name)
            return ResolutionResult.matched(top, debug_candidates)

        # Gate 3: ambiguity margin
        if len(ranked) > 1:
            runner_up = ranked[1]
            if top.score - runner_up.score < t.ambiguity_margin:
                logger.info(
                    "Ambiguous: %r vs %r (margin %.2f)",
                    top.item.name, runner_up.item.name, top.score - runner_up.score,
                )
                return ResolutionResult.ambiguous_pair(top.item, runner_up.item, debug_candidates)

        logger.info("Match: %r -> %r (score %.2f)", spoken, top.item.name, top.score)
        return ResolutionResult.matched(top, debug_candidates)


_default_resolver = MenuResolver()


def resolve(transcript: str, catalog: Iterable[MenuItem] | None) -> ResolutionResult:
    """Resolve with the default (environment-configured) thresholds."""
    return _default_resolver.resolve(transcript, catalog)
