"""
Order Session: the cart mutation boundary.

The conversation layer calls into an `OrderSession` for everything that
touches the cart. Every addition goes through resolution first and the
dietary safety check second; only a matched and safe item is appended.
Ambiguous and suggestion outcomes are handed back so the agent can ask the
customer, and a safety block is reported with its reason verbatim.

Allergy declarations are session scoped and append-only; `end()` clears
them together with the cart.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .cuisines import CuisineProfile, apply_phonetic_corrections, get_cuisine_profile
from .dietary import SafetyVerdict, check_restriction, validate
from .matching import MenuResolver, ResolutionResult, ResolutionStatus
from .schemas.menu import MenuItem

logger = logging.getLogger(__name__)


class OrderOutcomeStatus(str, Enum):
    ADDED = "added"
    AMBIGUOUS = "ambiguous"
    SUGGESTIONS = "suggestions"
    NO_RESULT = "no_result"
    SAFETY_BLOCKED = "safety_blocked"
    DUPLICATE = "duplicate"
    REMOVED = "removed"
    NOT_IN_CART = "not_in_cart"


@dataclass
class CartLine:
    item: MenuItem
    quantity: int
    notes: str = ""

    @property
    def line_total(self) -> int:
        return self.item.price * self.quantity


@dataclass(frozen=True)
class OrderOutcome:
    status: OrderOutcomeStatus
    item: Optional[MenuItem] = None
    quantity: int = 0
    candidates: tuple = ()
    reason: Optional[str] = None
    score: Optional[float] = None


_RESOLUTION_TO_OUTCOME = {
    ResolutionStatus.AMBIGUOUS: OrderOutcomeStatus.AMBIGUOUS,
    ResolutionStatus.SUGGESTIONS: OrderOutcomeStatus.SUGGESTIONS,
    ResolutionStatus.NO_RESULT: OrderOutcomeStatus.NO_RESULT,
}


@dataclass
class OrderSession:
    """State for one call: catalog snapshot, declared allergies and cart."""
    catalog: Sequence[MenuItem]
    cuisine: CuisineProfile = field(default_factory=lambda: get_cuisine_profile(None))
    resolver: MenuResolver = field(default_factory=MenuResolver)
    active_allergies: set = field(default_factory=set)
    cart: List[CartLine] = field(default_factory=list)
    _last_turn_key: Optional[tuple] = field(default=None, repr=False)

    # -------------------------------------------------------------------------
    # Dietary restrictions
    # -------------------------------------------------------------------------
    def log_restriction(self, restriction: str) -> str:
        """Record a declared allergy; returns the normalized form."""
        normalized = (restriction or "").strip().lower()
        if normalized:
            self.active_allergies.add(normalized)
            logger.info("Logged restriction %r, active: %s", normalized, sorted(self.active_allergies))
        return normalized

    def check_dietary_info(self, item_name: str, concern: str) -> SafetyVerdict:
        """Answer "is X ok for my Y allergy" against the static risk table."""
        return check_restriction(item_name, concern)

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------
    def search_menu(self, query: str) -> ResolutionResult:
        """Read-only lookup with the cuisine's misheard-word corrections applied."""
        fixed = apply_phonetic_corrections(query, self.cuisine)
        if fixed != (query or "").lower():
            logger.debug("Corrected query %r -> %r", query, fixed)
        return self.resolver.resolve(fixed, self.catalog)

    def add_to_order(
        self,
        transcript: str,
        quantity: int = 1,
        notes: str = "",
        turn_id: Optional[str] = None,
    ) -> OrderOutcome:
        """
        Resolve, validate, then append.

        The same (turn_id, transcript, quantity) twice in a row is treated
        as a duplicate tool call and ignored.
        """
        if turn_id is not None:
            turn_key = (turn_id, transcript, quantity)
            if turn_key == self._last_turn_key:
                logger.info("Ignoring duplicate add for %r in turn %s", transcript, turn_id)
                return OrderOutcome(status=OrderOutcomeStatus.DUPLICATE, quantity=quantity)
            self._last_turn_key = turn_key

        result = self.resolver.resolve(transcript, self.catalog)
        if not result.is_match:
            candidates = result.ambiguous or result.suggestions
            return OrderOutcome(status=_RESOLUTION_TO_OUTCOME[result.status], candidates=candidates)

        item = result.match
        verdict = validate(item, self.active_allergies)
        if not verdict.safe:
            return OrderOutcome(
                status=OrderOutcomeStatus.SAFETY_BLOCKED,
                item=item,
                quantity=quantity,
                reason=verdict.reason,
                score=result.score,
            )

        quantity = max(1, int(quantity or 1))
        self.cart.append(CartLine(item=item, quantity=quantity, notes=notes or ""))
        logger.info("Added to order: %s x%d (score %.2f)", item.name, quantity, result.score)
        return OrderOutcome(status=OrderOutcomeStatus.ADDED, item=item, quantity=quantity, score=result.score)

    def remove_from_order(self, item_name: str, quantity: Optional[int] = None) -> OrderOutcome:
        """Remove a line (or reduce its quantity) by case-insensitive name fragment."""
        query = (item_name or "").strip().lower()
        for index, line in enumerate(self.cart):
            if query and query in line.item.name.lower():
                if quantity and quantity < line.quantity:
                    line.quantity -= quantity
                    return OrderOutcome(status=OrderOutcomeStatus.REMOVED, item=line.item, quantity=line.quantity)
                del self.cart[index]
                return OrderOutcome(status=OrderOutcomeStatus.REMOVED, item=line.item, quantity=0)
        return OrderOutcome(status=OrderOutcomeStatus.NOT_IN_CART)

    def total_cents(self) -> int:
        return sum(line.line_total for line in self.cart)

    def end(self) -> None:
        """Call finished: forget allergies and cart."""
        self.active_allergies.clear()
        self.cart.clear()
        self._last_turn_key = None
