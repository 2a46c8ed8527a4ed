"""
Menu Enrichment Service.

Augments raw catalog items with AI-derived metadata (allergen tags, implied
ingredients, a phonetic name and synonym keywords) and merges stored
enrichment back into the live catalog.

Two paths with very different guarantees:

- `enrich` / `launch`: slow, best-effort, network bound. Items are sent to
  the model in batches; every batch is isolated, so a failed or unparseable
  batch is logged and skipped while the others carry on. Records are upserted
  one item at a time, which keeps each record consistent for concurrent
  readers.

- `merge`: fast, read-only, local. Attaches whatever enrichment is already
  stored and passes everything else through unchanged. It never waits on
  `enrich`, so callers may see partially enriched or un-enriched data.

Usage:
    service = MenuEnrichmentService(EnrichmentStore())
    service.launch("rest_42", raw_items)        # inside a running event loop
    items = service.merge("rest_42", raw_items)  # any time, never blocks
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import ENRICHMENT_BATCH_SIZE, MENU_INTELLIGENCE_MODEL
from .db import SessionLocal, init_db, session_scope
from .exceptions import EnrichmentBatchFailure, EnrichmentNotConfigured
from .models import MenuItemEnrichment
from .schemas.enrichment import BatchAnalysis, ItemAnalysis
from .schemas.menu import MenuItem

logger = logging.getLogger(__name__)


# =============================================================================
# Store
# =============================================================================

@dataclass(frozen=True)
class StoredEnrichment:
    """Detached snapshot of one enrichment record."""
    item_id: str
    item_name: str
    dietary_tags: list = field(default_factory=list)
    ingredients: list = field(default_factory=list)
    phonetic_name: str | None = None
    stt_keywords: list = field(default_factory=list)


@dataclass
class EnrichmentLookup:
    by_id: dict = field(default_factory=dict)
    by_name: dict = field(default_factory=dict)

    def find(self, item: MenuItem) -> StoredEnrichment | None:
        """Look up by item id first, then by case-insensitive name."""
        found = self.by_id.get(item.id)
        if found is None and item.name:
            found = self.by_name.get(item.name.strip().lower())
        return found

    def __len__(self) -> int:
        return len(self.by_id)


class EnrichmentStore:
    """
    Key-value store for enrichment records, keyed by (catalog_id, item_id).

    Each upsert is its own transaction, so a reader never sees half of a
    record. There is no cross-item transaction.
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        if session_factory is None:
            init_db()
            session_factory = SessionLocal
        self._session_factory = session_factory

    def upsert(self, catalog_id: str, item_id: str, item_name: str, analysis: ItemAnalysis) -> None:
        """Insert or overwrite the enrichment for one item."""
        values = {
            "item_name": item_name,
            "dietary_tags": [t.lower() for t in analysis.dietary_tags],
            "ingredients": list(analysis.ingredients_implied),
            "phonetic_name": analysis.phonetic_correction or None,
            "stt_keywords": list(analysis.stt_keywords),
        }
        try:
            self._write(catalog_id, item_id, values)
        except IntegrityError:
            # A concurrent enrich inserted the same key first; overwrite it
            logger.debug("Upsert race on %s/%s, retrying as update", catalog_id, item_id)
            self._write(catalog_id, item_id, values)

    def _write(self, catalog_id: str, item_id: str, values: dict) -> None:
        with session_scope(self._session_factory) as session:
            record = (
                session.query(MenuItemEnrichment)
                .filter_by(catalog_id=catalog_id, item_id=item_id)
                .one_or_none()
            )
            if record is None:
                session.add(MenuItemEnrichment(catalog_id=catalog_id, item_id=item_id, **values))
            else:
                for key, value in values.items():
                    setattr(record, key, value)

    def load(self, catalog_id: str) -> EnrichmentLookup:
        """Read every stored record for a catalog."""
        lookup = EnrichmentLookup()
        session = self._session_factory()
        try:
            rows = session.query(MenuItemEnrichment).filter_by(catalog_id=catalog_id).all()
            for row in rows:
                snapshot = StoredEnrichment(
                    item_id=row.item_id,
                    item_name=row.item_name,
                    dietary_tags=list(row.dietary_tags or []),
                    ingredients=list(row.ingredients or []),
                    phonetic_name=row.phonetic_name,
                    stt_keywords=list(row.stt_keywords or []),
                )
                lookup.by_id[row.item_id] = snapshot
                lookup.by_name[row.item_name.strip().lower()] = snapshot
        finally:
            session.close()
        return lookup


# =============================================================================
# Generative backend
# =============================================================================

class MenuAnalyzer(Protocol):
    """Backend contract: raise EnrichmentBatchFailure for a failed batch."""

    def analyze(self, batch: Sequence[MenuItem]) -> BatchAnalysis:
        ...


ANALYSIS_SYSTEM_PROMPT = "You represent strict food safety data. Output valid JSON only."

ANALYSIS_PROMPT_TEMPLATE = """Analyze these menu items for a restaurant.
CONTEXT: These items might be Indian, Mexican, Chinese, etc. Use your knowledge of global cuisine.

TASK:
For each item, identify:
1. Hidden allergens and diet conflicts (nuts in Korma/Pasanda/Pesto, gluten in Tempura/Naan,
   shellfish in Laksa). Use lowercase tags such as nuts, dairy, gluten, shellfish,
   vegan_unfriendly, vegetarian_unfriendly, pork, beef. Do NOT tag positive features like "vegan".
2. Implied ingredients.
3. A lowercase phonetic spelling of the name for speech matching (a single string).
4. 2-3 speech recognition keywords: how a customer might say it, or common mishearings.

Every entry MUST echo the exact item name in originalName.

ITEMS:
{items}
"""


class OpenAIMenuAnalyzer:
    """Calls OpenAI through instructor and validates the reply as BatchAnalysis."""

    def __init__(self, client=None, model: str = MENU_INTELLIGENCE_MODEL):
        if client is None:
            import instructor
            from openai import OpenAI

            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise EnrichmentNotConfigured(
                    "OPENAI_API_KEY not set. Add it to the environment or the project .env file."
                )
            client = instructor.from_openai(OpenAI(api_key=api_key))
        self.client = client
        self.model = model

    def build_prompt(self, batch: Sequence[MenuItem]) -> str:
        described = [f"{item.name} ({item.description or ''})" for item in batch]
        return ANALYSIS_PROMPT_TEMPLATE.format(items=json.dumps(described))

    def analyze(self, batch: Sequence[MenuItem]) -> BatchAnalysis:
        try:
            result = self.client.chat.completions.create(
                model=self.model,
                response_model=BatchAnalysis,
                messages=[
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_prompt(batch)},
                ],
            )
        except Exception as e:
            raise EnrichmentBatchFailure(
                f"Menu analysis call failed: {e}", [item.name for item in batch]
            ) from e

        if result is None:
            raise EnrichmentBatchFailure("Empty menu analysis response", [item.name for item in batch])
        return result


# =============================================================================
# Service
# =============================================================================

@dataclass
class EnrichmentReport:
    enriched: int = 0
    skipped: int = 0
    failed_batches: int = 0


def _find_original(batch: Sequence[MenuItem], original_name: str) -> MenuItem | None:
    for item in batch:
        if item.name == original_name:
            return item
    for item in batch:
        if item.name and (original_name in item.name or item.name in original_name):
            return item
    return None


class MenuEnrichmentService:
    """Runs batch enrichment and merges stored results into raw items."""

    def __init__(
        self,
        store: EnrichmentStore,
        analyzer: MenuAnalyzer | None = None,
        batch_size: int = ENRICHMENT_BATCH_SIZE,
    ):
        self.store = store
        self._analyzer = analyzer
        self.batch_size = max(1, batch_size)
        self._tasks: set[asyncio.Task] = set()

    @property
    def analyzer(self) -> MenuAnalyzer:
        # Built lazily so merge-only users don't need an API key
        if self._analyzer is None:
            self._analyzer = OpenAIMenuAnalyzer()
        return self._analyzer

    async def enrich(self, catalog_id: str, raw_items: Iterable[MenuItem]) -> EnrichmentReport:
        """
        Enrich every item of a catalog, batch by batch.

        Never raises for a batch failure; returns counts for logging.
        """
        items = list(raw_items or [])
        report = EnrichmentReport()
        if not items:
            return report

        try:
            self.analyzer
        except EnrichmentNotConfigured as e:
            logger.error("Menu enrichment disabled for catalog %s: %s", catalog_id, e)
            report.skipped = len(items)
            return report

        logger.info("Enriching %d items for catalog %s", len(items), catalog_id)
        for start in range(0, len(items), self.batch_size):
            batch = items[start:start + self.batch_size]
            try:
                enriched, skipped = await asyncio.to_thread(self._process_batch, catalog_id, batch)
            except EnrichmentBatchFailure as e:
                report.failed_batches += 1
                report.skipped += len(batch)
                logger.error(
                    "Enrichment batch failed for catalog %s, skipped %s: %s",
                    catalog_id, e.item_names or [i.name for i in batch], e,
                )
                continue
            except Exception as e:
                # Analyzer broke its contract; still confined to this batch
                report.failed_batches += 1
                report.skipped += len(batch)
                logger.error(
                    "Unexpected error in enrichment batch for catalog %s, skipped %s: %s",
                    catalog_id, [i.name for i in batch], e, exc_info=True,
                )
                continue
            report.enriched += enriched
            report.skipped += skipped

        logger.info(
            "Enrichment complete for catalog %s: %d enriched, %d skipped, %d failed batches",
            catalog_id, report.enriched, report.skipped, report.failed_batches,
        )
        return report

    def _process_batch(self, catalog_id: str, batch: Sequence[MenuItem]) -> tuple[int, int]:
        analysis = self.analyzer.analyze(batch)

        enriched = 0
        seen = set()
        for result in analysis.items:
            if not result.original_name:
                logger.warning("Skipping analysis entry with missing originalName")
                continue
            original = _find_original(batch, result.original_name)
            if original is None:
                logger.warning("Analysis returned unknown item %r, skipping", result.original_name)
                continue
            try:
                self.store.upsert(catalog_id, original.id, original.name, result.analysis)
            except SQLAlchemyError as e:
                raise EnrichmentBatchFailure(
                    f"Could not store enrichment for {original.name!r}: {e}", [i.name for i in batch]
                ) from e
            if original.id not in seen:
                seen.add(original.id)
                enriched += 1

        return enriched, len(batch) - enriched

    def launch(self, catalog_id: str, raw_items: Iterable[MenuItem]) -> asyncio.Task:
        """
        Start `enrich` detached from the caller. Must be called from inside a
        running event loop; the returned task may be ignored.
        """
        task = asyncio.get_running_loop().create_task(self.enrich(catalog_id, list(raw_items or [])))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Detached enrichment task crashed: %s", exc, exc_info=exc)

    def merge(self, catalog_id: str, raw_items: Iterable[MenuItem]) -> list[MenuItem]:
        """
        Attach stored enrichment to raw items.

        id, name and price are never touched; items without stored
        enrichment are returned as-is. If the store cannot be read, the raw
        items come back unchanged.
        """
        items = list(raw_items or [])
        try:
            lookup = self.store.load(catalog_id)
        except SQLAlchemyError as e:
            logger.error("Could not read enrichment for catalog %s, serving raw menu: %s", catalog_id, e)
            return items

        merged = []
        hits = 0
        for item in items:
            stored = lookup.find(item)
            if stored is None:
                merged.append(item)
                continue
            hits += 1
            merged.append(item.model_copy(update={
                "dietary_tags": list(stored.dietary_tags),
                "ingredients": list(stored.ingredients),
                "phonetic_name": stored.phonetic_name,
                "stt_keywords": list(stored.stt_keywords),
            }))

        logger.debug("Merged enrichment into %d/%d items for catalog %s", hits, len(items), catalog_id)
        return merged
