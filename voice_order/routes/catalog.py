"""
Catalog Routes
==============

Endpoints:
----------
- POST /catalogs/{catalog_id}/enrich: Start enrichment in the background (202)
- POST /catalogs/{catalog_id}/merge: Attach stored enrichment to raw items
- POST /catalogs/{catalog_id}/vocabulary: Recognizer keyword list
- POST /catalogs/{catalog_id}/resolve: Resolve a transcript, optionally with
  a safety check against declared allergies

Enrichment is fire-and-forget: the response returns before any model call is
made. Resolution always merges first, so it uses whatever enrichment exists
at that moment.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..cuisines import get_cuisine_profile
from ..dietary import validate
from ..enrichment import EnrichmentStore, MenuEnrichmentService
from ..matching import resolve
from ..schemas.api import (
    BoostOut,
    CandidateOut,
    CatalogItemsRequest,
    EnrichAccepted,
    ResolveRequest,
    ResolveResponse,
    SafetyOut,
    VocabularyRequest,
    VocabularyResponse,
)
from ..schemas.menu import MenuItem
from ..vocabulary import extract_keywords, to_recognizer_boosts

logger = logging.getLogger(__name__)

catalog_router = APIRouter(prefix="/catalogs/{catalog_id}", tags=["Catalog"])

_service: Optional[MenuEnrichmentService] = None


def get_enrichment_service() -> MenuEnrichmentService:
    """Process-wide enrichment service (overridden in tests)."""
    global _service
    if _service is None:
        _service = MenuEnrichmentService(EnrichmentStore())
    return _service


@catalog_router.post("/enrich", response_model=EnrichAccepted, status_code=status.HTTP_202_ACCEPTED)
async def enrich_catalog(
    catalog_id: str,
    payload: CatalogItemsRequest,
    service: MenuEnrichmentService = Depends(get_enrichment_service),
) -> EnrichAccepted:
    """Queue enrichment for a catalog refresh; does not wait for it."""
    service.launch(catalog_id, payload.items)
    logger.info("Queued enrichment of %d items for catalog %s", len(payload.items), catalog_id)
    return EnrichAccepted(catalog_id=catalog_id, queued=len(payload.items))


@catalog_router.post("/merge", response_model=list[MenuItem])
def merge_catalog(
    catalog_id: str,
    payload: CatalogItemsRequest,
    service: MenuEnrichmentService = Depends(get_enrichment_service),
) -> list[MenuItem]:
    return service.merge(catalog_id, payload.items)


@catalog_router.post("/vocabulary", response_model=VocabularyResponse)
def catalog_vocabulary(
    catalog_id: str,
    payload: VocabularyRequest,
    service: MenuEnrichmentService = Depends(get_enrichment_service),
) -> VocabularyResponse:
    items = service.merge(catalog_id, payload.items)
    profile = get_cuisine_profile(payload.cuisine)
    keywords = extract_keywords(items, profile.phonetic_corrections)
    return VocabularyResponse(
        keywords=keywords,
        boosts=[BoostOut(term=term, weight=weight) for term, weight in to_recognizer_boosts(keywords)],
    )


@catalog_router.post("/resolve", response_model=ResolveResponse)
def resolve_transcript(
    catalog_id: str,
    payload: ResolveRequest,
    service: MenuEnrichmentService = Depends(get_enrichment_service),
) -> ResolveResponse:
    """Resolve one utterance; a match is safety-checked when allergies are given."""
    items = service.merge(catalog_id, payload.items)
    result = resolve(payload.transcript, items)

    safety = None
    if result.is_match and payload.allergies:
        verdict = validate(result.match, payload.allergies)
        safety = SafetyOut(safe=verdict.safe, reason=verdict.reason)

    return ResolveResponse(
        status=result.status.value,
        match=result.match,
        score=result.score,
        ambiguous=list(result.ambiguous),
        suggestions=list(result.suggestions),
        safety=safety,
        candidates=[
            CandidateOut(
                item_id=c.item.id,
                name=c.item.name,
                score=c.score,
                phonetic=c.breakdown.phonetic,
                token=c.breakdown.token,
                keyword=c.breakdown.keyword,
                direct=c.breakdown.direct,
            )
            for c in result.candidates
        ],
    )
