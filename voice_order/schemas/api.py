"""
HTTP request/response schemas for the catalog routes.

The catalog itself is owned by the POS sync, so each request carries the
raw items it wants processed; the service keeps no catalog state of its own.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .menu import MenuItem


class CatalogItemsRequest(BaseModel):
    items: List[MenuItem] = Field(default_factory=list)


class EnrichAccepted(BaseModel):
    catalog_id: str
    queued: int


class VocabularyRequest(CatalogItemsRequest):
    cuisine: Optional[str] = None


class BoostOut(BaseModel):
    term: str
    weight: float


class VocabularyResponse(BaseModel):
    keywords: List[str]
    boosts: List[BoostOut]


class ResolveRequest(CatalogItemsRequest):
    transcript: str
    allergies: List[str] = Field(default_factory=list)


class CandidateOut(BaseModel):
    item_id: str
    name: str
    score: float
    phonetic: float
    token: float
    keyword: float
    direct: float


class SafetyOut(BaseModel):
    safe: bool
    reason: Optional[str] = None


class ResolveResponse(BaseModel):
    status: str
    match: Optional[MenuItem] = None
    score: Optional[float] = None
    ambiguous: List[MenuItem] = Field(default_factory=list)
    suggestions: List[MenuItem] = Field(default_factory=list)
    safety: Optional[SafetyOut] = None
    candidates: List[CandidateOut] = Field(default_factory=list)
