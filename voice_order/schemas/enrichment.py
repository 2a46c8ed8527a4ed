"""
Enrichment Response Schemas
===========================

Pydantic models describing what the generative backend must return for a
batch of menu items. They are passed to instructor as `response_model`, so
the model output is validated before anything is persisted.

Each returned item must echo `originalName`; entries without it are skipped
by the enrichment service rather than failing the whole batch.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemAnalysis(BaseModel):
    """Menu intelligence for one item."""
    dietary_tags: List[str] = Field(
        default_factory=list,
        description=(
            "Allergens and diet conflicts, lowercase: nuts, dairy, gluten, shellfish, "
            "vegan_unfriendly, vegetarian_unfriendly, pork, beef"
        ),
    )
    ingredients_implied: List[str] = Field(
        default_factory=list,
        description="Key ingredients implied by the name/cuisine (e.g. 'cashew paste' for Korma)",
    )
    phonetic_correction: str = Field(
        default="",
        description="The item name in lowercase, cleaned for speech matching (e.g. 'butter chicken')",
    )
    stt_keywords: List[str] = Field(
        default_factory=list,
        description="2-3 alternate phonetic spellings or synonyms for speech recognition boosting",
    )

    @field_validator("phonetic_correction", mode="before")
    @classmethod
    def _single_phonetic_value(cls, value: Any) -> str:
        # Models sometimes return a list here; keep the first entry
        if isinstance(value, (list, tuple)):
            value = value[0] if value else ""
        return str(value or "").strip().lower()

    @field_validator("dietary_tags", "ingredients_implied", "stt_keywords", mode="before")
    @classmethod
    def _string_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [str(v).strip() for v in value if v is not None and str(v).strip()]


class AnalyzedItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_name: Optional[str] = Field(default=None, alias="originalName")
    analysis: ItemAnalysis = Field(default_factory=ItemAnalysis)


class BatchAnalysis(BaseModel):
    """Top-level response: one entry per analyzed item."""
    items: List[AnalyzedItem] = Field(default_factory=list)
