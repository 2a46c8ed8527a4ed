"""
Menu Item Schemas
=================

A `MenuItem` is one sellable catalog entry as the resolution engine sees it.
The POS sync supplies the required fields; the enrichment service may attach
the four optional ones later.

Field Ownership:
----------------
- **id, name, price, description**: owned by the catalog source. Enrichment
  must never change them.
- **phonetic_name, dietary_tags, ingredients, stt_keywords**: owned by menu
  enrichment. `None` means "not enriched yet", which every consumer must
  tolerate.

Prices are integer minor-currency units (cents); floats are rejected.

Usage:
------
    item = MenuItem(id="CLV-12", name="Malai Kofta", price=1395)
    enriched = item.model_copy(update={"dietary_tags": ["dairy", "nuts"]})
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MenuItem(BaseModel):
    """A catalog entry, optionally carrying enrichment metadata."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int = Field(ge=0, description="Price in minor currency units")
    description: Optional[str] = None

    phonetic_name: Optional[str] = None
    dietary_tags: Optional[List[str]] = None
    ingredients: Optional[List[str]] = None
    stt_keywords: Optional[List[str]] = None

    @property
    def is_enriched(self) -> bool:
        return any(
            value is not None
            for value in (self.phonetic_name, self.dietary_tags, self.ingredients, self.stt_keywords)
        )
