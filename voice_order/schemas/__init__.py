"""
Schemas Package
===============

Pydantic models shared across the engine:

- **menu.py**: `MenuItem`, the catalog entry every component consumes
- **enrichment.py**: the generative backend's validated response shape
- **api.py**: HTTP request/response bodies for the catalog routes
"""

from .menu import MenuItem
from .enrichment import AnalyzedItem, BatchAnalysis, ItemAnalysis

__all__ = ["MenuItem", "AnalyzedItem", "BatchAnalysis", "ItemAnalysis"]
