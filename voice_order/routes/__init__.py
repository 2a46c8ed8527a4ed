"""
Routes Package
==============

- catalog.py: enrichment, merge, vocabulary and resolution endpoints under
  /catalogs/{catalog_id}
"""

from .catalog import catalog_router, get_enrichment_service

__all__ = ["catalog_router", "get_enrichment_service"]
