from sqlalchemy import (
    Column,
    Integer,
    String,
    JSON,
    DateTime,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MenuItemEnrichment(Base):
    """AI-derived metadata for one catalog item, keyed by catalog + item id.

    Holds no price or availability: those stay with the catalog source.
    """
    __tablename__ = "menu_item_enrichment"

    id = Column(Integer, primary_key=True, index=True)
    catalog_id = Column(String, nullable=False, index=True)  # restaurant / merchant identifier
    item_id = Column(String, nullable=False)  # POS item id (e.g. Clover id)
    item_name = Column(String, nullable=False)  # name at enrichment time, for fallback lookup

    dietary_tags = Column(JSON, nullable=False, default=list)
    ingredients = Column(JSON, nullable=False, default=list)
    phonetic_name = Column(String, nullable=True)
    stt_keywords = Column(JSON, nullable=False, default=list)

    processed_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("catalog_id", "item_id", name="uix_enrichment_catalog_item"),
        Index("ix_enrichment_catalog_name", "catalog_id", "item_name"),
    )
