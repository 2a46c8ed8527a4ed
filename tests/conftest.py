import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from voice_order.enrichment import EnrichmentStore
from voice_order.exceptions import EnrichmentBatchFailure
from voice_order.models import Base
from voice_order.schemas.enrichment import AnalyzedItem, BatchAnalysis, ItemAnalysis
from voice_order.schemas.menu import MenuItem


def make_item(item_id, name, price=1200, **extra):
    return MenuItem(id=item_id, name=name, price=price, **extra)


@pytest.fixture
def indian_catalog():
    """A small Indian restaurant menu, un-enriched."""
    return [
        make_item("itm_1", "Malai Kofta", 1395),
        make_item("itm_2", "Butter Chicken", 1595),
        make_item("itm_3", "Fish Curry", 1695),
        make_item("itm_4", "Chicken Dum Biryani", 1495),
        make_item("itm_5", "Garlic Naan", 395),
    ]


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads via StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return EnrichmentStore(session_factory)


class FakeAnalyzer:
    """Stands in for the OpenAI backend.

    `analyses` maps item name -> ItemAnalysis. Batches containing a name in
    `fail_on` raise EnrichmentBatchFailure.
    """

    def __init__(self, analyses=None, fail_on=()):
        self.analyses = analyses or {}
        self.fail_on = set(fail_on)
        self.batches = []

    def analyze(self, batch):
        names = [item.name for item in batch]
        self.batches.append(names)
        if self.fail_on & set(names):
            raise EnrichmentBatchFailure("model returned garbage", names)
        return BatchAnalysis(items=[
            AnalyzedItem(original_name=name, analysis=self.analyses.get(name, ItemAnalysis()))
            for name in names
        ])


@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer(analyses={
        "Malai Kofta": ItemAnalysis(
            dietary_tags=["dairy", "nuts"],
            ingredients_implied=["paneer", "cashew cream"],
            phonetic_correction="malai kofta",
            stt_keywords=["malay kofta", "malai kofte"],
        ),
        "Butter Chicken": ItemAnalysis(
            dietary_tags=["dairy", "nuts"],
            ingredients_implied=["cashew paste", "butter"],
            phonetic_correction="butter chicken",
            stt_keywords=["murgh makhani", "makhani"],
        ),
    })


@pytest.fixture
def analyzer_factory():
    """Build a FakeAnalyzer with custom analyses / failing items."""
    return FakeAnalyzer
