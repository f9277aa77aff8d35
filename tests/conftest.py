import asyncio
import math
import os
import tempfile
from itertools import count

import pytest

_TMP = tempfile.mkdtemp(prefix="madad-tests-")

# Settings are read at import time - configure before importing madad.
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/app.db"
os.environ["GOOGLE_API_KEY"] = "test-key"
os.environ["CHROMA_PATH"] = os.path.join(_TMP, "chroma")
os.environ["APP_ENV"] = "test"
os.environ["SCORE_RECALC_RETRY_DELAY"] = "0"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from madad.database import get_db, get_session_factory  # noqa: E402
from madad.main import app  # noqa: E402
from madad.models import Base, Restaurant  # noqa: E402
from madad.routers.deps import get_score_aggregator  # noqa: E402
from madad.services.score_aggregator import ScoreAggregator  # noqa: E402

_slug_counter = count(1)


def _make_factory(path) -> tuple:
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    return engine, factory


async def _create_all(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def restaurant_fields(**overrides) -> dict:
    """Column values for a Restaurant, blank bilingual fields unless overridden."""
    fields = {
        "slug": f"restaurant-{next(_slug_counter)}",
        "name": "",
        "name_he": "",
        "address": "",
        "description": "",
        "description_he": "",
        "type": "",
        "type_he": "",
        "madad_number": 5.0,
        "date": "2024-01-01",
        "youtube_url": "",
        "video_id": "",
    }
    fields.update(overrides)
    return fields


async def add_restaurant(db: AsyncSession, **overrides) -> Restaurant:
    restaurant = Restaurant(**restaurant_fields(**overrides))
    db.add(restaurant)
    await db.commit()
    return restaurant


# ── Async fixtures (service-level tests) ─────────────────────────────────────


@pytest.fixture
async def session_factory(tmp_path):
    engine, factory = _make_factory(tmp_path / "test.db")
    await _create_all(engine)
    yield factory
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def aggregator(session_factory):
    aggregator = ScoreAggregator(session_factory, max_attempts=2, retry_delay=0)
    yield aggregator
    await aggregator.drain()


# ── Sync fixtures (HTTP tests) ───────────────────────────────────────────────


@pytest.fixture
def api_factory(tmp_path):
    engine, factory = _make_factory(tmp_path / "api.db")
    asyncio.run(_create_all(engine))
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def seed(api_factory):
    """Insert a restaurant from a sync test; returns its id."""

    def _seed(**overrides) -> int:
        async def _insert() -> int:
            async with api_factory() as session:
                restaurant = await add_restaurant(session, **overrides)
                return restaurant.id

        return asyncio.run(_insert())

    return _seed


@pytest.fixture
def client(api_factory):
    async def _get_db():
        async with api_factory() as session:
            yield session

    aggregator = ScoreAggregator(api_factory, max_attempts=2, retry_delay=0)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_session_factory] = lambda: api_factory
    app.dependency_overrides[get_score_aggregator] = lambda: aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Fake vector index ────────────────────────────────────────────────────────


class FakeCollection:
    """In-memory stand-in for a Chroma collection in cosine space."""

    def __init__(self, vectors=None):
        self.vectors: dict[str, list[float]] = {
            str(k): v for k, v in (vectors or {}).items()
        }
        self.metadatas: dict[str, dict] = {}

    def count(self) -> int:
        return len(self.vectors)

    def query(self, query_embeddings, n_results, include):
        query = query_embeddings[0]
        scored = sorted(
            ((rid, _cosine_distance(query, vec)) for rid, vec in self.vectors.items()),
            key=lambda t: t[1],
        )[:n_results]
        return {"ids": [[rid for rid, _ in scored]], "distances": [[d for _, d in scored]]}

    def upsert(self, ids, embeddings, metadatas):
        for rid, emb, meta in zip(ids, embeddings, metadatas):
            self.vectors[rid] = emb
            self.metadatas[rid] = meta

    def get(self, ids, include):
        return {"ids": [rid for rid in ids if rid in self.vectors]}


def _cosine_distance(a, b) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return 1.0 - (dot / norm if norm else 0.0)


def unit_vector(index: int, dims: int = 768) -> list[float]:
    vec = [0.0] * dims
    vec[index] = 1.0
    return vec


@pytest.fixture
def fake_collection() -> FakeCollection:
    return FakeCollection()
