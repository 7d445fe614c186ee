# tests/conftest.py
import os
import sys
from datetime import date, timedelta
from pathlib import Path

# 测试使用sqlite内存库，必须在导入storage之前设置
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("POD_ENV", "test")

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import fakeredis
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import redis_client
from main import app
from query_cache import QueryCache, get_query_cache
from storage.database import Base, get_session
from storage.models import Game


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_redis(monkeypatch):
    server = fakeredis.FakeServer()
    client = fakeredis.FakeAsyncRedis(server=server, decode_responses=True)
    monkeypatch.setattr(redis_client, "get_redis", lambda: client)
    return client


@pytest.fixture
def cache(fake_redis):
    return QueryCache(redis_client=fake_redis, namespace="test", ttl=60)


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


TOMORROW = date.today() + timedelta(days=1)


def make_games():
    return [
        Game(
            game_id="G1", league="MLB", season=2024, date=date(2024, 7, 4),
            home_team="New York Yankees", away_team="Boston Red Sox",
            home_score=5, away_score=3, venue="Yankee Stadium",
        ),
        Game(
            game_id="G2", league="MLB", season=2024, date=date(2024, 10, 20),
            home_team="Los Angeles Dodgers", away_team="New York Mets",
            home_score=10, away_score=5, venue="Dodger Stadium", playoff=True, game_type="P",
        ),
        Game(
            game_id="G3", league="MLB", season=2025, date=date(2025, 3, 1),
            home_team="Chicago Cubs", away_team="San Francisco Giants",
            home_score=2, away_score=2, venue="Sloan Park", game_type="S",
        ),
        Game(
            game_id="G4", league="MLB", season=TOMORROW.year, date=TOMORROW,
            home_team="Seattle Mariners", away_team="Houston Astros", venue="T-Mobile Park",
        ),
    ]


@pytest.fixture
async def games(session_factory):
    async with session_factory() as s:
        s.add_all(make_games())
        await s.commit()


@pytest.fixture
async def client(session_factory, cache, games):
    async def override_get_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_query_cache] = lambda: cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


def auth(user_id: str) -> dict:
    return {"X-User-Id": user_id}
