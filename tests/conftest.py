# tests/conftest.py
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from carfeed.db import init_db
from carfeed.scrapers.sites import SiteConfig
from carfeed.services.store import EventStore


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def store(session_factory):
    return EventStore(session_factory)


@pytest.fixture
def site():
    return SiteConfig(
        key="carfind",
        name="CarFind",
        search_url="https://www.carfind.co.za/used-cars",
        base_url="https://www.carfind.co.za",
    )
