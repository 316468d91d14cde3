"""Shared test fixtures for settings, the async database, sessions, and seed data."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import voter_guide.models  # noqa: F401
from voter_guide.core.config import Settings
from voter_guide.models.base import Base
from voter_guide.services.seed_service import load_seed_data

NY_EVENT_ID = "ny-general-test"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        public_host="voterguide.test",
        anthropic_api_key=None,
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine(settings.database_url, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed_document() -> dict[str, Any]:
    """A small reference data set: one NY ZIP with two races, a TX ZIP, and a CA ZIP outside the pilot."""
    election_date = (datetime.now(UTC).date() + timedelta(days=30)).isoformat()
    return {
        "districts": [
            {"id": "ny-cd-12", "state": "NY", "districtType": "congressional", "number": "12", "name": "NY-12"},
            {"id": "ny-sd-47", "state": "NY", "districtType": "state_senate", "number": "47", "name": "NY SD-47"},
        ],
        "zipcodes": [
            {"zipcode": "10001", "state": "NY", "county": "New York", "city": "New York", "districts": ["ny-cd-12", "ny-sd-47"]},
            {"zipcode": "10002", "state": "NY", "county": "New York", "city": "New York", "districts": []},
            {"zipcode": "94103", "state": "CA", "county": "San Francisco", "city": "San Francisco"},
        ],
        "candidates": [
            {
                "id": "cand-rivera",
                "firstName": "Maria",
                "lastName": "Rivera",
                "party": "Democratic",
                "position": "Affordable housing.",
                "endorsements": [
                    {"organization": "Transit Riders", "endorsementType": "advocacy"},
                    {"organization": "Teachers Union", "endorsementType": "labor"},
                ],
            },
            {"id": "cand-chen", "firstName": "David", "lastName": "Chen", "party": "Republican"},
        ],
        "races": [
            {
                "id": "race-ny-cd-12",
                "electionYear": 2026,
                "state": "NY",
                "raceType": "federal",
                "office": "U.S. House",
                "districtId": "ny-cd-12",
                "candidates": [
                    {"candidateId": "cand-rivera", "primaryVotes": 1200, "primaryPercentage": 60.0, "isWonPrimary": True},
                    {"candidateId": "cand-chen", "primaryVotes": 800, "primaryPercentage": 40.0, "isWonPrimary": True},
                ],
            },
            {
                "id": "race-ny-sd-47",
                "electionYear": 2026,
                "state": "NY",
                "raceType": "state",
                "office": "State Senate",
                "districtId": "ny-sd-47",
                "candidates": [],
            },
        ],
        "ballotMeasures": [
            {
                "id": "measure-ny-1",
                "state": "NY",
                "electionYear": 2026,
                "measureNumber": "Prop 1",
                "title": "Equal protection amendment",
                "shortTitle": "Equal Rights",
                "proArguments": ["Expands protections."],
                "conArguments": ["Broad language."],
            },
        ],
        "events": [
            {
                "id": NY_EVENT_ID,
                "state": "NY",
                "title": "NY General",
                "eventType": "general",
                "electionDate": election_date,
                "status": "upcoming",
                "visibility": "public",
                "archived": False,
            },
        ],
    }


@pytest.fixture
async def seeded_session(async_session: AsyncSession, seed_document: dict[str, Any]) -> AsyncSession:
    """A session over a database loaded with ``seed_document``."""
    await load_seed_data(async_session, seed_document)
    return async_session
