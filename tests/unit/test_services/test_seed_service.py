"""Unit tests for the seed loader."""

from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.race import CandidateEndorsement, RaceCandidate
from voter_guide.services.election_event_service import get_event
from voter_guide.services.seed_service import load_seed_data


class TestLoadSeedData:
    """Tests for load_seed_data()."""

    @pytest.mark.asyncio
    async def test_counts(self, async_session: AsyncSession, seed_document: dict[str, Any]) -> None:
        counts = await load_seed_data(async_session, seed_document)
        assert counts == {
            "districts": 2,
            "zipcodes": 3,
            "zipcode_districts": 2,
            "candidates": 2,
            "endorsements": 2,
            "races": 2,
            "race_candidates": 2,
            "ballot_measures": 1,
            "events": 1,
        }

    @pytest.mark.asyncio
    async def test_rerun_does_not_duplicate(self, async_session: AsyncSession, seed_document: dict[str, Any]) -> None:
        await load_seed_data(async_session, seed_document)
        counts = await load_seed_data(async_session, seed_document)

        assert counts["zipcode_districts"] == 0
        assert counts["endorsements"] == 0
        assert counts["race_candidates"] == 0
        endorsements = await async_session.execute(select(func.count(CandidateEndorsement.id)))
        assert endorsements.scalar_one() == 2

    @pytest.mark.asyncio
    async def test_rerun_updates_primary_results(
        self, async_session: AsyncSession, seed_document: dict[str, Any]
    ) -> None:
        await load_seed_data(async_session, seed_document)
        seed_document["races"][0]["candidates"][0]["primaryVotes"] = 1500
        await load_seed_data(async_session, seed_document)

        result = await async_session.execute(
            select(RaceCandidate.primary_votes).where(RaceCandidate.candidate_id == "cand-rivera")
        )
        assert result.scalar_one() == 1500

    @pytest.mark.asyncio
    async def test_dates_parsed(self, async_session: AsyncSession, seed_document: dict[str, Any]) -> None:
        await load_seed_data(async_session, seed_document)
        event = await get_event(async_session, "ny-general-test")
        assert event is not None
        assert event.election_date.isoformat() == seed_document["events"][0]["electionDate"]
