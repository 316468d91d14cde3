"""Unit tests for the decision service."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.analytics_event import AnalyticsEvent
from voter_guide.schemas.decision import DecisionSaveRequest
from voter_guide.services.decision_service import get_decisions, save_decisions

BALLOT_ID = "ballot-10001-ny-general-test"


def _request(**overrides) -> DecisionSaveRequest:
    payload = {
        "visitorId": "v_1",
        "ballotId": BALLOT_ID,
        "measureDecisions": {"measure-ny-1": {"decision": "yes", "note": "Clear win"}},
        "candidateSelections": {"race-ny-cd-12": "cand-rivera"},
        "notes": {"race-ny-cd-12": "Debate"},
    }
    payload.update(overrides)
    return DecisionSaveRequest.model_validate(payload)


async def _started_count(session: AsyncSession) -> int:
    result = await session.execute(
        select(func.count(AnalyticsEvent.id)).where(AnalyticsEvent.event_type == "decisions_started")
    )
    return result.scalar_one()


class TestSaveDecisions:
    """Tests for save_decisions()."""

    @pytest.mark.asyncio
    async def test_first_save_stores_and_records_start(self, async_session: AsyncSession) -> None:
        stored = await save_decisions(async_session, _request())

        assert stored.measure_decisions == {"measure-ny-1": {"decision": "yes", "note": "Clear win"}}
        assert stored.candidate_selections == {"race-ny-cd-12": "cand-rivera"}
        assert await _started_count(async_session) == 1

    @pytest.mark.asyncio
    async def test_second_save_replaces_everything(self, async_session: AsyncSession) -> None:
        await save_decisions(async_session, _request())
        await save_decisions(
            async_session,
            _request(measureDecisions={"measure-ny-1": {"decision": "no"}}, candidateSelections={}, notes={}),
        )

        stored = await get_decisions(async_session, "v_1", BALLOT_ID)
        assert stored is not None
        assert stored.measure_decisions == {"measure-ny-1": {"decision": "no"}}
        assert stored.candidate_selections == {}
        assert stored.notes == {}
        assert await _started_count(async_session) == 1

    @pytest.mark.asyncio
    async def test_unknown_ids_accepted(self, async_session: AsyncSession) -> None:
        stored = await save_decisions(async_session, _request(candidateSelections={"race-nowhere": "cand-nobody"}))
        assert stored.candidate_selections == {"race-nowhere": "cand-nobody"}

    @pytest.mark.asyncio
    async def test_visitors_are_isolated(self, async_session: AsyncSession) -> None:
        await save_decisions(async_session, _request())
        assert await get_decisions(async_session, "v_other", BALLOT_ID) is None


class TestDecisionSaveRequest:
    def test_invalid_decision_rejected(self) -> None:
        with pytest.raises(ValueError):
            _request(measureDecisions={"m": {"decision": "maybe"}})

    def test_defaults_to_empty_maps(self) -> None:
        request = DecisionSaveRequest.model_validate({"visitorId": "v", "ballotId": "b"})
        assert request.measure_decisions == {}
        assert request.candidate_selections == {}
        assert request.notes == {}
