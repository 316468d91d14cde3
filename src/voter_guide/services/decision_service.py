"""Decision service -- full-replace storage of a visitor's ballot decisions.

Decisions are keyed by (visitor_id, ballot_id).  Each save overwrites all
three mappings; there is no field-level merge and no version check, so the
last write wins.  Race, candidate, and measure ids are stored as given
without checking them against any ballot.
"""

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.decision import VoterDecision
from voter_guide.schemas.decision import DecisionSaveRequest
from voter_guide.services.analytics_service import record_event


async def get_decisions(session: AsyncSession, visitor_id: str, ballot_id: str) -> VoterDecision | None:
    """Load a visitor's decisions for a ballot, or None."""
    result = await session.execute(
        select(VoterDecision).where(
            VoterDecision.visitor_id == visitor_id,
            VoterDecision.ballot_id == ballot_id,
        )
    )
    return result.scalar_one_or_none()


def _measure_decisions_payload(request: DecisionSaveRequest) -> dict[str, dict[str, Any]]:
    return {
        measure_id: entry.model_dump(exclude_none=True) for measure_id, entry in request.measure_decisions.items()
    }


async def save_decisions(session: AsyncSession, request: DecisionSaveRequest) -> VoterDecision:
    """Create or wholly replace a visitor's decisions for a ballot.

    The first save for a (visitor, ballot) pair records a
    ``decisions_started`` analytics event.

    Args:
        session: Database session.
        request: Validated decision payload.

    Returns:
        The stored VoterDecision.
    """
    measure_decisions = _measure_decisions_payload(request)
    existing = await get_decisions(session, request.visitor_id, request.ballot_id)

    if existing is not None:
        existing.event_id = request.event_id
        existing.measure_decisions = measure_decisions
        existing.candidate_selections = dict(request.candidate_selections)
        existing.notes = dict(request.notes)
        await session.commit()
        await session.refresh(existing)
        logger.info(f"Replaced decisions for visitor {request.visitor_id} on ballot {request.ballot_id}")
        return existing

    decision = VoterDecision(
        visitor_id=request.visitor_id,
        ballot_id=request.ballot_id,
        event_id=request.event_id,
        measure_decisions=measure_decisions,
        candidate_selections=dict(request.candidate_selections),
        notes=dict(request.notes),
    )
    session.add(decision)
    try:
        await session.commit()
    except IntegrityError:
        # A concurrent first save won the insert; overwrite it.
        await session.rollback()
        return await save_decisions(session, request)
    await session.refresh(decision)
    logger.info(f"Saved decisions for visitor {request.visitor_id} on ballot {request.ballot_id}")

    try:
        await record_event(
            session,
            event_type="decisions_started",
            event_data={"ballotId": request.ballot_id},
            visitor_id=request.visitor_id,
        )
    except Exception as e:
        logger.warning(f"Failed to record decisions_started for visitor {request.visitor_id}: {e}")
        await session.rollback()
        await session.refresh(decision)
    return decision
