"""Administrator endpoints for election events and cached ballots.

These routes carry no authentication of their own; deployments restrict
them at the network edge.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session
from voter_guide.lib.location import InvalidStateError, UnsupportedStateError
from voter_guide.schemas.ballot import BallotUpsertRequest, CachedBallotResponse
from voter_guide.schemas.election_event import (
    ElectionEventCreateRequest,
    ElectionEventResponse,
    ElectionEventUpdateRequest,
)
from voter_guide.services.ballot_service import list_cached_ballots, upsert_ballot
from voter_guide.services.election_event_service import (
    ElectionEventNotFoundError,
    create_event,
    delete_event,
    list_events,
    set_archived,
    update_event,
)

admin_router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Election events (fixed-prefix routes BEFORE parameterized routes)
# ---------------------------------------------------------------------------


@admin_router.get("/events", response_model=list[ElectionEventResponse])
async def list_active_events(
    session: AsyncSession = Depends(get_async_session),
) -> list[ElectionEventResponse]:
    """List all non-archived events, upcoming first."""
    events = await list_events(session, archived=False)
    return [ElectionEventResponse.model_validate(e) for e in events]


@admin_router.get("/events/archived", response_model=list[ElectionEventResponse])
async def list_archived_events(
    session: AsyncSession = Depends(get_async_session),
) -> list[ElectionEventResponse]:
    """List archived events."""
    events = await list_events(session, archived=True)
    return [ElectionEventResponse.model_validate(e) for e in events]


@admin_router.post(
    "/events",
    response_model=ElectionEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_election_event(
    request: ElectionEventCreateRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ElectionEventResponse:
    """Create an upcoming election event for a pilot state."""
    try:
        event = await create_event(session, **request.model_dump())
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UnsupportedStateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(e), "supported": False, "state": e.state},
        ) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error creating election event: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create election event",
        ) from e
    return ElectionEventResponse.model_validate(event)


@admin_router.put("/events/{event_id}", response_model=ElectionEventResponse)
async def update_election_event(
    event_id: str,
    request: ElectionEventUpdateRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ElectionEventResponse:
    """Partially update an election event."""
    try:
        event = await update_event(session, event_id, data=request.model_dump(exclude_unset=True))
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e
    except Exception as e:
        logger.error(f"Unexpected error updating election event {event_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update election event",
        ) from e
    return ElectionEventResponse.model_validate(event)


@admin_router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_election_event(
    event_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> None:
    """Soft-delete an election event and drop its subscriptions."""
    try:
        await delete_event(session, event_id)
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e


@admin_router.post("/events/{event_id}/archive", response_model=ElectionEventResponse)
async def archive_election_event(
    event_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> ElectionEventResponse:
    """Archive an election event."""
    try:
        event = await set_archived(session, event_id, archived=True)
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e
    return ElectionEventResponse.model_validate(event)


@admin_router.post("/events/{event_id}/restore", response_model=ElectionEventResponse)
async def restore_election_event(
    event_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> ElectionEventResponse:
    """Restore an archived election event."""
    try:
        event = await set_archived(session, event_id, archived=False)
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e
    return ElectionEventResponse.model_validate(event)


# ---------------------------------------------------------------------------
# Cached ballots
# ---------------------------------------------------------------------------


@admin_router.get("/ballots", response_model=list[CachedBallotResponse])
async def list_ballots(
    session: AsyncSession = Depends(get_async_session),
) -> list[CachedBallotResponse]:
    """List every cached ballot, most recently updated first."""
    ballots = await list_cached_ballots(session)
    return [CachedBallotResponse.model_validate(b) for b in ballots]


async def _upsert(session: AsyncSession, request: BallotUpsertRequest, ballot_id: str | None) -> CachedBallotResponse:
    data = request.model_dump()
    if ballot_id is not None:
        data["id"] = ballot_id
    try:
        ballot = await upsert_ballot(session, data=data)
    except Exception as e:
        logger.error(f"Unexpected error upserting ballot {data.get('id')}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save ballot",
        ) from e
    return CachedBallotResponse.model_validate(ballot)


@admin_router.put("/ballots", response_model=CachedBallotResponse)
async def put_ballot(
    request: BallotUpsertRequest,
    session: AsyncSession = Depends(get_async_session),
) -> CachedBallotResponse:
    """Create or overwrite a cached ballot."""
    return await _upsert(session, request, None)


@admin_router.put("/ballots/{ballot_id}", response_model=CachedBallotResponse)
async def put_ballot_by_id(
    ballot_id: str,
    request: BallotUpsertRequest,
    session: AsyncSession = Depends(get_async_session),
) -> CachedBallotResponse:
    """Create or overwrite the cached ballot with the given id."""
    return await _upsert(session, request, ballot_id)
