"""Ballot API endpoints: ZIP lookup, ballot assembly, races, and candidates."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session
from voter_guide.lib.location import (
    SUPPORTED_STATES,
    InvalidStateError,
    InvalidZipCodeError,
    UnsupportedStateError,
)
from voter_guide.models.election_event import ElectionEvent
from voter_guide.models.location import Zipcode
from voter_guide.schemas.ballot import BallotResponse, RaceCandidatesResponse, RacesByStateResponse
from voter_guide.schemas.location import LocationLookupResponse, SupportedStatesResponse
from voter_guide.services.ballot_service import (
    assemble_ballot,
    ballot_cache_id,
    get_race_candidates,
    list_races_by_state,
    persist_ballot,
)
from voter_guide.services.election_event_service import get_active_event, get_event
from voter_guide.services.location_service import ZipCodeNotFoundError, resolve

ballots_router = APIRouter(tags=["ballots"])


def _unsupported(e: UnsupportedStateError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": str(e), "supported": False, "state": e.state},
    )


async def _resolve_location(session: AsyncSession, zipcode: str) -> Zipcode:
    """Resolve a ZIP code, translating each failure to its HTTP outcome."""
    try:
        return await resolve(session, zipcode)
    except InvalidZipCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ZipCodeNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": str(e), "supported": False},
        ) from e
    except UnsupportedStateError as e:
        raise _unsupported(e) from e
    except Exception as e:
        logger.error(f"Unexpected error resolving ZIP code {zipcode}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to look up ZIP code",
        ) from e


async def _resolve_event(session: AsyncSession, state: str, event_id: str | None) -> ElectionEvent | None:
    """Pick the election event a ballot belongs to.

    An explicit ``event_id`` must exist and belong to the state; otherwise the
    state's next upcoming event is used.
    """
    if event_id is None:
        try:
            return await get_active_event(session, state)
        except Exception as e:
            logger.warning(f"Failed to resolve active election event for {state}: {e}")
            return None

    event = await get_event(session, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found")
    if event.state != state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Election event {event_id} is not for {state}",
        )
    return event


@ballots_router.get("/states", response_model=SupportedStatesResponse)
async def supported_states() -> SupportedStatesResponse:
    """List the pilot states."""
    return SupportedStatesResponse(supported=list(SUPPORTED_STATES))


@ballots_router.get("/lookup-zip/{zipcode}", response_model=LocationLookupResponse)
async def lookup_zip(
    zipcode: str,
    session: AsyncSession = Depends(get_async_session),
) -> LocationLookupResponse:
    """Resolve a ZIP code to its state, county, and city."""
    location = await _resolve_location(session, zipcode)
    return LocationLookupResponse(state=location.state, county=location.county, city=location.city)


@ballots_router.get("/ballot/{zipcode}", response_model=BallotResponse)
async def get_ballot(
    zipcode: str,
    event_id: str | None = Query(None, alias="eventId", description="Election event to cache the ballot under"),
    session: AsyncSession = Depends(get_async_session),
) -> BallotResponse:
    """Assemble the ballot for a ZIP code.

    The ballot is cached once per (ZIP code, election event).  Caching never
    affects the response; ``ballotId`` is null when no event applies.
    """
    location = await _resolve_location(session, zipcode)

    try:
        ballot = await assemble_ballot(session, location)
    except Exception as e:
        logger.error(f"Unexpected error assembling ballot for {zipcode}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch ballot",
        ) from e

    event = await _resolve_event(session, location.state, event_id)
    if event is None:
        await persist_ballot(session, ballot, None)
        return ballot

    # A failed cache write rolls back the session and expires the event.
    active_event_id = event.id
    await persist_ballot(session, ballot, event)
    return ballot.model_copy(
        update={"ballot_id": ballot_cache_id(zipcode, active_event_id), "event_id": active_event_id}
    )


@ballots_router.get("/races/by-state/{state}", response_model=RacesByStateResponse)
async def races_by_state(
    state: str,
    session: AsyncSession = Depends(get_async_session),
) -> RacesByStateResponse:
    """List every race in a pilot state with candidates and endorsements."""
    try:
        return await list_races_by_state(session, state)
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UnsupportedStateError as e:
        raise _unsupported(e) from e
    except Exception as e:
        logger.error(f"Unexpected error listing races for {state}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch races",
        ) from e


@ballots_router.get("/candidates/race/{race_id}", response_model=RaceCandidatesResponse)
async def race_candidates(
    race_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> RaceCandidatesResponse:
    """Get a race with its candidates and primary results."""
    try:
        result = await get_race_candidates(session, race_id)
    except Exception as e:
        logger.error(f"Unexpected error fetching candidates for race {race_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch candidates",
        ) from e
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Race not found")
    return result
