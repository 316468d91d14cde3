"""Public election event endpoints and visitor subscriptions."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.config import Settings, get_settings
from voter_guide.core.dependencies import get_async_session
from voter_guide.lib.location import InvalidStateError, UnsupportedStateError
from voter_guide.models.election_event import ElectionEvent
from voter_guide.schemas.election_event import (
    ElectionEventResponse,
    EventSubscriptionRequest,
    EventSubscriptionResponse,
)
from voter_guide.services.election_event_service import (
    ElectionEventNotFoundError,
    get_event,
    get_subscribed_event_ids,
    list_public_events,
    list_subscribed_events,
    subscribe,
    transition_passed_events,
    unsubscribe,
)

events_router = APIRouter(tags=["events"])


def event_response(event: ElectionEvent, subscribed_ids: set[str] | None = None) -> ElectionEventResponse:
    """Render an event, flagging the subscription when a visitor was given."""
    response = ElectionEventResponse.model_validate(event)
    if subscribed_ids is not None:
        response.is_subscribed = event.id in subscribed_ids
    return response


async def _refresh_statuses(session: AsyncSession, settings: Settings) -> None:
    """Move long-past events to ``passed`` before serving reads."""
    try:
        await transition_passed_events(session, grace_days=settings.event_passed_grace_days)
    except Exception as e:
        logger.warning(f"Failed to transition passed election events: {e}")
        await session.rollback()


@events_router.get("/events/{state}", response_model=list[ElectionEventResponse])
async def public_events(
    state: str,
    visitor_id: str | None = Query(None, alias="visitorId"),
    session: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> list[ElectionEventResponse]:
    """List public, non-archived events for a pilot state, upcoming first."""
    await _refresh_statuses(session, settings)
    try:
        events = await list_public_events(session, state)
        subscribed_ids = await get_subscribed_event_ids(session, visitor_id) if visitor_id else None
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UnsupportedStateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(e), "supported": False, "state": e.state},
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error listing events for {state}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch election events",
        ) from e
    return [event_response(event, subscribed_ids) for event in events]


@events_router.get("/event/{event_id}", response_model=ElectionEventResponse)
async def event_detail(
    event_id: str,
    visitor_id: str | None = Query(None, alias="visitorId"),
    session: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> ElectionEventResponse:
    """Get a single election event."""
    await _refresh_statuses(session, settings)
    event = await get_event(session, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found")
    subscribed_ids = await get_subscribed_event_ids(session, visitor_id) if visitor_id else None
    return event_response(event, subscribed_ids)


@events_router.post("/events/subscribe", response_model=EventSubscriptionResponse)
async def subscribe_to_event(
    request: EventSubscriptionRequest,
    session: AsyncSession = Depends(get_async_session),
) -> EventSubscriptionResponse:
    """Follow an event.  Subscribing twice is a no-op."""
    try:
        await subscribe(session, request.visitor_id, request.event_id)
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e
    except Exception as e:
        logger.error(f"Unexpected error subscribing {request.visitor_id} to {request.event_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to subscribe",
        ) from e
    return EventSubscriptionResponse(subscribed=True)


@events_router.post("/events/unsubscribe", response_model=EventSubscriptionResponse)
async def unsubscribe_from_event(
    request: EventSubscriptionRequest,
    session: AsyncSession = Depends(get_async_session),
) -> EventSubscriptionResponse:
    """Stop following an event."""
    try:
        await unsubscribe(session, request.visitor_id, request.event_id)
    except Exception as e:
        logger.error(f"Unexpected error unsubscribing {request.visitor_id} from {request.event_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unsubscribe",
        ) from e
    return EventSubscriptionResponse(subscribed=False)


@events_router.get("/subscriptions/{visitor_id}", response_model=list[ElectionEventResponse])
async def visitor_subscriptions(
    visitor_id: str,
    session: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> list[ElectionEventResponse]:
    """List the events a visitor follows, by election date."""
    await _refresh_statuses(session, settings)
    events = await list_subscribed_events(session, visitor_id)
    return [event_response(event, {event.id for event in events}) for event in events]
