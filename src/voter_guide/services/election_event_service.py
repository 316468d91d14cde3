"""Election event service -- admin lifecycle, public listings, and subscriptions."""

import time
from datetime import UTC, date, datetime, timedelta

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.lib.location import validate_state
from voter_guide.models.election_event import ElectionEvent, EventSubscription

# Fields that may be set via the update endpoint.  Anything outside this set
# is silently ignored, preventing mass-assignment of ``id`` or ``deleted_at``.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "county",
        "title",
        "event_type",
        "election_date",
        "registration_deadline",
        "description",
        "ballot_id",
        "status",
        "visibility",
        "archived",
    }
)

_STATUS_PRIORITY = {"upcoming": 0, "passed": 1}


class ElectionEventNotFoundError(LookupError):
    """Raised when an election event does not exist or was deleted."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Election event {event_id} not found")


def _active_filter():  # type: ignore[no-untyped-def]
    return ElectionEvent.deleted_at.is_(None)


def _sort_events(events: list[ElectionEvent]) -> list[ElectionEvent]:
    return sorted(events, key=lambda e: (_STATUS_PRIORITY.get(e.status, 99), e.election_date, e.id))


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def transition_passed_events(
    session: AsyncSession,
    *,
    grace_days: int = 7,
    today: date | None = None,
) -> int:
    """Mark upcoming events more than ``grace_days`` past their date as passed.

    Args:
        session: Database session.
        grace_days: Days after the election date before the transition.
        today: Reference date (defaults to the current UTC date).

    Returns:
        Number of events transitioned.
    """
    cutoff = (today or datetime.now(UTC).date()) - timedelta(days=grace_days)
    result = await session.execute(
        update(ElectionEvent)
        .where(
            ElectionEvent.status == "upcoming",
            ElectionEvent.election_date < cutoff,
            _active_filter(),
        )
        .values(status="passed")
    )
    await session.commit()
    count = result.rowcount or 0
    if count:
        logger.info(f"Transitioned {count} election events to passed")
    return count


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------


async def get_event(session: AsyncSession, event_id: str) -> ElectionEvent | None:
    """Get an election event by id (excluding soft-deleted)."""
    result = await session.execute(select(ElectionEvent).where(ElectionEvent.id == event_id, _active_filter()))
    return result.scalar_one_or_none()


async def list_events(session: AsyncSession, *, archived: bool = False) -> list[ElectionEvent]:
    """List all non-deleted events with the given archived flag, upcoming first."""
    result = await session.execute(select(ElectionEvent).where(ElectionEvent.archived.is_(archived), _active_filter()))
    return _sort_events(list(result.scalars().all()))


async def list_public_events(session: AsyncSession, state: str) -> list[ElectionEvent]:
    """List public, non-archived events for a pilot state, upcoming first.

    Raises:
        InvalidStateError: If the state code is malformed.
        UnsupportedStateError: If the state is outside the pilot program.
    """
    validate_state(state)
    result = await session.execute(
        select(ElectionEvent).where(
            ElectionEvent.state == state,
            ElectionEvent.visibility == "public",
            ElectionEvent.archived.is_(False),
            _active_filter(),
        )
    )
    return _sort_events(list(result.scalars().all()))


async def get_active_event(session: AsyncSession, state: str) -> ElectionEvent | None:
    """Return the next upcoming, non-archived event for a state, or None."""
    result = await session.execute(
        select(ElectionEvent)
        .where(
            ElectionEvent.state == state,
            ElectionEvent.status == "upcoming",
            ElectionEvent.archived.is_(False),
            _active_filter(),
        )
        .order_by(ElectionEvent.election_date, ElectionEvent.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Write operations (admin)
# ---------------------------------------------------------------------------


def generate_event_id(state: str, event_type: str) -> str:
    return f"{state.lower()}-{event_type}-{int(time.time() * 1000)}"


async def create_event(
    session: AsyncSession,
    *,
    state: str,
    title: str,
    event_type: str,
    election_date: date,
    county: str | None = None,
    registration_deadline: date | None = None,
    description: str | None = None,
    ballot_id: str | None = None,
    visibility: str = "private",
    event_id: str | None = None,
) -> ElectionEvent:
    """Create a new upcoming election event.

    Raises:
        InvalidStateError: If the state code is malformed.
        UnsupportedStateError: If the state is outside the pilot program.
        ValueError: If an event with the same id already exists.
    """
    validate_state(state)
    event_id = event_id or generate_event_id(state, event_type)
    result = await session.execute(select(ElectionEvent.id).where(ElectionEvent.id == event_id))
    if result.scalar_one_or_none() is not None:
        msg = f"Election event {event_id} already exists"
        raise ValueError(msg)

    event = ElectionEvent(
        id=event_id,
        state=state,
        county=county,
        title=title,
        event_type=event_type,
        election_date=election_date,
        registration_deadline=registration_deadline,
        description=description,
        ballot_id=ballot_id,
        status="upcoming",
        visibility=visibility,
        archived=False,
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    logger.info(f"Created election event {event.id} ({state}, {event_type}, {election_date})")
    return event


async def update_event(session: AsyncSession, event_id: str, *, data: dict) -> ElectionEvent:
    """Apply a partial update to an election event.

    Raises:
        ElectionEventNotFoundError: If the event does not exist.
    """
    event = await get_event(session, event_id)
    if event is None:
        raise ElectionEventNotFoundError(event_id)

    for field_name, value in data.items():
        if field_name in _UPDATABLE_FIELDS:
            setattr(event, field_name, value)

    await session.commit()
    await session.refresh(event)
    logger.info(f"Updated election event {event.id}")
    return event


async def set_archived(session: AsyncSession, event_id: str, *, archived: bool) -> ElectionEvent:
    """Archive or restore an election event.

    Raises:
        ElectionEventNotFoundError: If the event does not exist.
    """
    event = await update_event(session, event_id, data={"archived": archived})
    logger.info(f"{'Archived' if archived else 'Restored'} election event {event.id}")
    return event


async def delete_event(session: AsyncSession, event_id: str) -> None:
    """Soft-delete an election event and drop its subscriptions.

    Raises:
        ElectionEventNotFoundError: If the event does not exist.
    """
    event = await get_event(session, event_id)
    if event is None:
        raise ElectionEventNotFoundError(event_id)

    await session.execute(delete(EventSubscription).where(EventSubscription.event_id == event_id))
    event.deleted_at = datetime.now(UTC)
    await session.commit()
    logger.info(f"Soft-deleted election event {event_id}")


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


async def get_subscribed_event_ids(session: AsyncSession, visitor_id: str) -> set[str]:
    result = await session.execute(
        select(EventSubscription.event_id).where(EventSubscription.visitor_id == visitor_id)
    )
    return set(result.scalars().all())


async def subscribe(session: AsyncSession, visitor_id: str, event_id: str) -> None:
    """Subscribe a visitor to an event (no-op if already subscribed).

    Raises:
        ElectionEventNotFoundError: If the event does not exist.
    """
    if await get_event(session, event_id) is None:
        raise ElectionEventNotFoundError(event_id)
    if event_id in await get_subscribed_event_ids(session, visitor_id):
        return
    session.add(EventSubscription(visitor_id=visitor_id, event_id=event_id, notify_on_update=True))
    await session.commit()
    logger.info(f"Visitor {visitor_id} subscribed to {event_id}")


async def unsubscribe(session: AsyncSession, visitor_id: str, event_id: str) -> None:
    """Remove a visitor's subscription to an event, if any."""
    await session.execute(
        delete(EventSubscription).where(
            EventSubscription.visitor_id == visitor_id,
            EventSubscription.event_id == event_id,
        )
    )
    await session.commit()
    logger.info(f"Visitor {visitor_id} unsubscribed from {event_id}")


async def list_subscribed_events(session: AsyncSession, visitor_id: str) -> list[ElectionEvent]:
    """List events a visitor follows, ordered by election date."""
    result = await session.execute(
        select(ElectionEvent)
        .join(EventSubscription, EventSubscription.event_id == ElectionEvent.id)
        .where(EventSubscription.visitor_id == visitor_id, _active_filter())
        .order_by(ElectionEvent.election_date, ElectionEvent.id)
    )
    return list(result.scalars().all())
