"""Analytics service -- append-only usage events and the summary dashboard."""

from datetime import UTC, datetime, timedelta
from typing import Any

from loguru import logger
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.analytics_event import AnalyticsEvent
from voter_guide.models.voter_card import FinalizedVoterCard
from voter_guide.schemas.analytics import AnalyticsSummaryResponse, DailyVisits

DAILY_VISITS_WINDOW_DAYS = 30


async def record_event(
    session: AsyncSession,
    *,
    event_type: str,
    event_data: dict[str, Any] | None = None,
    visitor_id: str | None = None,
    state: str | None = None,
) -> AnalyticsEvent:
    """Append an analytics event.

    Args:
        session: Database session.
        event_type: Event name (e.g. ``page_view``, ``voter_card_created``).
        event_data: Free-form payload.
        visitor_id: Optional visitor identifier.
        state: Optional two-letter state code.

    Returns:
        The stored AnalyticsEvent.
    """
    event = AnalyticsEvent(
        event_type=event_type,
        event_data=event_data,
        visitor_id=visitor_id,
        state=state,
    )
    session.add(event)
    await session.commit()
    logger.debug(f"Recorded analytics event {event_type} (visitor={visitor_id}, state={state})")
    return event


async def _count(session: AsyncSession, event_type: str) -> int:
    result = await session.execute(select(func.count(AnalyticsEvent.id)).where(AnalyticsEvent.event_type == event_type))
    return result.scalar_one() or 0


async def get_summary(session: AsyncSession, *, now: datetime | None = None) -> AnalyticsSummaryResponse:
    """Compute the analytics dashboard figures.

    ``completion_rate`` is finalized cards as a percentage of visitors who
    started recording decisions.
    """
    now = now or datetime.now(UTC)
    window_start = now - timedelta(days=DAILY_VISITS_WINDOW_DAYS)

    visitors_result = await session.execute(
        select(func.count(distinct(AnalyticsEvent.visitor_id))).where(AnalyticsEvent.event_type == "page_view")
    )
    total_visitors = visitors_result.scalar_one() or 0
    total_shares = await _count(session, "voter_card_created")
    decisions_started = await _count(session, "decisions_started")

    cards_result = await session.execute(select(func.count(FinalizedVoterCard.id)))
    decisions_completed = cards_result.scalar_one() or 0

    state_rows = await session.execute(
        select(AnalyticsEvent.state, func.count(AnalyticsEvent.id))
        .where(AnalyticsEvent.state.is_not(None))
        .group_by(AnalyticsEvent.state)
    )
    state_breakdown = {state: count for state, count in state_rows.all()}

    day = func.date(AnalyticsEvent.created_at)
    daily_rows = await session.execute(
        select(day, func.count(AnalyticsEvent.id))
        .where(AnalyticsEvent.event_type == "page_view", AnalyticsEvent.created_at >= window_start)
        .group_by(day)
        .order_by(day)
    )
    daily_visits = [DailyVisits(date=str(visit_day), count=count) for visit_day, count in daily_rows.all()]

    completion_rate = (decisions_completed / decisions_started) * 100 if decisions_started else 0.0

    return AnalyticsSummaryResponse(
        total_visitors=total_visitors,
        total_shares=total_shares,
        decisions_completed=decisions_completed,
        state_breakdown=state_breakdown,
        daily_visits=daily_visits,
        completion_rate=round(completion_rate, 2),
    )
