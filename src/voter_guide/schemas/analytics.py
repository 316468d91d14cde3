"""Pydantic v2 schemas for analytics events and the summary dashboard."""

from typing import Any

from pydantic import Field

from voter_guide.schemas.common import CamelModel


class AnalyticsEventRequest(CamelModel):
    """A usage event reported by the client."""

    event_type: str = Field(min_length=1, max_length=50)
    event_data: dict[str, Any] | None = None
    visitor_id: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")


class DailyVisits(CamelModel):
    """Page views on one day."""

    date: str
    count: int


class AnalyticsSummaryResponse(CamelModel):
    """Aggregate usage figures."""

    total_visitors: int = 0
    total_shares: int = 0
    decisions_completed: int = 0
    state_breakdown: dict[str, int] = Field(default_factory=dict)
    daily_visits: list[DailyVisits] = Field(default_factory=list)
    completion_rate: float = 0.0
