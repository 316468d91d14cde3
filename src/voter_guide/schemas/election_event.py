"""Pydantic v2 schemas for election events and subscriptions."""

from datetime import date, datetime
from typing import Literal

from pydantic import Field

from voter_guide.schemas.common import CamelModel

EventType = Literal["primary", "general", "midterm", "special", "runoff"]
EventStatus = Literal["upcoming", "passed"]
EventVisibility = Literal["public", "private"]

# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ElectionEventResponse(CamelModel):
    """An election event; ``is_subscribed`` is set when a visitor id was supplied."""

    id: str
    state: str
    county: str | None = None
    title: str
    event_type: str
    election_date: date
    registration_deadline: date | None = None
    description: str | None = None
    ballot_id: str | None = None
    status: str
    visibility: str
    archived: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_subscribed: bool | None = None


# ---------------------------------------------------------------------------
# Write schemas (admin)
# ---------------------------------------------------------------------------


class ElectionEventCreateRequest(CamelModel):
    """Request body for creating an election event."""

    state: str = Field(pattern=r"^[A-Z]{2}$")
    county: str | None = Field(default=None, max_length=100)
    title: str = Field(min_length=1, max_length=300)
    event_type: EventType
    election_date: date
    registration_deadline: date | None = None
    description: str | None = None
    ballot_id: str | None = Field(default=None, max_length=200)
    visibility: EventVisibility = "private"


class ElectionEventUpdateRequest(CamelModel):
    """Request body for updating an election event.

    All fields optional -- only provided fields are updated.
    """

    county: str | None = Field(default=None, max_length=100)
    title: str | None = Field(default=None, min_length=1, max_length=300)
    event_type: EventType | None = None
    election_date: date | None = None
    registration_deadline: date | None = None
    description: str | None = None
    ballot_id: str | None = Field(default=None, max_length=200)
    status: EventStatus | None = None
    visibility: EventVisibility | None = None
    archived: bool | None = None


class EventSubscriptionRequest(CamelModel):
    """Subscribe or unsubscribe a visitor to an event."""

    visitor_id: str = Field(min_length=1, max_length=100)
    event_id: str = Field(min_length=1, max_length=100)


class EventSubscriptionResponse(CamelModel):
    """Result of a subscription change."""

    success: bool = True
    subscribed: bool
