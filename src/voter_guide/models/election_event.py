"""Election event ORM models.

Provides ElectionEvent (an administrator-managed election with an
upcoming/passed lifecycle) and EventSubscription (a visitor following an event).
"""

from datetime import date

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin

EVENT_TYPES: tuple[str, ...] = ("primary", "general", "midterm", "special", "runoff")
EVENT_STATUSES: tuple[str, ...] = ("upcoming", "passed")
EVENT_VISIBILITIES: tuple[str, ...] = ("public", "private")


class ElectionEvent(Base, TimestampMixin, SoftDeleteMixin):
    """An election created by administrators for one state."""

    __tablename__ = "election_events"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    county: Mapped[str | None] = mapped_column(String(100), nullable=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    election_date: Mapped[date] = mapped_column(Date, nullable=False)
    registration_deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    ballot_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="upcoming", server_default="upcoming")
    visibility: Mapped[str] = mapped_column(String(20), nullable=False, default="private", server_default="private")
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    __table_args__ = (
        CheckConstraint("status IN ('upcoming', 'passed')", name="ck_election_event_status"),
        CheckConstraint("visibility IN ('public', 'private')", name="ck_election_event_visibility"),
        Index("ix_election_events_state", "state"),
        Index("ix_election_events_election_date", "election_date"),
    )


class EventSubscription(Base, UUIDMixin, TimestampMixin):
    """A visitor subscribed to updates for an election event."""

    __tablename__ = "event_subscriptions"

    visitor_id: Mapped[str] = mapped_column(String(100), nullable=False)
    event_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("election_events.id", ondelete="CASCADE"),
        nullable=False,
    )
    notify_on_update: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")

    __table_args__ = (
        UniqueConstraint("visitor_id", "event_id", name="uq_event_subscription_visitor_event"),
        Index("ix_event_subscriptions_visitor_id", "visitor_id"),
    )
