"""Ballot model — the insert-once cached aggregate for a ZIP code and election event."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import Date, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, JSONType


class Ballot(Base):
    """Denormalized ballot snapshot keyed by ``ballot-{zipcode}-{eventId}``.

    Rows are written once on the first ballot read for a (zipcode, event)
    pair and are only replaced by an explicit administrator update.
    """

    __tablename__ = "ballots"

    id: Mapped[str] = mapped_column(String(200), primary_key=True)
    event_id: Mapped[str] = mapped_column(String(100), nullable=False)
    zipcode: Mapped[str] = mapped_column(String(5), nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    county: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    election_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    election_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    race_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    measure_ids: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    races: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    measures: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    candidates: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    races_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    measures_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_ballots_event_id", "event_id"),
        Index("ix_ballots_zipcode", "zipcode"),
    )
