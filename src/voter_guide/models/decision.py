"""VoterDecision model — one visitor's decisions for one ballot."""

from typing import Any

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, JSONType, TimestampMixin, UUIDMixin

DECISION_OPTIONS: tuple[str, ...] = ("yes", "no", "undecided")


class VoterDecision(Base, UUIDMixin, TimestampMixin):
    """Measure decisions, candidate selections, and notes keyed by (visitor_id, ballot_id).

    Attributes:
        measure_decisions: measureId -> {"decision": yes|no|undecided, "note": str?}.
        candidate_selections: raceId -> candidateId.
        notes: item id -> free text.
    """

    __tablename__ = "voter_decisions"

    visitor_id: Mapped[str] = mapped_column(String(100), nullable=False)
    ballot_id: Mapped[str] = mapped_column(String(200), nullable=False)
    event_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    measure_decisions: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    candidate_selections: Mapped[dict[str, str]] = mapped_column(JSONType, nullable=False, default=dict)
    notes: Mapped[dict[str, str]] = mapped_column(JSONType, nullable=False, default=dict)
    shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    __table_args__ = (
        UniqueConstraint("visitor_id", "ballot_id", name="uq_voter_decision_visitor_ballot"),
        Index("ix_voter_decisions_visitor_id", "visitor_id"),
    )
