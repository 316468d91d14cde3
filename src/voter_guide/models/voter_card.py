"""FinalizedVoterCard model — a shareable snapshot of a visitor's decisions."""

import uuid
from typing import Any

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from voter_guide.models.base import Base, JSONType, TimestampMixin


class FinalizedVoterCard(Base, TimestampMixin):
    """A finalized voter card owned by the visitor who created it.

    ``decisions`` holds the ordered line items
    ``{type, title, decision, hidden?, note?, description?}``.
    """

    __tablename__ = "finalized_voter_cards"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    visitor_id: Mapped[str] = mapped_column(String(100), nullable=False)
    event_id: Mapped[str] = mapped_column(String(100), ForeignKey("election_events.id"), nullable=False)
    ballot_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    template: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    election_date: Mapped[str] = mapped_column(String(50), nullable=False)
    election_type: Mapped[str] = mapped_column(String(50), nullable=False)
    decisions: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    show_notes: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    share_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("ix_finalized_voter_cards_visitor_id", "visitor_id"),
        Index("ix_finalized_voter_cards_user_id", "user_id"),
        Index("ix_finalized_voter_cards_event_id", "event_id"),
    )
