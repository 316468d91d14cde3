"""Pydantic v2 schemas for finalized voter cards."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from voter_guide.schemas.common import CamelModel

CardTemplate = Literal["minimal", "bold", "professional"]


class CardDecisionItem(CamelModel):
    """One line on a voter card."""

    type: Literal["measure", "candidate"]
    title: str = Field(min_length=1, max_length=300)
    decision: str = Field(min_length=1, max_length=50)
    hidden: bool | None = None
    note: str | None = None
    description: str | None = None


class VoterCardFinalizeRequest(CamelModel):
    """Request body for finalizing (creating or replacing) a visitor's card for an event."""

    id: str | None = Field(default=None, min_length=1, max_length=100)
    visitor_id: str = Field(min_length=1, max_length=100)
    event_id: str = Field(min_length=1, max_length=100)
    ballot_id: str | None = Field(default=None, max_length=200)
    template: CardTemplate
    location: str = Field(min_length=1, max_length=200)
    state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    election_date: str = Field(min_length=1, max_length=50)
    election_type: str = Field(min_length=1, max_length=50)
    decisions: list[CardDecisionItem]
    show_notes: bool = True
    is_public: bool = True


class VoterCardUpdateRequest(CamelModel):
    """Partial card update; ``visitor_id`` must match the card owner."""

    visitor_id: str = Field(min_length=1, max_length=100)
    template: CardTemplate | None = None
    location: str | None = Field(default=None, min_length=1, max_length=200)
    decisions: list[CardDecisionItem] | None = None
    show_notes: bool | None = None
    is_public: bool | None = None
    username: str | None = Field(default=None, description="Attach the card to this registered user")


class VoterCardResponse(CamelModel):
    """A finalized voter card with its share URL for the serving host."""

    id: str
    visitor_id: str
    user_id: uuid.UUID | None = None
    event_id: str
    ballot_id: str | None = None
    template: str
    location: str
    state: str | None = None
    election_date: str
    election_type: str
    decisions: list[CardDecisionItem] = Field(default_factory=list)
    show_notes: bool = True
    is_public: bool = True
    share_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ComposeCardRequest(CamelModel):
    """Request body for building card line items from stored decisions."""

    visitor_id: str = Field(min_length=1, max_length=100)
    ballot_id: str = Field(min_length=1, max_length=200)
    template: CardTemplate = "minimal"
    hidden_titles: list[str] = Field(default_factory=list)
    show_notes: bool = True


class ComposeCardResponse(CamelModel):
    """A card draft ready to be finalized."""

    visitor_id: str
    event_id: str
    ballot_id: str
    template: str
    location: str
    state: str
    election_date: str
    election_type: str
    decisions: list[CardDecisionItem] = Field(default_factory=list)
    show_notes: bool = True
