"""Pydantic v2 schemas for visitor decisions."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from voter_guide.schemas.common import CamelModel


class MeasureDecisionEntry(CamelModel):
    """A stance on one ballot measure."""

    decision: Literal["yes", "no", "undecided"]
    note: str | None = None


class DecisionSaveRequest(CamelModel):
    """Full replacement of a visitor's decisions for a ballot."""

    visitor_id: str = Field(min_length=1, max_length=100)
    ballot_id: str = Field(min_length=1, max_length=200)
    event_id: str | None = Field(default=None, max_length=100)
    measure_decisions: dict[str, MeasureDecisionEntry] = Field(default_factory=dict)
    candidate_selections: dict[str, str] = Field(default_factory=dict)
    notes: dict[str, str] = Field(default_factory=dict)


class DecisionResponse(CamelModel):
    """Stored decisions, echoed exactly as saved."""

    visitor_id: str
    ballot_id: str
    event_id: str | None = None
    measure_decisions: dict[str, dict[str, Any]] = Field(default_factory=dict)
    candidate_selections: dict[str, str] = Field(default_factory=dict)
    notes: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime | None = None
