"""Pydantic v2 schemas for ballots, races, candidates, and measures."""

from datetime import date, datetime
from typing import Any

from pydantic import Field

from voter_guide.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Ballot building blocks
# ---------------------------------------------------------------------------


class EndorsementResponse(CamelModel):
    """An organization's endorsement of a candidate."""

    organization: str
    endorsement_type: str | None = None
    notes: str | None = None


class CandidateResponse(CamelModel):
    """A candidate with endorsements in storage order."""

    id: str
    first_name: str
    last_name: str
    party: str | None = None
    incumbent_status: str | None = None
    photo_url: str | None = None
    website_url: str | None = None
    bio: str | None = None
    position: str | None = None
    endorsements: list[EndorsementResponse] = Field(default_factory=list)


class RaceCandidateResponse(CandidateResponse):
    """A candidate as listed under one race, with primary results."""

    primary_votes: int | None = None
    primary_percentage: float | None = None
    is_won_primary: bool | None = None


class RaceResponse(CamelModel):
    """A race with its candidates in join-table order."""

    id: str
    election_year: int
    state: str
    race_type: str
    office: str
    position: str | None = None
    is_primary: bool = False
    primary_type: str | None = None
    description: str | None = None
    candidates: list[CandidateResponse] = Field(default_factory=list)


class MeasureResponse(CamelModel):
    """A state-wide ballot measure."""

    id: str
    election_year: int
    measure_number: str
    title: str
    short_title: str | None = None
    description: str | None = None
    type: str | None = None
    fiscal_impact: str | None = None
    pro_arguments: list[str] = Field(default_factory=list)
    con_arguments: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class BallotResponse(CamelModel):
    """Everything on the ballot for one ZIP code."""

    zipcode: str
    state: str
    county: str
    city: str | None = None
    races: list[RaceResponse] = Field(default_factory=list)
    ballot_measures: list[MeasureResponse] = Field(default_factory=list)
    ballot_id: str | None = Field(default=None, description="Cache id, set when an active election event exists")
    event_id: str | None = None


class RacesByStateResponse(CamelModel):
    """All races in a state."""

    state: str
    races: list[RaceResponse] = Field(default_factory=list)


class RaceCandidatesResponse(CamelModel):
    """A race and its candidates with primary results."""

    race: RaceResponse
    candidates: list[RaceCandidateResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cached ballots (admin)
# ---------------------------------------------------------------------------


class CachedBallotResponse(CamelModel):
    """A cached ballot record."""

    id: str
    event_id: str
    zipcode: str
    state: str
    county: str | None = None
    city: str | None = None
    election_date: date | None = None
    election_type: str | None = None
    race_ids: list[str] = Field(default_factory=list)
    measure_ids: list[str] = Field(default_factory=list)
    races: list[dict[str, Any]] = Field(default_factory=list)
    measures: list[dict[str, Any]] = Field(default_factory=list)
    candidates: list[dict[str, Any]] = Field(default_factory=list)
    races_count: int = 0
    measures_count: int = 0
    last_updated: datetime | None = None


class BallotUpsertRequest(CamelModel):
    """Request body for an administrator ballot override."""

    id: str | None = Field(default=None, min_length=1, max_length=200)
    event_id: str = Field(min_length=1, max_length=100)
    zipcode: str = Field(pattern=r"^\d{5}$")
    state: str = Field(pattern=r"^[A-Z]{2}$")
    county: str | None = None
    city: str | None = None
    election_date: date | None = None
    election_type: str | None = None
    races: list[dict[str, Any]] = Field(default_factory=list)
    measures: list[dict[str, Any]] = Field(default_factory=list)
    candidates: list[dict[str, Any]] = Field(default_factory=list)
