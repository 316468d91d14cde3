"""Ballot service -- assemble a ZIP code's ballot and cache it per election event.

Aggregation is read-only: it loads districts, races, race/candidate links,
candidates, and endorsements with batched ``IN`` queries and recombines them
by race id and candidate id.  Race order follows the race query, candidate
order within a race follows the join-table order, and endorsements keep
storage order.

Caching is insert-once and best-effort: a failure to persist never affects
the ballot returned to the caller.
"""

import contextlib
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.lib.location import validate_state
from voter_guide.models.ballot import Ballot
from voter_guide.models.ballot_measure import BallotMeasure
from voter_guide.models.election_event import ElectionEvent
from voter_guide.models.location import Zipcode
from voter_guide.models.race import Candidate, CandidateEndorsement, Race, RaceCandidate
from voter_guide.schemas.ballot import (
    BallotResponse,
    CandidateResponse,
    EndorsementResponse,
    MeasureResponse,
    RaceCandidateResponse,
    RaceCandidatesResponse,
    RaceResponse,
    RacesByStateResponse,
)
from voter_guide.services.location_service import list_district_ids

# Fields an administrator may overwrite on a cached ballot.
_UPSERT_FIELDS: frozenset[str] = frozenset(
    {
        "event_id",
        "zipcode",
        "state",
        "county",
        "city",
        "election_date",
        "election_type",
        "race_ids",
        "measure_ids",
        "races",
        "measures",
        "candidates",
        "races_count",
        "measures_count",
    }
)


def ballot_cache_id(zipcode: str, event_id: str) -> str:
    """Deterministic cache id for a (zipcode, event) pair."""
    return f"ballot-{zipcode}-{event_id}"


def _insert(session: AsyncSession) -> Any:
    """Return the dialect-specific ``insert`` supporting ON CONFLICT."""
    if session.bind is not None and session.bind.dialect.name == "sqlite":
        return sqlite_insert
    return pg_insert


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _race_response(race: Race, candidates: list[CandidateResponse]) -> RaceResponse:
    return RaceResponse(
        id=race.id,
        election_year=race.election_year,
        state=race.state,
        race_type=race.race_type,
        office=race.office,
        position=race.position,
        is_primary=bool(race.is_primary),
        primary_type=race.primary_type,
        description=race.description,
        candidates=candidates,
    )


def _measure_response(measure: BallotMeasure) -> MeasureResponse:
    return MeasureResponse(
        id=measure.id,
        election_year=measure.election_year,
        measure_number=measure.measure_number,
        title=measure.title,
        short_title=measure.short_title,
        description=measure.description,
        type=measure.type,
        fiscal_impact=measure.fiscal_impact,
        pro_arguments=list(measure.pro_arguments or []),
        con_arguments=list(measure.con_arguments or []),
    )


async def _load_candidates_by_race(
    session: AsyncSession,
    race_ids: list[str],
    *,
    include_primary_results: bool = False,
) -> dict[str, list[Any]]:
    """Load candidates (with endorsements) for races, keyed by race id.

    Args:
        session: Database session.
        race_ids: Races to load candidates for.
        include_primary_results: Build RaceCandidateResponse entries carrying
            primary vote figures instead of plain CandidateResponse.

    Returns:
        race id -> candidates in join-table order (empty list when none).
    """
    links_result = await session.execute(
        select(RaceCandidate).where(RaceCandidate.race_id.in_(race_ids)).order_by(RaceCandidate.id)
    )
    links = list(links_result.scalars().all())

    candidate_ids = list(dict.fromkeys(link.candidate_id for link in links))
    candidates_by_id: dict[str, Candidate] = {}
    endorsements_by_candidate: dict[str, list[EndorsementResponse]] = {cid: [] for cid in candidate_ids}
    if candidate_ids:
        candidates_result = await session.execute(select(Candidate).where(Candidate.id.in_(candidate_ids)))
        candidates_by_id = {c.id: c for c in candidates_result.scalars().all()}

        endorsements_result = await session.execute(
            select(CandidateEndorsement)
            .where(CandidateEndorsement.candidate_id.in_(candidate_ids))
            .order_by(CandidateEndorsement.id)
        )
        for endorsement in endorsements_result.scalars().all():
            endorsements_by_candidate[endorsement.candidate_id].append(
                EndorsementResponse(
                    organization=endorsement.organization,
                    endorsement_type=endorsement.endorsement_type,
                    notes=endorsement.notes,
                )
            )

    candidates_by_race: dict[str, list[Any]] = {race_id: [] for race_id in race_ids}
    for link in links:
        candidate = candidates_by_id.get(link.candidate_id)
        if candidate is None:
            continue
        fields: dict[str, Any] = {
            "id": candidate.id,
            "first_name": candidate.first_name,
            "last_name": candidate.last_name,
            "party": candidate.party,
            "incumbent_status": candidate.incumbent_status,
            "photo_url": candidate.photo_url,
            "website_url": candidate.website_url,
            "bio": candidate.bio,
            "position": candidate.position,
            "endorsements": list(endorsements_by_candidate.get(candidate.id, [])),
        }
        if include_primary_results:
            entry: CandidateResponse = RaceCandidateResponse(
                **fields,
                primary_votes=link.primary_votes,
                primary_percentage=link.primary_percentage,
                is_won_primary=link.is_won_primary,
            )
        else:
            entry = CandidateResponse(**fields)
        candidates_by_race[link.race_id].append(entry)

    return candidates_by_race


async def load_races_with_candidates(session: AsyncSession, races: list[Race]) -> list[RaceResponse]:
    """Attach candidates and endorsements to races, preserving race order.

    Returns:
        One RaceResponse per race, each with a (possibly empty) candidate list.
    """
    if not races:
        return []
    candidates_by_race = await _load_candidates_by_race(session, [race.id for race in races])
    return [_race_response(race, candidates_by_race[race.id]) for race in races]


async def assemble_ballot(session: AsyncSession, location: Zipcode) -> BallotResponse:
    """Assemble the full ballot for a resolved location.

    A ZIP code with no linked districts yields an empty race list.  Measures
    are scoped to the location's state.  Storage errors propagate.

    Args:
        session: Database session.
        location: A resolved Zipcode row.

    Returns:
        The ballot aggregate (without cache ids).
    """
    district_ids = await list_district_ids(session, location.zipcode)

    races: list[Race] = []
    if district_ids:
        races_result = await session.execute(select(Race).where(Race.district_id.in_(district_ids)).order_by(Race.id))
        races = list(races_result.scalars().all())

    race_responses = await load_races_with_candidates(session, races)

    measures_result = await session.execute(
        select(BallotMeasure).where(BallotMeasure.state == location.state).order_by(BallotMeasure.id)
    )
    measures = [_measure_response(m) for m in measures_result.scalars().all()]

    logger.info(
        f"Assembled ballot for {location.zipcode}: {len(district_ids)} districts, "
        f"{len(race_responses)} races, {len(measures)} measures"
    )
    return BallotResponse(
        zipcode=location.zipcode,
        state=location.state,
        county=location.county,
        city=location.city,
        races=race_responses,
        ballot_measures=measures,
    )


async def list_races_by_state(session: AsyncSession, state: str) -> RacesByStateResponse:
    """List every race in a pilot state with candidates attached.

    Raises:
        InvalidStateError: If the state code is malformed.
        UnsupportedStateError: If the state is outside the pilot program.
    """
    validate_state(state)
    result = await session.execute(select(Race).where(Race.state == state).order_by(Race.id))
    races = await load_races_with_candidates(session, list(result.scalars().all()))
    return RacesByStateResponse(state=state, races=races)


async def get_race_candidates(session: AsyncSession, race_id: str) -> RaceCandidatesResponse | None:
    """Get a race with its candidates and primary results, or None if unknown."""
    result = await session.execute(select(Race).where(Race.id == race_id))
    race = result.scalar_one_or_none()
    if race is None:
        return None
    candidates_by_race = await _load_candidates_by_race(session, [race.id], include_primary_results=True)
    return RaceCandidatesResponse(race=_race_response(race, []), candidates=candidates_by_race[race.id])


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


def _flatten_candidates(ballot: BallotResponse) -> list[dict[str, Any]]:
    flattened: list[dict[str, Any]] = []
    for race in ballot.races:
        for candidate in race.candidates:
            entry = candidate.model_dump(mode="json", by_alias=True)
            entry["office"] = race.office
            entry["raceId"] = race.id
            flattened.append(entry)
    return flattened


async def persist_ballot(
    session: AsyncSession,
    ballot: BallotResponse,
    event: ElectionEvent | None,
) -> str | None:
    """Insert the ballot into the cache once per (zipcode, event).

    An existing row is left untouched.  Every failure, including a missing
    event, is logged and swallowed.

    Args:
        session: Database session.
        ballot: The freshly assembled ballot.
        event: The active election event, or None.

    Returns:
        The cache id, or None if nothing could be cached.
    """
    if event is None:
        logger.warning(f"No active election event for {ballot.state}; ballot for {ballot.zipcode} not cached")
        return None

    ballot_id = ballot_cache_id(ballot.zipcode, event.id)
    races = [race.model_dump(mode="json", by_alias=True) for race in ballot.races]
    measures = [measure.model_dump(mode="json", by_alias=True) for measure in ballot.ballot_measures]
    values = {
        "id": ballot_id,
        "event_id": event.id,
        "zipcode": ballot.zipcode,
        "state": ballot.state,
        "county": ballot.county,
        "city": ballot.city,
        "election_date": event.election_date,
        "election_type": event.event_type,
        "race_ids": [race.id for race in ballot.races],
        "measure_ids": [measure.id for measure in ballot.ballot_measures],
        "races": races,
        "measures": measures,
        "candidates": _flatten_candidates(ballot),
        "races_count": len(races),
        "measures_count": len(measures),
    }
    try:
        stmt = _insert(session)(Ballot).values(**values).on_conflict_do_nothing(index_elements=["id"])
        await session.execute(stmt)
        await session.commit()
    except Exception as e:
        logger.warning(f"Failed to cache ballot {ballot_id}: {e}")
        with contextlib.suppress(Exception):
            await session.rollback()
        return None
    return ballot_id


async def get_cached_ballot(session: AsyncSession, ballot_id: str) -> Ballot | None:
    result = await session.execute(select(Ballot).where(Ballot.id == ballot_id))
    return result.scalar_one_or_none()


async def list_cached_ballots(session: AsyncSession) -> list[Ballot]:
    """List all cached ballots, most recently updated first."""
    result = await session.execute(select(Ballot).order_by(Ballot.last_updated.desc(), Ballot.id))
    return list(result.scalars().all())


async def upsert_ballot(session: AsyncSession, *, data: dict[str, Any]) -> Ballot:
    """Create or overwrite a cached ballot (administrator override).

    Unlike the read-path cache, this replaces an existing row.

    Args:
        session: Database session.
        data: Ballot fields; ``id`` defaults to the deterministic cache id.

    Returns:
        The stored Ballot.
    """
    ballot_id = data.get("id") or ballot_cache_id(data["zipcode"], data["event_id"])
    values = {k: v for k, v in data.items() if k in _UPSERT_FIELDS}
    races = values.get("races") or []
    measures = values.get("measures") or []
    values.setdefault("race_ids", [r.get("id") for r in races if r.get("id")])
    values.setdefault("measure_ids", [m.get("id") for m in measures if m.get("id")])
    values.setdefault("races_count", len(races))
    values.setdefault("measures_count", len(measures))

    insert = _insert(session)
    stmt = insert(Ballot).values(id=ballot_id, **values)
    stmt = stmt.on_conflict_do_update(index_elements=["id"], set_={**values, "last_updated": func.now()})
    await session.execute(stmt)
    await session.commit()

    ballot = await get_cached_ballot(session, ballot_id)
    if ballot is None:
        msg = f"Ballot {ballot_id} could not be stored"
        raise RuntimeError(msg)
    await session.refresh(ballot)
    logger.info(f"Upserted cached ballot {ballot_id}")
    return ballot
