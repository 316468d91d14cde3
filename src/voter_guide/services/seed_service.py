"""Seed service -- idempotent load of reference ballot data from a JSON document.

The document uses the API's camelCase keys::

    {
      "districts": [{"id", "state", "districtType", "number", "name"}],
      "zipcodes": [{"zipcode", "state", "county", "city", "districts": [districtId, ...]}],
      "candidates": [{"id", "firstName", ..., "endorsements": [{"organization", ...}]}],
      "races": [{"id", ..., "districtId", "candidates": [{"candidateId", "primaryVotes", ...}]}],
      "ballotMeasures": [{"id", "state", "electionYear", "measureNumber", ...}],
      "events": [{"id", "state", "title", "eventType", "electionDate", ...}]
    }

Rows keyed by natural ids are merged; link rows and endorsements are only
added when missing, so re-running a seed never duplicates data.
"""

from datetime import date
from typing import Any

from loguru import logger
from pydantic.alias_generators import to_snake
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.ballot_measure import BallotMeasure
from voter_guide.models.election_event import ElectionEvent
from voter_guide.models.location import District, Zipcode, ZipcodeDistrict
from voter_guide.models.race import Candidate, CandidateEndorsement, Race, RaceCandidate

_DATE_FIELDS = frozenset({"election_date", "registration_deadline"})


def _snake(record: dict[str, Any], *, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
    converted: dict[str, Any] = {}
    for key, value in record.items():
        name = to_snake(key)
        if name in exclude:
            continue
        if name in _DATE_FIELDS and isinstance(value, str):
            value = date.fromisoformat(value)
        converted[name] = value
    return converted


async def _ensure_link(session: AsyncSession, zipcode: str, district_id: str) -> bool:
    result = await session.execute(
        select(ZipcodeDistrict.id).where(
            ZipcodeDistrict.zipcode == zipcode,
            ZipcodeDistrict.district_id == district_id,
        )
    )
    if result.scalar_one_or_none() is not None:
        return False
    session.add(ZipcodeDistrict(zipcode=zipcode, district_id=district_id))
    return True


async def _ensure_race_candidate(session: AsyncSession, race_id: str, entry: dict[str, Any]) -> bool:
    fields = _snake(entry)
    candidate_id = fields.pop("candidate_id")
    result = await session.execute(
        select(RaceCandidate).where(
            RaceCandidate.race_id == race_id,
            RaceCandidate.candidate_id == candidate_id,
        )
    )
    link = result.scalar_one_or_none()
    if link is not None:
        for name, value in fields.items():
            setattr(link, name, value)
        return False
    session.add(RaceCandidate(race_id=race_id, candidate_id=candidate_id, **fields))
    return True


async def _ensure_endorsement(session: AsyncSession, candidate_id: str, entry: dict[str, Any]) -> bool:
    fields = _snake(entry)
    result = await session.execute(
        select(CandidateEndorsement.id).where(
            CandidateEndorsement.candidate_id == candidate_id,
            CandidateEndorsement.organization == fields["organization"],
        )
    )
    if result.scalar_one_or_none() is not None:
        return False
    session.add(CandidateEndorsement(candidate_id=candidate_id, **fields))
    return True


async def load_seed_data(session: AsyncSession, data: dict[str, Any]) -> dict[str, int]:
    """Merge a seed document into the database.

    Args:
        session: Database session.
        data: Parsed seed document.

    Returns:
        Count of records processed per section.
    """
    counts = {
        "districts": 0,
        "zipcodes": 0,
        "zipcode_districts": 0,
        "candidates": 0,
        "endorsements": 0,
        "races": 0,
        "race_candidates": 0,
        "ballot_measures": 0,
        "events": 0,
    }

    for record in data.get("districts", []):
        await session.merge(District(**_snake(record)))
        counts["districts"] += 1
    await session.flush()

    for record in data.get("zipcodes", []):
        fields = _snake(record, exclude=frozenset({"districts"}))
        await session.merge(Zipcode(**fields))
        counts["zipcodes"] += 1
    await session.flush()
    for record in data.get("zipcodes", []):
        for district_id in record.get("districts", []):
            if await _ensure_link(session, record["zipcode"], district_id):
                counts["zipcode_districts"] += 1

    for record in data.get("candidates", []):
        await session.merge(Candidate(**_snake(record, exclude=frozenset({"endorsements"}))))
        counts["candidates"] += 1
    await session.flush()
    for record in data.get("candidates", []):
        for endorsement in record.get("endorsements", []):
            if await _ensure_endorsement(session, record["id"], endorsement):
                counts["endorsements"] += 1

    for record in data.get("races", []):
        await session.merge(Race(**_snake(record, exclude=frozenset({"candidates"}))))
        counts["races"] += 1
    await session.flush()
    for record in data.get("races", []):
        for entry in record.get("candidates", []):
            if await _ensure_race_candidate(session, record["id"], entry):
                counts["race_candidates"] += 1

    for record in data.get("ballotMeasures", []):
        await session.merge(BallotMeasure(**_snake(record)))
        counts["ballot_measures"] += 1

    for record in data.get("events", []):
        await session.merge(ElectionEvent(**_snake(record)))
        counts["events"] += 1

    await session.commit()
    logger.info(f"Seed data loaded: {counts}")
    return counts
