"""Integration tests for ZIP lookup, ballot assembly, races, and candidates endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.ballot import Ballot
from voter_guide.models.race import Race
from voter_guide.services import ballot_service

pytestmark = pytest.mark.integration

NY_EVENT_ID = "ny-general-test"


class TestLookupZip:
    async def test_resolves_pilot_zip(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/lookup-zip/10001")
        assert response.status_code == 200
        assert response.json() == {"state": "NY", "county": "New York", "city": "New York", "supported": True}

    async def test_malformed_zip_is_400(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/lookup-zip/1234")
        assert response.status_code == 400
        assert "5 digits" in response.json()["error"]

    async def test_unknown_zip_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/lookup-zip/99999")
        assert response.status_code == 404
        assert response.json() == {"error": "ZIP code not found", "supported": False}

    async def test_out_of_pilot_zip_is_unsupported(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/lookup-zip/94103")
        assert response.status_code == 400
        body = response.json()
        assert body["supported"] is False
        assert body["state"] == "CA"
        assert body["error"] == "CA is not in our pilot program"


class TestSupportedStates:
    async def test_lists_pilot_states(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/states")
        assert response.status_code == 200
        assert response.json() == {"supported": ["NY", "NJ", "PA", "CT", "TX"], "pilot": True}


class TestGetBallot:
    async def test_ballot_for_10001(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ballot/10001")
        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "NY"
        assert body["county"] == "New York"
        assert body["races"]
        for race in body["races"]:
            assert race["office"]
            assert isinstance(race["candidates"], list)
        assert [m["measureNumber"] for m in body["ballotMeasures"]] == ["Prop 1"]
        assert body["ballotId"] == f"ballot-10001-{NY_EVENT_ID}"
        assert body["eventId"] == NY_EVENT_ID

    async def test_candidates_and_endorsements_keep_storage_order(self, client: AsyncClient) -> None:
        body = (await client.get("/api/v1/ballot/10001")).json()
        house = next(r for r in body["races"] if r["id"] == "race-ny-cd-12")
        assert [c["id"] for c in house["candidates"]] == ["cand-rivera", "cand-chen"]
        assert [e["organization"] for e in house["candidates"][0]["endorsements"]] == [
            "Transit Riders",
            "Teachers Union",
        ]
        assert house["candidates"][1]["endorsements"] == []

    async def test_race_without_candidates_has_empty_list(self, client: AsyncClient) -> None:
        body = (await client.get("/api/v1/ballot/10001")).json()
        senate = next(r for r in body["races"] if r["id"] == "race-ny-sd-47")
        assert senate["candidates"] == []

    async def test_zip_without_districts_has_no_races(self, client: AsyncClient) -> None:
        body = (await client.get("/api/v1/ballot/10002")).json()
        assert body["races"] == []
        assert len(body["ballotMeasures"]) == 1

    async def test_aggregation_is_repeatable(self, client: AsyncClient) -> None:
        first = (await client.get("/api/v1/ballot/10001")).json()
        second = (await client.get("/api/v1/ballot/10001")).json()
        assert len(first["races"]) == len(second["races"])
        assert sum(len(r["candidates"]) for r in first["races"]) == sum(len(r["candidates"]) for r in second["races"])
        assert len(first["ballotMeasures"]) == len(second["ballotMeasures"])

    async def test_unknown_zip_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ballot/99999")
        assert response.status_code == 404

    async def test_out_of_pilot_zip_is_400_not_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ballot/94103")
        assert response.status_code == 400
        assert response.json()["supported"] is False

    async def test_malformed_zip_is_400(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ballot/abcde")
        assert response.status_code == 400

    async def test_unknown_event_id_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/ballot/10001", params={"eventId": "nope"})
        assert response.status_code == 404

    async def test_ballot_is_cached_once(self, client: AsyncClient, seeded_session: AsyncSession) -> None:
        await client.get("/api/v1/ballot/10001")

        race = (await seeded_session.execute(select(Race).where(Race.id == "race-ny-sd-47"))).scalar_one()
        race.office = "Renamed Office"
        await seeded_session.commit()

        live = (await client.get("/api/v1/ballot/10001")).json()
        assert any(r["office"] == "Renamed Office" for r in live["races"])

        cached = (
            await seeded_session.execute(select(Ballot).where(Ballot.id == f"ballot-10001-{NY_EVENT_ID}"))
        ).scalar_one()
        await seeded_session.refresh(cached)
        assert all(r["office"] != "Renamed Office" for r in cached.races)
        assert cached.races_count == 2
        assert cached.measures_count == 1

    async def test_cache_write_failure_still_returns_ballot(
        self,
        client: AsyncClient,
        seeded_session: AsyncSession,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _failing_insert(session):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(ballot_service, "_insert", _failing_insert)

        response = await client.get("/api/v1/ballot/10001")
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["ballotId"] == f"ballot-10001-{NY_EVENT_ID}"
        assert body["eventId"] == NY_EVENT_ID
        assert len(body["races"]) == 2

        cached = await seeded_session.execute(select(Ballot).where(Ballot.id == body["ballotId"]))
        assert cached.scalar_one_or_none() is None


class TestRacesByState:
    async def test_lists_state_races(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/races/by-state/NY")
        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "NY"
        assert [r["id"] for r in body["races"]] == ["race-ny-cd-12", "race-ny-sd-47"]

    async def test_supported_state_without_races(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/races/by-state/TX")
        assert response.status_code == 200
        assert response.json()["races"] == []

    async def test_unsupported_state(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/races/by-state/CA")
        assert response.status_code == 400
        assert response.json()["supported"] is False

    async def test_malformed_state(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/races/by-state/ny")
        assert response.status_code == 400


class TestRaceCandidates:
    async def test_includes_primary_results(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/candidates/race/race-ny-cd-12")
        assert response.status_code == 200
        body = response.json()
        assert body["race"]["id"] == "race-ny-cd-12"
        first = body["candidates"][0]
        assert first["id"] == "cand-rivera"
        assert first["primaryVotes"] == 1200
        assert first["primaryPercentage"] == 60.0
        assert first["isWonPrimary"] is True

    async def test_unknown_race_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/candidates/race/race-missing")
        assert response.status_code == 404
        assert response.json() == {"error": "Race not found"}
