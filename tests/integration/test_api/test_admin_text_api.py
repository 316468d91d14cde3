"""Integration tests for admin ballot overrides and the text helper endpoints."""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from voter_guide.core.dependencies import get_text_service
from voter_guide.lib.text_service import BaseTextService, BiasCheckResult, SimplifiedMeasure, TextServiceError

pytestmark = pytest.mark.integration

BALLOT_ID = "ballot-10001-ny-general-test"


class _FakeTextService(BaseTextService):
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail

    @property
    def provider_name(self) -> str:
        return "fake"

    async def simplify_ballot_measure(self, original_text: str, title: str) -> SimplifiedMeasure:
        if self.fail:
            raise TextServiceError(self.provider_name, "upstream exploded", status_code=500)
        return SimplifiedMeasure(
            one_sentence=f"{title} in one line.",
            simple="Simple.",
            detailed="Detailed.",
            key_points=["One", "Two"],
        )

    async def check_bias(self, content: str, content_type: str) -> BiasCheckResult:
        if self.fail:
            raise TextServiceError(self.provider_name, "upstream exploded")
        return BiasCheckResult(score=12.5, issues=[], suggestions=["Keep it up"], is_balanced=True)


class TestAdminBallots:
    async def test_read_path_caches_then_admin_overrides(self, client: AsyncClient) -> None:
        await client.get("/api/v1/ballot/10001")
        listed = (await client.get("/api/v1/admin/ballots")).json()
        assert [b["id"] for b in listed] == [BALLOT_ID]
        assert listed[0]["racesCount"] == 2

        response = await client.put(
            f"/api/v1/admin/ballots/{BALLOT_ID}",
            json={
                "eventId": "ny-general-test",
                "zipcode": "10001",
                "state": "NY",
                "county": "New York",
                "races": [{"id": "race-ny-cd-12", "office": "U.S. House", "candidates": []}],
                "measures": [],
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == BALLOT_ID
        assert body["raceIds"] == ["race-ny-cd-12"]
        assert body["racesCount"] == 1
        assert body["measuresCount"] == 0

    async def test_put_without_id_uses_deterministic_id(self, client: AsyncClient) -> None:
        response = await client.put(
            "/api/v1/admin/ballots",
            json={"eventId": "ny-general-test", "zipcode": "10002", "state": "NY"},
        )
        assert response.status_code == 200
        assert response.json()["id"] == "ballot-10002-ny-general-test"

    async def test_invalid_zipcode_is_400(self, client: AsyncClient) -> None:
        response = await client.put(
            "/api/v1/admin/ballots",
            json={"eventId": "ny-general-test", "zipcode": "1", "state": "NY"},
        )
        assert response.status_code == 400


class TestTextTools:
    async def test_not_configured_is_503(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/check-bias", json={"content": "Some text"})
        assert response.status_code == 503
        assert response.json() == {"error": "Text service is not configured"}

    async def test_simplify(self, app: FastAPI, client: AsyncClient) -> None:
        app.dependency_overrides[get_text_service] = lambda: _FakeTextService()
        response = await client.post(
            "/api/v1/simplify-ballot-measure",
            json={"originalText": "Be it enacted...", "title": "Prop 1"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["oneSentence"] == "Prop 1 in one line."
        assert body["keyPoints"] == ["One", "Two"]

    async def test_check_bias(self, app: FastAPI, client: AsyncClient) -> None:
        app.dependency_overrides[get_text_service] = lambda: _FakeTextService()
        response = await client.post("/api/v1/check-bias", json={"content": "Text", "contentType": "argument"})
        assert response.status_code == 200
        assert response.json() == {"score": 12.5, "issues": [], "suggestions": ["Keep it up"], "isBalanced": True}

    async def test_provider_failure_is_502(self, app: FastAPI, client: AsyncClient) -> None:
        app.dependency_overrides[get_text_service] = lambda: _FakeTextService(fail=True)
        response = await client.post("/api/v1/check-bias", json={"content": "Text"})
        assert response.status_code == 502

    async def test_invalid_body_is_400(self, app: FastAPI, client: AsyncClient) -> None:
        app.dependency_overrides[get_text_service] = lambda: _FakeTextService()
        response = await client.post("/api/v1/check-bias", json={"content": "Text", "contentType": "essay"})
        assert response.status_code == 400
