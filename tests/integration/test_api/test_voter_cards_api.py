"""Integration tests for finalizing, reading, editing, and composing voter cards."""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.election_event import ElectionEvent
from voter_guide.models.user import User
from voter_guide.models.voter_card import FinalizedVoterCard

pytestmark = pytest.mark.integration

EVENT_ID = "ny-general-test"


def _card(**overrides) -> dict:
    payload = {
        "visitorId": "v_owner",
        "eventId": EVENT_ID,
        "ballotId": f"ballot-10001-{EVENT_ID}",
        "template": "minimal",
        "location": "New York County, NY",
        "state": "NY",
        "electionDate": "2026-11-03",
        "electionType": "general",
        "decisions": [{"type": "measure", "title": "Prop 1", "decision": "Yes"}],
    }
    payload.update(overrides)
    return payload


async def _finalize(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/finalized-cards", json=_card(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestFinalizeCard:
    async def test_share_url_uses_serving_host(self, client: AsyncClient) -> None:
        card = await _finalize(client)
        assert card["id"].startswith("card_")
        assert card["shareUrl"] == f"https://voterguide.test/card/{card['id']}"
        assert len(card["decisions"]) == 1
        item = card["decisions"][0]
        assert (item["type"], item["title"], item["decision"]) == ("measure", "Prop 1", "Yes")

    async def test_refinalizing_replaces_visitor_card_for_event(self, client: AsyncClient) -> None:
        first = await _finalize(client)
        second = await _finalize(client, template="bold")
        assert second["id"] == first["id"]
        assert second["template"] == "bold"

        cards = (await client.get("/api/v1/visitor/finalized-cards/v_owner")).json()
        assert len(cards) == 1

    async def test_unknown_template_is_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/finalized-cards", json=_card(template="fancy"))
        assert response.status_code == 400

    async def test_unknown_event_is_404(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/finalized-cards", json=_card(eventId="missing"))
        assert response.status_code == 404
        assert response.json() == {"error": "Election event not found"}

    async def test_malformed_line_item_is_400(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/finalized-cards",
            json=_card(decisions=[{"type": "pizza", "title": "Prop 1", "decision": "Yes"}]),
        )
        assert response.status_code == 400

    async def test_card_id_owned_by_another_visitor_is_403(
        self, client: AsyncClient, seeded_session: AsyncSession
    ) -> None:
        await _finalize(client, id="card_shared", isPublic=False)

        response = await client.post(
            "/api/v1/finalized-cards",
            json=_card(id="card_shared", visitorId="v_intruder", template="bold"),
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Voter card belongs to another visitor"}

        stored = await seeded_session.get(FinalizedVoterCard, "card_shared")
        await seeded_session.refresh(stored)
        assert stored.visitor_id == "v_owner"
        assert stored.template == "minimal"

    async def test_card_id_reused_for_another_event_is_409(
        self, client: AsyncClient, seeded_session: AsyncSession
    ) -> None:
        seeded_session.add(
            ElectionEvent(
                id="ny-primary-test",
                state="NY",
                title="NY Primary",
                event_type="primary",
                election_date=date(2026, 6, 23),
            )
        )
        await seeded_session.commit()
        await _finalize(client, id="card_mine")

        response = await client.post(
            "/api/v1/finalized-cards",
            json=_card(id="card_mine", eventId="ny-primary-test"),
        )
        assert response.status_code == 409
        assert response.json() == {"error": "Voter card id card_mine is already in use"}

    async def test_analytics_failure_does_not_fail_finalize(
        self, client: AsyncClient, seeded_session: AsyncSession
    ) -> None:
        with patch(
            "voter_guide.services.voter_card_service.record_event",
            new=AsyncMock(side_effect=RuntimeError("analytics down")),
        ):
            response = await client.post("/api/v1/finalized-cards", json=_card())

        assert response.status_code == 201, response.text
        card = response.json()
        assert card["visitorId"] == "v_owner"

        stored = await seeded_session.get(FinalizedVoterCard, card["id"])
        assert stored is not None


class TestReadCard:
    async def test_private_card_is_forbidden_to_others(self, client: AsyncClient) -> None:
        card = await _finalize(client, isPublic=False)

        response = await client.get(f"/api/v1/finalized-card/{card['id']}", params={"visitorId": "v_other"})
        assert response.status_code == 403
        assert response.json() == {"error": "This voter card is private"}

        anonymous = await client.get(f"/api/v1/finalized-card/{card['id']}")
        assert anonymous.status_code == 403

    async def test_private_card_is_visible_to_owner(self, client: AsyncClient) -> None:
        card = await _finalize(client, isPublic=False)
        response = await client.get(f"/api/v1/finalized-card/{card['id']}", params={"visitorId": "v_owner"})
        assert response.status_code == 200

    async def test_card_is_visible_once_public(self, client: AsyncClient) -> None:
        card = await _finalize(client, isPublic=False)
        await client.put(f"/api/v1/finalized-cards/{card['id']}", json={"visitorId": "v_owner", "isPublic": True})

        response = await client.get(f"/api/v1/finalized-card/{card['id']}", params={"visitorId": "v_other"})
        assert response.status_code == 200

    async def test_unknown_card_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/finalized-card/card_missing")
        assert response.status_code == 404


class TestUpdateCard:
    async def test_non_owner_is_forbidden_and_card_unchanged(
        self, client: AsyncClient, seeded_session: AsyncSession
    ) -> None:
        card = await _finalize(client)

        response = await client.put(
            f"/api/v1/finalized-cards/{card['id']}",
            json={"visitorId": "v_intruder", "template": "bold"},
        )
        assert response.status_code == 403
        assert response.json() == {"error": "You can only edit your own cards"}

        stored = await seeded_session.get(FinalizedVoterCard, card["id"])
        await seeded_session.refresh(stored)
        assert stored.template == "minimal"

    async def test_owner_can_edit(self, client: AsyncClient) -> None:
        card = await _finalize(client)
        response = await client.put(
            f"/api/v1/finalized-cards/{card['id']}",
            json={
                "visitorId": "v_owner",
                "template": "professional",
                "showNotes": False,
                "decisions": [{"type": "candidate", "title": "U.S. House: Maria Rivera", "decision": "Selected"}],
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["template"] == "professional"
        assert body["showNotes"] is False
        assert body["decisions"][0]["type"] == "candidate"

    async def test_attach_to_unknown_user_is_400(self, client: AsyncClient) -> None:
        card = await _finalize(client)
        response = await client.put(
            f"/api/v1/finalized-cards/{card['id']}",
            json={"visitorId": "v_owner", "username": "ghost"},
        )
        assert response.status_code == 400


class TestComposeCard:
    async def test_compose_from_stored_decisions(self, client: AsyncClient) -> None:
        await client.get("/api/v1/ballot/10001")
        await client.post(
            "/api/v1/decisions",
            json={
                "visitorId": "v_owner",
                "ballotId": f"ballot-10001-{EVENT_ID}",
                "measureDecisions": {"measure-ny-1": {"decision": "yes"}},
                "candidateSelections": {"race-ny-cd-12": "cand-rivera", "race-gone": "cand-x"},
                "notes": {"race-ny-cd-12": "Strong on transit"},
            },
        )

        response = await client.post(
            "/api/v1/finalized-cards/compose",
            json={"visitorId": "v_owner", "ballotId": f"ballot-10001-{EVENT_ID}"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["location"] == "New York County, NY"
        assert body["eventId"] == EVENT_ID
        titles = [item["title"] for item in body["decisions"]]
        assert titles == ["U.S. House: Maria Rivera", "Prop 1"]
        assert body["decisions"][0]["decision"] == "Selected"
        assert body["decisions"][0]["note"] == "Strong on transit"
        assert body["decisions"][1]["decision"] == "Yes"

    async def test_compose_without_cached_ballot_is_404(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/finalized-cards/compose",
            json={"visitorId": "v_owner", "ballotId": "ballot-00000-none"},
        )
        assert response.status_code == 404


class TestUserCards:
    async def test_public_cards_listed_under_username(
        self, client: AsyncClient, seeded_session: AsyncSession
    ) -> None:
        seeded_session.add(User(username="janedoe", first_name="Jane"))
        await seeded_session.commit()

        public = await _finalize(client)
        await client.put(f"/api/v1/finalized-cards/{public['id']}", json={"visitorId": "v_owner", "username": "janedoe"})

        response = await client.get("/api/v1/users/janedoe/cards")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [public["id"]]

        single = await client.get(f"/api/v1/users/janedoe/cards/{public['id']}")
        assert single.status_code == 200

        await client.put(f"/api/v1/finalized-cards/{public['id']}", json={"visitorId": "v_owner", "isPublic": False})
        assert (await client.get("/api/v1/users/janedoe/cards")).json() == []
