"""Async HTTP client for the voter guide API with local-first decision sync."""

from typing import Any

import httpx
from loguru import logger

from voter_guide.lib.client.store import LocalDecisionStore


class VoterGuideClientError(Exception):
    """Raised when an API call fails.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code, when a response was received.
        body: Decoded error body, when available.
    """

    def __init__(self, message: str, status_code: int | None = None, body: dict[str, Any] | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.body = body or {}
        super().__init__(message)


class VoterGuideClient:
    """Talks to the voter guide API on behalf of one visitor.

    Decisions are written to the local store first; pushing them to the
    server is best-effort and never rolls back the local write.

    Args:
        base_url: API root including the version prefix (e.g. ``https://host/api/v1``).
        store: Local decision store; an in-memory store is used when omitted.
        client: Pre-built httpx client (tests).
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        store: LocalDecisionStore | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.store = store or LocalDecisionStore()
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "VoterGuideClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error(f"Voter guide request failed: {exc}")
            raise VoterGuideClientError(f"Request failed: {exc}") from exc
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") if isinstance(body, dict) else None
            raise VoterGuideClientError(
                message or f"HTTP {response.status_code}",
                status_code=response.status_code,
                body=body if isinstance(body, dict) else None,
            )
        return response.json()

    # ------------------------------------------------------------------
    # Ballot lookup
    # ------------------------------------------------------------------

    async def lookup_zip(self, zipcode: str) -> dict[str, Any]:
        return await self._request("GET", f"/lookup-zip/{zipcode}")

    async def get_ballot(self, zipcode: str, event_id: str | None = None) -> dict[str, Any]:
        event_id = event_id or self.store.active_event_id
        params = {"eventId": event_id} if event_id else None
        return await self._request("GET", f"/ballot/{zipcode}", params=params)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def sync_decisions(self, ballot_id: str) -> bool:
        """Push local decisions for a ballot to the server.

        Failures are logged and reported through the return value only.

        Returns:
            True if the server accepted the decisions.
        """
        payload = {
            "visitorId": self.store.visitor_id,
            "ballotId": ballot_id,
            "eventId": self.store.active_event_id,
            "measureDecisions": self.store.measure_decisions.to_dict(),
            "candidateSelections": self.store.candidate_selections.to_dict(),
            "notes": self.store.notes.to_dict(),
        }
        try:
            await self._request("POST", "/decisions", json=payload)
        except VoterGuideClientError as e:
            logger.error(f"Failed to sync decisions to server: {e}")
            return False
        return True

    async def load_decisions(self, ballot_id: str) -> bool:
        """Pull server decisions for a ballot into the local store.

        Returns:
            True if decisions were found and applied locally.
        """
        try:
            data = await self._request("GET", f"/decisions/{self.store.visitor_id}/{ballot_id}")
        except VoterGuideClientError as e:
            if e.status_code != 404:
                logger.error(f"Failed to load decisions from server: {e}")
            return False
        self.store.replace_all(
            measure_decisions=data.get("measureDecisions"),
            candidate_selections=data.get("candidateSelections"),
            notes=data.get("notes"),
        )
        return True

    # ------------------------------------------------------------------
    # Voter cards
    # ------------------------------------------------------------------

    async def finalize_card(self, card: dict[str, Any]) -> dict[str, Any]:
        payload = {"visitorId": self.store.visitor_id, **card}
        return await self._request("POST", "/finalized-cards", json=payload)

    async def get_card(self, card_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/finalized-card/{card_id}", params={"visitorId": self.store.visitor_id})
