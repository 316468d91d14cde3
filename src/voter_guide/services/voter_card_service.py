"""Voter card service -- finalize, read, and edit shareable voter cards.

Ownership is an exact match on the anonymous visitor id.  Private cards are
readable only by their owner; every card is editable only by its owner.
"""

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.lib.voter_card import build_share_url, compose_line_items, format_location, generate_card_id
from voter_guide.models.user import User
from voter_guide.models.voter_card import FinalizedVoterCard
from voter_guide.schemas.voter_card import (
    CardDecisionItem,
    ComposeCardRequest,
    ComposeCardResponse,
    VoterCardFinalizeRequest,
    VoterCardResponse,
)
from voter_guide.services.analytics_service import record_event
from voter_guide.services.ballot_service import get_cached_ballot
from voter_guide.services.decision_service import get_decisions
from voter_guide.services.election_event_service import ElectionEventNotFoundError, get_event
from voter_guide.services.user_service import get_user_by_username

# Fields that may be changed by the owner via the update endpoint.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "template",
        "location",
        "decisions",
        "show_notes",
        "is_public",
    }
)


class VoterCardNotFoundError(LookupError):
    """Raised when a card id is unknown."""

    def __init__(self, card_id: str) -> None:
        self.card_id = card_id
        super().__init__("Voter card not found")


class CardAccessDeniedError(PermissionError):
    """Raised when a visitor reads a private card or edits a card they do not own."""


class CardIdConflictError(ValueError):
    """Raised when a client-supplied card id is already taken by another of the visitor's cards."""

    def __init__(self, card_id: str) -> None:
        self.card_id = card_id
        super().__init__(f"Voter card id {card_id} is already in use")


class CardComposeError(LookupError):
    """Raised when a card cannot be composed from stored decisions."""


def to_response(card: FinalizedVoterCard, host: str) -> VoterCardResponse:
    """Render a card with the share URL for the serving host."""
    response = VoterCardResponse.model_validate(card)
    response.share_url = build_share_url(host, card.id)
    return response


def _dump_items(items: list[CardDecisionItem]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", exclude_none=True) for item in items]


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------


async def get_card_by_id(session: AsyncSession, card_id: str) -> FinalizedVoterCard | None:
    result = await session.execute(select(FinalizedVoterCard).where(FinalizedVoterCard.id == card_id))
    return result.scalar_one_or_none()


async def get_card(session: AsyncSession, card_id: str, visitor_id: str | None = None) -> FinalizedVoterCard:
    """Retrieve a card, enforcing the visibility rule.

    Raises:
        VoterCardNotFoundError: If the card does not exist.
        CardAccessDeniedError: If the card is private and ``visitor_id`` is not the owner.
    """
    card = await get_card_by_id(session, card_id)
    if card is None:
        raise VoterCardNotFoundError(card_id)
    if not card.is_public and card.visitor_id != visitor_id:
        raise CardAccessDeniedError("This voter card is private")
    return card


async def get_visitor_event_card(session: AsyncSession, visitor_id: str, event_id: str) -> FinalizedVoterCard | None:
    result = await session.execute(
        select(FinalizedVoterCard).where(
            FinalizedVoterCard.visitor_id == visitor_id,
            FinalizedVoterCard.event_id == event_id,
        )
    )
    return result.scalars().first()


async def list_visitor_cards(session: AsyncSession, visitor_id: str) -> list[FinalizedVoterCard]:
    """List every card a visitor owns, newest first."""
    result = await session.execute(
        select(FinalizedVoterCard)
        .where(FinalizedVoterCard.visitor_id == visitor_id)
        .order_by(FinalizedVoterCard.created_at.desc(), FinalizedVoterCard.id)
    )
    return list(result.scalars().all())


async def list_user_public_cards(session: AsyncSession, user: User) -> list[FinalizedVoterCard]:
    """List a registered user's public cards, newest first."""
    result = await session.execute(
        select(FinalizedVoterCard)
        .where(FinalizedVoterCard.user_id == user.id, FinalizedVoterCard.is_public.is_(True))
        .order_by(FinalizedVoterCard.created_at.desc(), FinalizedVoterCard.id)
    )
    return list(result.scalars().all())


async def get_user_public_card(session: AsyncSession, user: User, card_id: str) -> FinalizedVoterCard | None:
    """Get one of a user's public cards, or None if it is not theirs or not public."""
    result = await session.execute(
        select(FinalizedVoterCard).where(
            FinalizedVoterCard.id == card_id,
            FinalizedVoterCard.user_id == user.id,
            FinalizedVoterCard.is_public.is_(True),
        )
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------


async def finalize_card(session: AsyncSession, request: VoterCardFinalizeRequest, host: str) -> FinalizedVoterCard:
    """Create a visitor's card for an event, or replace their existing one.

    Args:
        session: Database session.
        request: Validated card payload.
        host: Serving host used for the share URL.

    Returns:
        The stored card.

    Raises:
        ElectionEventNotFoundError: If the event does not exist.
        CardAccessDeniedError: If a supplied card id belongs to another visitor.
        CardIdConflictError: If a supplied card id is already one of the visitor's cards.
    """
    if await get_event(session, request.event_id) is None:
        raise ElectionEventNotFoundError(request.event_id)

    fields = {
        "ballot_id": request.ballot_id,
        "template": request.template,
        "location": request.location,
        "state": request.state,
        "election_date": request.election_date,
        "election_type": request.election_type,
        "decisions": _dump_items(request.decisions),
        "show_notes": request.show_notes,
        "is_public": request.is_public,
    }

    card = await get_visitor_event_card(session, request.visitor_id, request.event_id)
    if card is not None:
        for field_name, value in fields.items():
            setattr(card, field_name, value)
        card.share_url = build_share_url(host, card.id)
        await session.commit()
        await session.refresh(card)
        logger.info(f"Updated voter card {card.id} for visitor {request.visitor_id}")
        return card

    card_id = request.id or generate_card_id()
    if request.id is not None:
        taken = await get_card_by_id(session, request.id)
        if taken is not None:
            if taken.visitor_id != request.visitor_id:
                raise CardAccessDeniedError("Voter card belongs to another visitor")
            raise CardIdConflictError(request.id)

    card = FinalizedVoterCard(
        id=card_id,
        visitor_id=request.visitor_id,
        event_id=request.event_id,
        share_url=build_share_url(host, card_id),
        **fields,
    )
    session.add(card)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise CardIdConflictError(card_id) from e
    await session.refresh(card)
    logger.info(f"Finalized voter card {card.id} for visitor {request.visitor_id}")

    try:
        await record_event(
            session,
            event_type="voter_card_created",
            event_data={"cardId": card.id, "template": card.template, "eventId": card.event_id},
            visitor_id=request.visitor_id,
            state=request.state,
        )
    except Exception as e:
        logger.warning(f"Failed to record voter_card_created for {card_id}: {e}")
        await session.rollback()
        await session.refresh(card)
    return card


async def update_card(
    session: AsyncSession,
    card_id: str,
    visitor_id: str,
    *,
    data: dict[str, Any],
) -> FinalizedVoterCard:
    """Update a card owned by ``visitor_id``.

    Only allowlisted fields are applied.  A ``username`` key attaches the card
    to that registered user.

    Raises:
        VoterCardNotFoundError: If the card does not exist.
        CardAccessDeniedError: If ``visitor_id`` is not the owner.
        ValueError: If ``username`` does not match a registered user.
    """
    card = await get_card_by_id(session, card_id)
    if card is None:
        raise VoterCardNotFoundError(card_id)
    if card.visitor_id != visitor_id:
        raise CardAccessDeniedError("You can only edit your own cards")

    username = data.get("username")
    if username:
        user = await get_user_by_username(session, username)
        if user is None:
            msg = f"User {username} not found"
            raise ValueError(msg)
        card.user_id = user.id

    for field_name, value in data.items():
        if field_name not in _UPDATABLE_FIELDS or value is None:
            continue
        if field_name == "decisions":
            value = [CardDecisionItem.model_validate(item).model_dump(mode="json", exclude_none=True) for item in value]
        setattr(card, field_name, value)

    await session.commit()
    await session.refresh(card)
    logger.info(f"Updated voter card {card.id}")
    return card


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


async def compose_card(session: AsyncSession, request: ComposeCardRequest) -> ComposeCardResponse:
    """Build a card draft from a visitor's stored decisions and the cached ballot.

    Raises:
        CardComposeError: If the ballot or the visitor's decisions are missing.
    """
    ballot = await get_cached_ballot(session, request.ballot_id)
    if ballot is None:
        msg = f"Ballot {request.ballot_id} not found"
        raise CardComposeError(msg)
    decisions = await get_decisions(session, request.visitor_id, request.ballot_id)
    if decisions is None:
        msg = "No decisions recorded for this ballot"
        raise CardComposeError(msg)

    items = compose_line_items(
        ballot.races,
        ballot.measures,
        measure_decisions=decisions.measure_decisions,
        candidate_selections=decisions.candidate_selections,
        notes=decisions.notes,
        hidden_titles=request.hidden_titles,
        show_notes=request.show_notes,
    )
    return ComposeCardResponse(
        visitor_id=request.visitor_id,
        event_id=ballot.event_id,
        ballot_id=ballot.id,
        template=request.template,
        location=format_location(ballot.county, ballot.state),
        state=ballot.state,
        election_date=ballot.election_date.isoformat() if ballot.election_date else "",
        election_type=ballot.election_type or "",
        decisions=[CardDecisionItem.model_validate(item.to_dict()) for item in items],
        show_notes=request.show_notes,
    )
