"""Voter card API endpoints: finalize, edit, read, and compose shareable cards."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session, get_request_host
from voter_guide.schemas.voter_card import (
    ComposeCardRequest,
    ComposeCardResponse,
    VoterCardFinalizeRequest,
    VoterCardResponse,
    VoterCardUpdateRequest,
)
from voter_guide.services.election_event_service import ElectionEventNotFoundError
from voter_guide.services.voter_card_service import (
    CardAccessDeniedError,
    CardComposeError,
    CardIdConflictError,
    VoterCardNotFoundError,
    compose_card,
    finalize_card,
    get_card,
    list_visitor_cards,
    to_response,
    update_card,
)

voter_cards_router = APIRouter(tags=["voter-cards"])


# ---------------------------------------------------------------------------
# Fixed-prefix routes BEFORE parameterized routes
# ---------------------------------------------------------------------------


@voter_cards_router.post(
    "/finalized-cards/compose",
    response_model=ComposeCardResponse,
)
async def compose_voter_card(
    request: ComposeCardRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ComposeCardResponse:
    """Build card line items from a visitor's stored decisions."""
    try:
        return await compose_card(session, request)
    except CardComposeError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error composing card for {request.visitor_id}/{request.ballot_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compose voter card",
        ) from e


@voter_cards_router.post(
    "/finalized-cards",
    response_model=VoterCardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def finalize_voter_card(
    request: VoterCardFinalizeRequest,
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> VoterCardResponse:
    """Finalize a visitor's card for an election event.

    A visitor has at most one card per event; finalizing again replaces it.
    """
    try:
        card = await finalize_card(session, request, host)
    except ElectionEventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Election event not found") from e
    except CardAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except CardIdConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error finalizing card for {request.visitor_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save voter card",
        ) from e
    return to_response(card, host)


@voter_cards_router.get(
    "/visitor/finalized-cards/{visitor_id}",
    response_model=list[VoterCardResponse],
)
async def visitor_cards(
    visitor_id: str,
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> list[VoterCardResponse]:
    """List every card a visitor owns, newest first."""
    try:
        cards = await list_visitor_cards(session, visitor_id)
    except Exception as e:
        logger.error(f"Unexpected error listing cards for {visitor_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch voter cards",
        ) from e
    return [to_response(card, host) for card in cards]


# ---------------------------------------------------------------------------
# Parameterized routes
# ---------------------------------------------------------------------------


@voter_cards_router.put(
    "/finalized-cards/{card_id}",
    response_model=VoterCardResponse,
)
async def edit_voter_card(
    card_id: str,
    request: VoterCardUpdateRequest,
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> VoterCardResponse:
    """Edit a card.  Only the visitor who created it may do so."""
    data = request.model_dump(exclude_unset=True, exclude={"visitor_id"})
    try:
        card = await update_card(session, card_id, request.visitor_id, data=data)
    except VoterCardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except CardAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error updating card {card_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update voter card",
        ) from e
    return to_response(card, host)


@voter_cards_router.get(
    "/finalized-card/{card_id}",
    response_model=VoterCardResponse,
)
async def read_voter_card(
    card_id: str,
    visitor_id: str | None = Query(None, alias="visitorId", description="Requesting visitor, for private cards"),
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> VoterCardResponse:
    """Get a card.  Private cards are visible to their owner only."""
    try:
        card = await get_card(session, card_id, visitor_id)
    except VoterCardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except CardAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error fetching card {card_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch voter card",
        ) from e
    return to_response(card, host)
