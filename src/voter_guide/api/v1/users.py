"""User API endpoints: public profiles, public cards, and username checks."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session, get_request_host
from voter_guide.models.user import User
from voter_guide.schemas.user import UsernameCheckResponse, UserProfileResponse
from voter_guide.schemas.voter_card import VoterCardResponse
from voter_guide.services.user_service import check_username, get_user_by_username
from voter_guide.services.voter_card_service import get_user_public_card, list_user_public_cards, to_response

users_router = APIRouter(tags=["users"])


async def _require_user(session: AsyncSession, username: str) -> User:
    try:
        user = await get_user_by_username(session, username)
    except Exception as e:
        logger.error(f"Unexpected error fetching user {username}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user",
        ) from e
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@users_router.get("/username/check/{username}", response_model=UsernameCheckResponse)
async def username_check(
    username: str,
    session: AsyncSession = Depends(get_async_session),
) -> UsernameCheckResponse:
    """Report whether a username is well-formed, unreserved, and free."""
    try:
        available, error = await check_username(session, username)
    except Exception as e:
        logger.error(f"Unexpected error checking username {username}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check username",
        ) from e
    return UsernameCheckResponse(available=available, error=error)


@users_router.get("/users/{username}", response_model=UserProfileResponse)
async def user_profile(
    username: str,
    session: AsyncSession = Depends(get_async_session),
) -> UserProfileResponse:
    """Get a user's public profile."""
    user = await _require_user(session, username)
    return UserProfileResponse.model_validate(user)


@users_router.get("/users/{username}/cards", response_model=list[VoterCardResponse])
async def user_public_cards(
    username: str,
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> list[VoterCardResponse]:
    """List a user's public cards, newest first."""
    user = await _require_user(session, username)
    cards = await list_user_public_cards(session, user)
    return [to_response(card, host) for card in cards]


@users_router.get("/users/{username}/cards/{card_id}", response_model=VoterCardResponse)
async def user_public_card(
    username: str,
    card_id: str,
    session: AsyncSession = Depends(get_async_session),
    host: str = Depends(get_request_host),
) -> VoterCardResponse:
    """Get one of a user's public cards."""
    user = await _require_user(session, username)
    card = await get_user_public_card(session, user, card_id)
    if card is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voter card not found")
    return to_response(card, host)
