"""Decision API endpoints: save and load a visitor's ballot decisions."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session
from voter_guide.schemas.decision import DecisionResponse, DecisionSaveRequest
from voter_guide.services.decision_service import get_decisions, save_decisions

decisions_router = APIRouter(prefix="/decisions", tags=["decisions"])


@decisions_router.post("", response_model=DecisionResponse)
async def save_visitor_decisions(
    request: DecisionSaveRequest,
    session: AsyncSession = Depends(get_async_session),
) -> DecisionResponse:
    """Replace a visitor's decisions for a ballot (last write wins)."""
    try:
        decision = await save_decisions(session, request)
    except Exception as e:
        logger.error(f"Unexpected error saving decisions for {request.visitor_id}/{request.ballot_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save decisions",
        ) from e
    return DecisionResponse.model_validate(decision)


@decisions_router.get("/{visitor_id}/{ballot_id}", response_model=DecisionResponse)
async def load_visitor_decisions(
    visitor_id: str,
    ballot_id: str,
    session: AsyncSession = Depends(get_async_session),
) -> DecisionResponse:
    """Get a visitor's stored decisions for a ballot."""
    try:
        decision = await get_decisions(session, visitor_id, ballot_id)
    except Exception as e:
        logger.error(f"Unexpected error loading decisions for {visitor_id}/{ballot_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load decisions",
        ) from e
    if decision is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Decisions not found")
    return DecisionResponse.model_validate(decision)
