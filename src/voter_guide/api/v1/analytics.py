"""Analytics API endpoints: event intake and the summary dashboard."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.dependencies import get_async_session
from voter_guide.schemas.analytics import AnalyticsEventRequest, AnalyticsSummaryResponse
from voter_guide.schemas.common import SuccessResponse
from voter_guide.services.analytics_service import get_summary, record_event

analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


@analytics_router.post("/event", response_model=SuccessResponse)
async def track_event(
    request: AnalyticsEventRequest,
    session: AsyncSession = Depends(get_async_session),
) -> SuccessResponse:
    """Record a usage event reported by the client."""
    try:
        await record_event(session, **request.model_dump())
    except Exception as e:
        logger.error(f"Unexpected error recording analytics event {request.event_type}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record analytics event",
        ) from e
    return SuccessResponse()


@analytics_router.get("", response_model=AnalyticsSummaryResponse)
async def analytics_summary(
    session: AsyncSession = Depends(get_async_session),
) -> AnalyticsSummaryResponse:
    """Aggregate usage figures for the dashboard."""
    try:
        return await get_summary(session)
    except Exception as e:
        logger.error(f"Unexpected error computing analytics summary: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch analytics",
        ) from e
