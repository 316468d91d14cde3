"""LLM-backed text helper endpoints: measure simplification and bias checks."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from voter_guide.core.dependencies import get_text_service
from voter_guide.lib.text_service import BaseTextService, TextServiceError
from voter_guide.schemas.text import (
    BiasCheckRequest,
    BiasCheckResponse,
    SimplifyMeasureRequest,
    SimplifyMeasureResponse,
)

text_tools_router = APIRouter(tags=["text-tools"])


@text_tools_router.post("/simplify-ballot-measure", response_model=SimplifyMeasureResponse)
async def simplify_ballot_measure(
    request: SimplifyMeasureRequest,
    service: BaseTextService = Depends(get_text_service),
) -> SimplifyMeasureResponse:
    """Explain a ballot measure in plain language at three lengths."""
    try:
        result = await service.simplify_ballot_measure(request.original_text, request.title)
    except TextServiceError as e:
        logger.error(f"Text service failed to simplify '{request.title}': {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to simplify ballot measure",
        ) from e
    return SimplifyMeasureResponse.model_validate(result)


@text_tools_router.post("/check-bias", response_model=BiasCheckResponse)
async def check_bias(
    request: BiasCheckRequest,
    service: BaseTextService = Depends(get_text_service),
) -> BiasCheckResponse:
    """Score a summary or argument for political bias."""
    try:
        result = await service.check_bias(request.content, request.content_type)
    except TextServiceError as e:
        logger.error(f"Text service failed to check bias: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to check bias",
        ) from e
    return BiasCheckResponse.model_validate(result)
