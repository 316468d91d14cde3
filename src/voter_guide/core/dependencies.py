"""FastAPI dependency injection for database sessions, the serving host, and the text service."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.core.config import Settings, get_settings
from voter_guide.core.database import get_session_factory
from voter_guide.lib.text_service import AnthropicTextService, BaseTextService


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_request_host(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Return the host the request was served on, for building share URLs."""
    return request.headers.get("host") or settings.public_host


def get_text_service(settings: Annotated[Settings, Depends(get_settings)]) -> BaseTextService:
    """Build the text service, or fail with 503 when no API key is configured.

    Raises:
        HTTPException: 503 if ``anthropic_api_key`` is unset.
    """
    if not settings.anthropic_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Text service is not configured",
        )
    return AnthropicTextService(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        base_url=settings.anthropic_base_url,
        timeout=settings.anthropic_timeout,
    )
