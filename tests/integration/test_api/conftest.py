"""Fixtures for API integration tests against a seeded in-memory database."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.api.router import create_router
from voter_guide.core.config import Settings, get_settings
from voter_guide.core.dependencies import get_async_session
from voter_guide.main import register_exception_handlers


@pytest.fixture
def app(seeded_session: AsyncSession, settings: Settings) -> FastAPI:
    """An app with the full v1 router bound to the seeded session."""
    application = FastAPI()
    register_exception_handlers(application)
    application.include_router(create_router(settings))

    async def _session() -> AsyncGenerator[AsyncSession]:
        yield seeded_session

    application.dependency_overrides[get_async_session] = _session
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://voterguide.test") as c:
        yield c
