"""Root API router with /api/v1 prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from voter_guide.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, setup_cors
from voter_guide.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from voter_guide.api.v1.admin import admin_router
    from voter_guide.api.v1.analytics import analytics_router
    from voter_guide.api.v1.ballots import ballots_router
    from voter_guide.api.v1.decisions import decisions_router
    from voter_guide.api.v1.events import events_router
    from voter_guide.api.v1.text_tools import text_tools_router
    from voter_guide.api.v1.users import users_router
    from voter_guide.api.v1.voter_cards import voter_cards_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(ballots_router)
    root_router.include_router(decisions_router)
    root_router.include_router(voter_cards_router)
    root_router.include_router(users_router)
    root_router.include_router(events_router)
    root_router.include_router(admin_router)
    root_router.include_router(analytics_router)
    root_router.include_router(text_tools_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxy_headers=settings.trusted_proxy_header_list,
    )
