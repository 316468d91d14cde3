"""User service -- registered users and username rules."""

import re

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.models.user import User
from voter_guide.schemas.user import UserCreateRequest

USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

RESERVED_USERNAMES: frozenset[str] = frozenset(
    {
        "admin",
        "api",
        "auth",
        "ballot",
        "ballots",
        "card",
        "cards",
        "dashboard",
        "edit",
        "election",
        "elections",
        "event",
        "events",
        "home",
        "login",
        "logout",
        "onboarding",
        "profile",
        "public",
        "settings",
        "signup",
        "user",
        "users",
        "voter",
        "voter-card",
        "wethepotato",
        "www",
        "help",
        "support",
        "about",
        "terms",
        "privacy",
        "contact",
        "share",
        "admin-login",
    }
)


def validate_username(username: str) -> str | None:
    """Check a username against the format and reserved-word rules.

    Returns:
        An error message, or None if the username is acceptable.
    """
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be at most {USERNAME_MAX_LENGTH} characters"
    if not USERNAME_PATTERN.match(username):
        return "Username must start with a letter and contain only letters, numbers, and underscores"
    if username.lower() in RESERVED_USERNAMES:
        return "This username is reserved"
    return None


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    """Find a user by username (case-insensitive)."""
    result = await session.execute(select(User).where(func.lower(User.username) == username.lower()))
    return result.scalar_one_or_none()


async def check_username(session: AsyncSession, username: str) -> tuple[bool, str | None]:
    """Report whether a username may be registered.

    Returns:
        Tuple of (available, error message or None).
    """
    error = validate_username(username)
    if error is not None:
        return False, error
    if await get_user_by_username(session, username) is not None:
        return False, "Username is already taken"
    return True, None


async def create_user(session: AsyncSession, request: UserCreateRequest) -> User:
    """Register a new user.

    Raises:
        ValueError: If the username is invalid, reserved, or already exists.
    """
    error = validate_username(request.username)
    if error is not None:
        msg = f"Invalid username '{request.username}': {error}"
        raise ValueError(msg)
    if await get_user_by_username(session, request.username) is not None:
        msg = f"User '{request.username}' already exists"
        raise ValueError(msg)

    user = User(**request.model_dump())
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        msg = f"User '{request.username}' already exists"
        raise ValueError(msg) from None
    await session.refresh(user)
    logger.info(f"Created user {user.username}")
    return user
