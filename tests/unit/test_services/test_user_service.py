"""Unit tests for the user service."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from voter_guide.schemas.user import UserCreateRequest
from voter_guide.services.user_service import (
    check_username,
    create_user,
    get_user_by_username,
    validate_username,
)


class TestValidateUsername:
    """Tests for validate_username()."""

    def test_valid(self) -> None:
        assert validate_username("jane_doe42") is None

    def test_too_short(self) -> None:
        assert validate_username("ab") == "Username must be at least 3 characters"

    def test_too_long(self) -> None:
        assert validate_username("a" * 21) == "Username must be at most 20 characters"

    @pytest.mark.parametrize("username", ["9lives", "_jane", "jane-doe", "jane doe"])
    def test_bad_format(self, username: str) -> None:
        assert "must start with a letter" in validate_username(username)

    @pytest.mark.parametrize("username", ["admin", "Settings", "USERS"])
    def test_reserved_case_insensitive(self, username: str) -> None:
        assert validate_username(username) == "This username is reserved"


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_and_lookup(self, async_session: AsyncSession) -> None:
        user = await create_user(async_session, UserCreateRequest(username="JaneDoe", state="NY"))
        assert user.id is not None

        found = await get_user_by_username(async_session, "janedoe")
        assert found is not None
        assert found.username == "JaneDoe"

    @pytest.mark.asyncio
    async def test_duplicate_case_insensitive(self, async_session: AsyncSession) -> None:
        await create_user(async_session, UserCreateRequest(username="JaneDoe"))
        with pytest.raises(ValueError, match="already exists"):
            await create_user(async_session, UserCreateRequest(username="janedoe"))

    @pytest.mark.asyncio
    async def test_reserved_rejected(self, async_session: AsyncSession) -> None:
        with pytest.raises(ValueError, match="reserved"):
            await create_user(async_session, UserCreateRequest(username="admin"))


class TestCheckUsername:
    @pytest.mark.asyncio
    async def test_available(self, async_session: AsyncSession) -> None:
        assert await check_username(async_session, "fresh_name") == (True, None)

    @pytest.mark.asyncio
    async def test_taken(self, async_session: AsyncSession) -> None:
        await create_user(async_session, UserCreateRequest(username="JaneDoe"))
        assert await check_username(async_session, "JANEDOE") == (False, "Username is already taken")
