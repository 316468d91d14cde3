"""Pydantic v2 schemas for registered users."""

import uuid
from datetime import datetime

from pydantic import Field

from voter_guide.schemas.common import CamelModel


class UserProfileResponse(CamelModel):
    """Public profile of a registered user (no contact details)."""

    id: uuid.UUID
    username: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    state: str | None = None
    county: str | None = None
    created_at: datetime | None = None


class UsernameCheckResponse(CamelModel):
    """Availability of a username."""

    available: bool
    error: str | None = None


class UserCreateRequest(CamelModel):
    """Request to register a user."""

    username: str = Field(min_length=3, max_length=20)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, pattern=r"^\d{5}$")
    state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    county: str | None = Field(default=None, max_length=100)
