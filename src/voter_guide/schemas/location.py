"""Pydantic v2 schemas for ZIP lookup and pilot state discovery."""

from pydantic import Field

from voter_guide.schemas.common import CamelModel


class LocationLookupResponse(CamelModel):
    """Result of resolving a ZIP code inside the pilot program."""

    state: str
    county: str
    city: str | None = None
    supported: bool = True


class SupportedStatesResponse(CamelModel):
    """The pilot state allow-list."""

    supported: list[str] = Field(description="Two-letter codes of supported states")
    pilot: bool = True
