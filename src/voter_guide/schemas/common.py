"""Common Pydantic v2 schemas shared across the API.

All request and response bodies use camelCase keys on the wire; request
bodies also accept the snake_case field names.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str = Field(description="Human-readable error message")
    details: list[dict] | None = Field(default=None, description="Detailed validation errors")


class SuccessResponse(BaseModel):
    """Acknowledgement for write endpoints with no payload."""

    success: bool = True
