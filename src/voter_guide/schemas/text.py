"""Pydantic v2 schemas for the LLM-backed text helpers."""

from typing import Literal

from pydantic import Field

from voter_guide.schemas.common import CamelModel


class SimplifyMeasureRequest(CamelModel):
    """Ballot measure text to explain in plain language."""

    original_text: str = Field(min_length=1, max_length=50000)
    title: str = Field(min_length=1, max_length=500)


class SimplifyMeasureResponse(CamelModel):
    """Plain-language explanations at three lengths."""

    one_sentence: str
    simple: str
    detailed: str
    fiscal_impact: str | None = None
    key_points: list[str] = Field(default_factory=list)


class BiasCheckRequest(CamelModel):
    """Content to check for political bias."""

    content: str = Field(min_length=1, max_length=20000)
    content_type: Literal["summary", "argument"] = "summary"


class BiasCheckResponse(CamelModel):
    """Bias assessment (0 neutral, 100 extremely biased)."""

    score: float
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    is_balanced: bool = True
