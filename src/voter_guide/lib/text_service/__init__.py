"""Text service library — LLM-backed ballot text helpers.

Public API:
    - BaseTextService: Abstract provider interface
    - AnthropicTextService: Anthropic Messages API implementation
    - SimplifiedMeasure, BiasCheckResult: Normalized results
    - TextServiceError: Provider-level error
"""

from voter_guide.lib.text_service.anthropic_service import AnthropicTextService, extract_json
from voter_guide.lib.text_service.base import (
    BaseTextService,
    BiasCheckResult,
    SimplifiedMeasure,
    TextServiceError,
)

__all__ = [
    "AnthropicTextService",
    "BaseTextService",
    "BiasCheckResult",
    "SimplifiedMeasure",
    "TextServiceError",
    "extract_json",
]
