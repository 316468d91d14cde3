"""Abstract base interface for LLM-backed text helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class SimplifiedMeasure:
    """Plain-language explanations of a ballot measure at three lengths."""

    one_sentence: str
    simple: str
    detailed: str
    fiscal_impact: str | None = None
    key_points: list[str] = field(default_factory=list)


@dataclass
class BiasCheckResult:
    """Bias assessment for a piece of ballot content.

    ``score`` runs from 0 (neutral) to 100 (extremely biased).
    """

    score: float
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    is_balanced: bool = True


class TextServiceError(Exception):
    """Raised when the text provider fails or returns an unusable response.

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class BaseTextService(ABC):
    """Abstract interface for text simplification and bias checking."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique short name for this provider (e.g. 'anthropic')."""

    @abstractmethod
    async def simplify_ballot_measure(self, original_text: str, title: str) -> SimplifiedMeasure:
        """Explain a ballot measure in plain language.

        Raises:
            TextServiceError: On provider or parsing failure.
        """

    @abstractmethod
    async def check_bias(self, content: str, content_type: str) -> BiasCheckResult:
        """Assess a summary or argument for political bias.

        Args:
            content: Text to analyse.
            content_type: ``"summary"`` or ``"argument"``.

        Raises:
            TextServiceError: On provider or parsing failure.
        """
