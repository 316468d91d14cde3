"""Anthropic Messages API implementation of the text helpers."""

import asyncio
import json
import re
from typing import Any

import anthropic
from loguru import logger

from voter_guide.lib.text_service.base import (
    BaseTextService,
    BiasCheckResult,
    SimplifiedMeasure,
    TextServiceError,
)

MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0
RETRY_MAX_DELAY = 10.0

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_SIMPLIFY_SYSTEM = (
    "You are an expert at explaining complex legal and political language to young voters. "
    "Your goal is to help people understand ballot measures without any political bias. "
    "Always present information factually and neutrally."
)

_BIAS_SYSTEM = (
    "You are an expert at detecting political bias in text. "
    "Your job is to identify loaded language, missing context, and one-sided arguments."
)

_SIMPLIFY_PROMPT = """Please analyze this ballot measure and provide simplified explanations:

Title: {title}

Original Text:
"{original_text}"

Provide your response in the following JSON format:
{{
  "oneSentence": "A single sentence summary (max 15 words)",
  "simple": "A simple explanation (50-75 words, 8th grade reading level)",
  "detailed": "A detailed breakdown (150-200 words)",
  "fiscalImpact": "The fiscal impact explained simply (if applicable, otherwise null)",
  "keyPoints": ["Key point 1", "Key point 2", "Key point 3"]
}}

Important guidelines:
- Use plain language, avoid jargon
- Be neutral and factual
- Focus on what changes and who is affected
- Make it relevant to young adults
- Return ONLY valid JSON, no other text"""

_BIAS_PROMPT = """Analyze this {content_type} for potential bias:

"{content}"

Provide your response in the following JSON format:
{{
  "score": <number from 0-100, where 0 is completely neutral and 100 is extremely biased>,
  "issues": ["List of specific bias issues found"],
  "suggestions": ["List of suggestions to make it more balanced"],
  "isBalanced": <true/false>
}}

Return ONLY valid JSON, no other text."""


def extract_json(text: str) -> dict[str, Any]:
    """Parse a model reply as JSON, falling back to the outermost ``{...}`` block.

    Raises:
        ValueError: If no JSON object can be recovered.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_RE.search(text)
        if match is None:
            msg = "Failed to parse AI response as JSON"
            raise ValueError(msg) from None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            msg = "Failed to parse AI response as JSON"
            raise ValueError(msg) from e
    if not isinstance(parsed, dict):
        msg = "AI response JSON is not an object"
        raise ValueError(msg)
    return parsed


class AnthropicTextService(BaseTextService):
    """Text helpers backed by the Anthropic Messages API.

    Rate-limit errors are retried with exponential backoff; every other
    failure is raised immediately as TextServiceError.

    Args:
        api_key: Anthropic API key.
        model: Model identifier.
        base_url: Optional API base URL override.
        timeout: Request timeout in seconds.
        client: Pre-built client (tests).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5",
        base_url: str | None = None,
        timeout: float = 60.0,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self._model = model
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key, base_url=base_url, timeout=timeout)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def _complete(self, system: str, prompt: str, max_tokens: int) -> str:
        """Send one user message and return the text reply, retrying on rate limits."""
        for attempt in range(MAX_RETRIES + 1):
            try:
                message = await self._client.messages.create(
                    model=self._model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                )
            except anthropic.RateLimitError as e:
                if attempt >= MAX_RETRIES:
                    raise TextServiceError(self.provider_name, "Rate limit exceeded", status_code=429) from e
                delay = min(RETRY_BASE_DELAY * (2**attempt), RETRY_MAX_DELAY)
                logger.warning(f"Anthropic rate limited (attempt {attempt + 1}/{MAX_RETRIES + 1}), retrying in {delay}s")
                await asyncio.sleep(delay)
                continue
            except anthropic.APIStatusError as e:
                raise TextServiceError(self.provider_name, str(e), status_code=e.status_code) from e
            except anthropic.APIError as e:
                raise TextServiceError(self.provider_name, str(e)) from e

            if not message.content or message.content[0].type != "text":
                raise TextServiceError(self.provider_name, "Unexpected response type")
            return message.content[0].text

        raise TextServiceError(self.provider_name, "Rate limit exceeded", status_code=429)

    async def simplify_ballot_measure(self, original_text: str, title: str) -> SimplifiedMeasure:
        text = await self._complete(
            _SIMPLIFY_SYSTEM,
            _SIMPLIFY_PROMPT.format(title=title, original_text=original_text),
            max_tokens=2048,
        )
        try:
            parsed = extract_json(text)
        except ValueError as e:
            raise TextServiceError(self.provider_name, str(e)) from e
        return SimplifiedMeasure(
            one_sentence=parsed.get("oneSentence") or "",
            simple=parsed.get("simple") or "",
            detailed=parsed.get("detailed") or "",
            fiscal_impact=parsed.get("fiscalImpact") or None,
            key_points=list(parsed.get("keyPoints") or []),
        )

    async def check_bias(self, content: str, content_type: str) -> BiasCheckResult:
        text = await self._complete(
            _BIAS_SYSTEM,
            _BIAS_PROMPT.format(content_type=content_type, content=content),
            max_tokens=1024,
        )
        try:
            parsed = extract_json(text)
        except ValueError as e:
            raise TextServiceError(self.provider_name, str(e)) from e
        is_balanced = parsed.get("isBalanced")
        return BiasCheckResult(
            score=parsed.get("score") or 0,
            issues=list(parsed.get("issues") or []),
            suggestions=list(parsed.get("suggestions") or []),
            is_balanced=True if is_balanced is None else bool(is_balanced),
        )
