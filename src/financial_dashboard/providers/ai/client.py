"""Anthropic API client wrapper with lazy initialization and retries."""

import json
import os
import time
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console

from financial_dashboard.config import AIConfig
from financial_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)
_console = Console(stderr=True)  # stderr keeps status spinners on stdout intact


class AIClientError(Exception):
    """Base exception for AI client errors."""

    pass


class APIKeyNotFoundError(AIClientError):
    """Raised when the API key environment variable is not set."""

    pass


class TruncatedResponseError(AIClientError):
    """Raised when the model stopped at the token limit."""

    pass


# Substrings of transient API errors worth waiting for
_TRANSIENT_MARKERS = ("rate", "429", "overloaded", "529", "timeout", "timed out", "connection")


@dataclass
class AIResponse:
    """Text and token usage of one completed request."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str | None = None


@dataclass
class AIClient:
    """Wrapper for the Anthropic Messages API.

    Provides:
    - lazy initialization (the SDK is only imported on first use)
    - retries with exponential backoff
    - token usage counters
    - extraction of JSON from model output
    """

    config: AIConfig = field(default_factory=AIConfig)
    _client: Any = field(default=None, init=False, repr=False)
    total_requests: int = field(default=0, init=False)
    total_input_tokens: int = field(default=0, init=False)
    total_output_tokens: int = field(default=0, init=False)

    @property
    def is_available(self) -> bool:
        """Check if the API key is configured."""
        return bool(os.environ.get(self.config.api_key_env))

    def _ensure_initialized(self) -> None:
        """Create the Anthropic SDK client on first use."""
        if self._client is not None:
            return

        api_key = os.environ.get(self.config.api_key_env)
        if not api_key:
            raise APIKeyNotFoundError(
                f"API key not found in environment variable: {self.config.api_key_env}"
            )

        try:
            import anthropic
        except ImportError as err:
            raise AIClientError(
                "anthropic package not installed. Run: pip install anthropic"
            ) from err

        self._client = anthropic.Anthropic(api_key=api_key)
        logger.info(f"AI client initialized with model: {self.config.model}")

    def send_message(self, system_prompt: str, user_prompt: str) -> AIResponse:
        """Send one prompt and return the model's text.

        Args:
            system_prompt: The system prompt.
            user_prompt: The user prompt.

        Returns:
            AIResponse with the text and token counts.

        Raises:
            APIKeyNotFoundError: If no API key is configured.
            TruncatedResponseError: If the response hit max_tokens.
            AIClientError: If the request fails after all retries.
        """
        self._ensure_initialized()

        delay = self.config.retry_delay
        attempts = max(1, self.config.retry_attempts)

        for attempt in range(1, attempts + 1):
            try:
                response = self._client.messages.create(
                    model=self.config.model,
                    max_tokens=self.config.max_tokens,
                    system=system_prompt,
                    messages=[{"role": "user", "content": user_prompt}],
                    timeout=self.config.timeout,
                )
            except Exception as e:
                if attempt == attempts:
                    raise AIClientError(f"Request failed after {attempt} attempts: {e}") from e

                reason = "API busy" if self._is_transient(e) else "Request failed"
                _console.print(f"[yellow]{reason}, retrying in {delay:.0f}s...[/yellow]")
                logger.warning(f"{reason} (attempt {attempt}/{attempts}): {e}")
                time.sleep(delay)
                delay *= 2
                continue

            result = self._to_response(response)
            if result.stop_reason == "max_tokens":
                raise TruncatedResponseError(
                    f"Response truncated at {self.config.max_tokens} tokens; "
                    "raise ai.max_tokens or request fewer postings"
                )
            return result

        raise AIClientError("Request failed: no attempts made")

    def _to_response(self, response: Any) -> AIResponse:
        """Convert an SDK message to AIResponse and record usage."""
        text = ""
        if response.content:
            text = "".join(getattr(block, "text", "") for block in response.content)

        usage = getattr(response, "usage", None)
        input_tokens = int(getattr(usage, "input_tokens", 0) or 0)
        output_tokens = int(getattr(usage, "output_tokens", 0) or 0)

        self.total_requests += 1
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
        logger.debug(f"Request completed: {input_tokens} in, {output_tokens} out")

        return AIResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=getattr(response, "stop_reason", None),
        )

    @staticmethod
    def _is_transient(error: Exception) -> bool:
        message = str(error).lower()
        return any(marker in message for marker in _TRANSIENT_MARKERS)

    @staticmethod
    def parse_json_response(response: str) -> dict[str, Any] | list[Any]:
        """Parse JSON from model output.

        Models sometimes wrap JSON in prose or a markdown fence; the first
        balanced object or array is extracted in that case.

        Args:
            response: The response text.

        Returns:
            Parsed JSON object or array.

        Raises:
            ValueError: If no JSON object or array can be parsed.
        """
        try:
            result = json.loads(response)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(result, (dict, list)):
                return result
            raise ValueError(f"JSON parsed to unexpected type: {type(result).__name__}")

        starts = [i for i in (response.find("["), response.find("{")) if i != -1]
        if not starts:
            raise ValueError(f"No JSON found in response: {response[:100]}")
        start = min(starts)

        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(response[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char in "{[":
                depth += 1
            elif char in "}]":
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(response[start : i + 1])  # type: ignore[no-any-return]
                    except json.JSONDecodeError:
                        break

        raise ValueError(f"Could not parse JSON from response: {response[:200]}")

    def get_usage_summary(self) -> str:
        """Human-readable usage summary."""
        return (
            f"AI usage: {self.total_requests} request(s), "
            f"{self.total_input_tokens:,} input tokens, "
            f"{self.total_output_tokens:,} output tokens"
        )
