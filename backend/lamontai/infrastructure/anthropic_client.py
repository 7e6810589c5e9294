"""Resilient Anthropic Client — wraps AsyncAnthropic with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, 529 overloaded, connection): max_retries retries with backoff
    - Timeouts and client errors (4xx except 429): immediate failure, no retry
    - All failures mapped to LLMAPIError (core/errors.py)
    - complete() always returns plain text; empty responses are an error

Design Decisions:
    - Wrapper over raw client: isolates retry logic from seo_writer (ADR: single responsibility)
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - Singleton via init_llm_client()/get_llm_client() so routes can override it in tests
"""

import asyncio
import logging
import random
from dataclasses import dataclass

import anthropic
from anthropic import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

from lamontai.core.errors import ErrorContext, LLMAPIError

logger = logging.getLogger(__name__)

# ADR: OverloadedError (HTTP 529) is not re-exported by every SDK release.
# Detect via status code on APIStatusError instead of relying on private import.
_OVERLOADED_STATUS = 529


def _is_overloaded(e: APIError) -> bool:
    return isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS


@dataclass(frozen=True)
class Completion:
    text: str
    input_tokens: int = 0
    output_tokens: int = 0


class ResilientAnthropicClient:
    """Wraps Anthropic client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 120,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def complete(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        context: ErrorContext | None = None,
    ) -> Completion:
        """Single-turn completion with automatic retry on transient failures."""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.messages.create(
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                )
                self._log_success(response, attempt)
                return self._to_completion(response, context)

            except RateLimitError as e:
                await self._handle_rate_limit(e, attempt, context)

            except (APIConnectionError, InternalServerError) as e:
                if isinstance(e, APITimeoutError):
                    raise LLMAPIError("API timeout", "timeout", context=context)
                await self._handle_transient_error(e, attempt, context)

            except APIError as e:
                if _is_overloaded(e):
                    await self._handle_transient_error(e, attempt, context)
                    continue
                raise LLMAPIError(str(e), "client_error", context=context)

        # unreachable: the handlers raise on the last attempt
        raise LLMAPIError("Retries exhausted", "connection_error", context=context)

    def _to_completion(self, response, context: ErrorContext | None) -> Completion:
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            raise LLMAPIError("Empty response", "invalid_response", context=context)
        usage = response.usage
        return Completion(
            text=text,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )

    def _log_success(self, response, attempt: int) -> None:
        usage = response.usage
        logger.info(
            "Anthropic API success",
            extra={
                "attempt": attempt + 1,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )

    async def _handle_rate_limit(
        self, e: RateLimitError, attempt: int, context: ErrorContext | None,
    ) -> None:
        retry_after_ms = self._extract_retry_after(e)
        if attempt >= self.max_retries:
            raise LLMAPIError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Rate limit hit, retry after {delay}ms (attempt {attempt + 1})",
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: Exception, attempt: int, context: ErrorContext | None,
    ) -> None:
        if attempt >= self.max_retries:
            raise LLMAPIError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(f"Transient error, retry after {delay}ms: {e}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, error: RateLimitError) -> int | None:
        """Retry-After header in milliseconds."""
        response = getattr(error, "response", None)
        if response is None:
            return None
        val = response.headers.get("retry-after")
        if not val:
            return None
        try:
            return int(float(val) * 1000)
        except ValueError:
            return None


# Singleton (initialized on startup)
_llm_client: ResilientAnthropicClient | None = None


def init_llm_client(api_key: str, **kwargs) -> ResilientAnthropicClient:
    global _llm_client
    _llm_client = ResilientAnthropicClient(api_key, **kwargs)
    return _llm_client


def get_llm_client() -> ResilientAnthropicClient:
    """FastAPI dependency for the process LLM client."""
    if _llm_client is None:
        raise LLMAPIError("LLM client not initialized", "not_configured")
    return _llm_client
