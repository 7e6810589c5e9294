"""Resilient Anthropic Client — retry, backoff and error mapping.

Invariants:
    - 429 and transient errors are retried up to max_retries
    - Timeouts and 4xx fail immediately with LLMAPIError
    - Empty model output is an invalid_response error
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    BadRequestError,
    InternalServerError,
    RateLimitError,
)

import lamontai.infrastructure.anthropic_client as llm_module
from lamontai.core.errors import LLMAPIError
from lamontai.infrastructure.anthropic_client import (
    Completion,
    ResilientAnthropicClient,
    get_llm_client,
)

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _response(text="Hello", input_tokens=5, output_tokens=7):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
    )


def _status(cls, code, headers=None):
    return cls(
        f"HTTP {code}",
        response=httpx.Response(code, request=REQUEST, headers=headers or {}),
        body=None,
    )


@pytest.fixture
def llm():
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", max_retries=2, base_delay_ms=1, max_delay_ms=2,
    )
    client.client.messages.create = AsyncMock()
    return client


async def _complete(llm):
    return await llm.complete(model="m", system="s", prompt="p")


async def test_success_returns_text_and_usage(llm):
    llm.client.messages.create.return_value = _response(" Hello \n")
    assert await _complete(llm) == Completion("Hello", 5, 7)

    kwargs = llm.client.messages.create.await_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "p"}]
    assert kwargs["system"] == "s"


async def test_rate_limit_is_retried(llm):
    llm.client.messages.create.side_effect = [
        _status(RateLimitError, 429, {"retry-after": "0"}),
        _response(),
    ]
    assert (await _complete(llm)).text == "Hello"
    assert llm.client.messages.create.await_count == 2


async def test_rate_limit_exhausted_raises(llm):
    llm.client.messages.create.side_effect = _status(RateLimitError, 429)
    with pytest.raises(LLMAPIError) as exc:
        await _complete(llm)
    assert exc.value.api_error_type == "rate_limit"
    assert llm.client.messages.create.await_count == 3


async def test_transient_errors_are_retried(llm):
    llm.client.messages.create.side_effect = [
        APIConnectionError(request=REQUEST),
        _status(InternalServerError, 500),
        _response(),
    ]
    assert (await _complete(llm)).text == "Hello"
    assert llm.client.messages.create.await_count == 3


async def test_overloaded_is_retried(llm):
    llm.client.messages.create.side_effect = [
        _status(APIStatusError, 529),
        _response(),
    ]
    assert (await _complete(llm)).text == "Hello"


async def test_transient_exhausted_raises_connection_error(llm):
    llm.client.messages.create.side_effect = APIConnectionError(request=REQUEST)
    with pytest.raises(LLMAPIError) as exc:
        await _complete(llm)
    assert exc.value.api_error_type == "connection_error"
    assert llm.client.messages.create.await_count == 3


async def test_timeout_is_not_retried(llm):
    llm.client.messages.create.side_effect = APITimeoutError(request=REQUEST)
    with pytest.raises(LLMAPIError) as exc:
        await _complete(llm)
    assert exc.value.api_error_type == "timeout"
    assert llm.client.messages.create.await_count == 1


async def test_client_error_is_not_retried(llm):
    llm.client.messages.create.side_effect = _status(BadRequestError, 400)
    with pytest.raises(LLMAPIError) as exc:
        await _complete(llm)
    assert exc.value.api_error_type == "client_error"
    assert llm.client.messages.create.await_count == 1


async def test_empty_text_is_invalid_response(llm):
    llm.client.messages.create.return_value = _response("   ")
    with pytest.raises(LLMAPIError) as exc:
        await _complete(llm)
    assert exc.value.api_error_type == "invalid_response"


def test_backoff_stays_within_jitter_and_cap():
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", base_delay_ms=1000, max_delay_ms=3000,
    )
    assert 750 <= client._backoff(0) <= 1250
    assert 2250 <= client._backoff(5) <= 3750


def test_get_llm_client_requires_init(monkeypatch):
    monkeypatch.setattr(llm_module, "_llm_client", None)
    with pytest.raises(LLMAPIError) as exc:
        get_llm_client()
    assert exc.value.api_error_type == "not_configured"
