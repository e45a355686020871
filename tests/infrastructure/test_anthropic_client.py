"""Resilient Anthropic Client — retry policy against scripted SDK outcomes.

Invariants:
    - Rate limits and transient failures retry up to max_retries, then raise
    - Timeouts and 4xx client errors fail on the first attempt
    - complete_text concatenates the text blocks of the response
"""

import pytest

from tutor_network.core.errors import AnthropicAPIError
from tutor_network.infrastructure.anthropic_client import (
    ResilientAnthropicClient, extract_text,
)

from tests.services.mock_anthropic import (
    FakeMessagesAPI,
    _Block,
    _Message,
    bad_request_error,
    connection_error,
    overloaded_error,
    rate_limit_error,
    server_error,
    text_message,
    timeout_error,
)


def _client(outcomes, max_retries=2):
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", max_retries=max_retries, base_delay_ms=0,
    )
    fake = FakeMessagesAPI(outcomes)
    client.client.messages = fake
    return client, fake


async def _complete(client):
    return await client.complete_text(
        model="claude-haiku-4-5", system="sys", prompt="hi", max_tokens=10,
    )


def test_extract_text_skips_non_text_blocks():
    message = _Message([
        _Block(type="text", text="Hello "),
        _Block(type="tool_use", name="x"),
        _Block(type="text", text="world "),
    ])
    assert extract_text(message) == "Hello world"


async def test_success_passes_prompt_as_single_user_turn():
    client, fake = _client([text_message("ok")])
    assert await _complete(client) == "ok"
    call = fake.calls[0]
    assert call["messages"] == [{"role": "user", "content": "hi"}]
    assert call["system"] == "sys"
    assert "temperature" not in call


async def test_rate_limit_retried_then_succeeds():
    client, fake = _client([rate_limit_error(), text_message("done")])
    assert await _complete(client) == "done"
    assert len(fake.calls) == 2


@pytest.mark.parametrize("make_error", [server_error, overloaded_error, connection_error])
async def test_transient_errors_retried(make_error):
    client, fake = _client([make_error(), make_error(), text_message("fine")])
    assert await _complete(client) == "fine"
    assert len(fake.calls) == 3


async def test_transient_errors_exhaust_retries():
    client, fake = _client([server_error()] * 3, max_retries=2)
    with pytest.raises(AnthropicAPIError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "connection_error"
    assert len(fake.calls) == 3


async def test_rate_limit_exhausts_retries():
    client, _ = _client([rate_limit_error("0")] * 2, max_retries=1)
    with pytest.raises(AnthropicAPIError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "rate_limit"


async def test_timeout_fails_immediately():
    client, fake = _client([timeout_error(), text_message("never")])
    with pytest.raises(AnthropicAPIError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "timeout"
    assert len(fake.calls) == 1


async def test_client_error_fails_immediately():
    client, fake = _client([bad_request_error(), text_message("never")])
    with pytest.raises(AnthropicAPIError) as exc:
        await _complete(client)
    assert exc.value.api_error_type == "client_error"
    assert len(fake.calls) == 1
