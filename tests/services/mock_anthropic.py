"""Mock Anthropic Clients — scripted stand-ins for the LLM at two levels.

Invariants:
    - MockLLMClient replaces ResilientAnthropicClient at the dependency boundary;
      it returns scripted text (or raises scripted errors) one per call
    - FakeMessagesAPI replaces AsyncAnthropic.messages inside a real
      ResilientAnthropicClient, so its retry policy runs against scripted outcomes
    - Builder helpers produce SDK-shaped responses and exceptions

Design Decisions:
    - Flat mock classes (no inheritance): simple, explicit, easy to debug
    - Exceptions are real anthropic SDK exceptions built over httpx objects
"""

import httpx
import anthropic

_URL = "https://api.anthropic.com/v1/messages"


# -- SDK-shaped objects ----------------------------------------------------------


class _Block:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)


class _Usage:
    def __init__(self, input_tokens=100, output_tokens=50):
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens


class _Message:
    def __init__(self, content, stop_reason="end_turn", tokens=(100, 50)):
        self.content = content
        self.stop_reason = stop_reason
        self.usage = _Usage(*tokens)


def text_message(*texts, tokens=(100, 50)):
    """Message with one text block per argument."""
    return _Message([_Block(type="text", text=t) for t in texts], tokens=tokens)


# -- Exceptions ----------------------------------------------------------------


def _response(status, headers=None):
    return httpx.Response(
        status, headers=headers or {}, request=httpx.Request("POST", _URL),
    )


def rate_limit_error(retry_after="0"):
    headers = {"retry-after": retry_after} if retry_after is not None else {}
    return anthropic.RateLimitError(
        "rate limited", response=_response(429, headers), body=None,
    )


def server_error(status=500):
    return anthropic.InternalServerError(
        "server error", response=_response(status), body=None,
    )


def overloaded_error():
    return anthropic.APIStatusError(
        "overloaded", response=_response(529), body=None,
    )


def bad_request_error():
    return anthropic.BadRequestError(
        "bad request", response=_response(400), body=None,
    )


def connection_error():
    return anthropic.APIConnectionError(request=httpx.Request("POST", _URL))


def timeout_error():
    return anthropic.APITimeoutError(request=httpx.Request("POST", _URL))


# -- Fakes -----------------------------------------------------------------------


class FakeMessagesAPI:
    """Stands in for AsyncAnthropic.messages; each create() consumes one outcome."""

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class MockLLMClient:
    """Scripted ResilientAnthropicClient: one response (str or Exception) per call."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def complete_text(self, **kwargs) -> str:
        self.calls.append(kwargs)
        if not self.responses:
            raise AssertionError("MockLLMClient: no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response
