"""Tests for the Anthropic transport."""

from __future__ import annotations

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from agentstack.anthropic_client import AnthropicClientError, AnthropicPlatform
from agentstack.config import AnthropicConfig
from agentstack.llm import (
    Message,
    MessageBag,
    ModelAuthenticationError,
    ModelConnectionError,
    ModelNotFoundError,
    ToolCall,
    ToolDefinition,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class _Messages:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def _install(platform: AnthropicPlatform, result) -> _Messages:
    messages = _Messages(result)
    platform._client = SimpleNamespace(messages=messages)
    return messages


def test_call_moves_system_prompt_and_uses_default_max_tokens():
    platform = AnthropicPlatform("k", AnthropicConfig(max_tokens=256))
    reply = SimpleNamespace(model="claude-haiku-4-5", content=[SimpleNamespace(type="text", text="ok")])
    messages = _install(platform, reply)

    response = platform.call(
        "claude-haiku-4-5",
        MessageBag(Message.for_system("platform context"), Message.of_user("say ok")),
    )

    assert response.content == "ok"
    assert messages.kwargs["system"] == "platform context"
    assert messages.kwargs["max_tokens"] == 256
    assert messages.kwargs["messages"] == [{"role": "user", "content": "say ok"}]
    assert "tools" not in messages.kwargs


def test_call_parses_tool_use_blocks():
    platform = AnthropicPlatform("k")
    reply = SimpleNamespace(
        model="claude-sonnet-4-5",
        content=[
            SimpleNamespace(type="text", text="Checking. "),
            SimpleNamespace(type="tool_use", id="toolu_1", name="weather", input={"city": "Oslo"}),
        ],
    )
    messages = _install(platform, reply)

    response = platform.call(
        "claude-sonnet-4-5",
        MessageBag(Message.of_user("weather?")),
        tools=[ToolDefinition(name="weather", description="Forecast")],
    )

    assert messages.kwargs["tools"] == [
        {
            "name": "weather",
            "description": "Forecast",
            "input_schema": {"type": "object", "properties": {}},
        }
    ]
    assert response.content == "Checking. "
    assert response.tool_calls == [ToolCall(id="toolu_1", name="weather", arguments={"city": "Oslo"})]


def test_consecutive_tool_results_share_one_user_turn():
    platform = AnthropicPlatform("k")
    messages = _install(platform, SimpleNamespace(model="m", content=[]))
    first = ToolCall(id="a", name="weather", arguments={"city": "Oslo"})
    second = ToolCall(id="b", name="weather", arguments={"city": "Rome"})

    platform.call(
        "m",
        MessageBag(
            Message.of_user("compare"),
            Message.of_assistant("", [first, second]),
            Message.of_tool_result(first, "cold"),
            Message.of_tool_result(second, "warm"),
        ),
    )

    sent = messages.kwargs["messages"]
    assert len(sent) == 3
    assert [block["type"] for block in sent[1]["content"]] == ["tool_use", "tool_use"]
    assert sent[2]["role"] == "user"
    assert [block["tool_use_id"] for block in sent[2]["content"]] == ["a", "b"]


@pytest.mark.parametrize(
    "error, expected",
    [
        (
            anthropic.AuthenticationError("bad key", response=httpx.Response(401, request=_REQUEST), body=None),
            ModelAuthenticationError,
        ),
        (
            anthropic.NotFoundError("no model", response=httpx.Response(404, request=_REQUEST), body=None),
            ModelNotFoundError,
        ),
        (anthropic.APIConnectionError(request=_REQUEST), ModelConnectionError),
        (
            anthropic.InternalServerError("boom", response=httpx.Response(500, request=_REQUEST), body=None),
            AnthropicClientError,
        ),
    ],
)
def test_sdk_errors_are_mapped(error, expected):
    platform = AnthropicPlatform("k")
    _install(platform, error)

    with pytest.raises(expected):
        platform.call("claude-haiku-4-5", MessageBag(Message.of_user("hi")))
