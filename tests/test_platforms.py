"""Tests for platform dispatch and the shared message models."""

from __future__ import annotations

import pytest

from agentstack import platforms
from agentstack.anthropic_client import AnthropicPlatform
from agentstack.config import AppConfig
from agentstack.gemini import GeminiPlatform
from agentstack.llm import Message, MessageBag
from agentstack.ollama import OllamaPlatform
from agentstack.openai_client import OpenAIPlatform


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("anthropic", AnthropicPlatform),
        ("gemini", GeminiPlatform),
        ("chatgpt", OpenAIPlatform),
        ("Anthropic", OpenAIPlatform),
        (" gemini ", OpenAIPlatform),
        ("openai", OpenAIPlatform),
        (None, OpenAIPlatform),
    ],
)
def test_create_platform_dispatch(tag, expected):
    platform = platforms.create_platform(tag, api_key="k")
    assert isinstance(platform, expected)


def test_create_ollama_uses_url_and_timeout():
    settings = AppConfig()
    settings.ollama.timeout = 5.0

    platform = platforms.create_platform("ollama", url="http://gpu-box:11434/", settings=settings)

    assert isinstance(platform, OllamaPlatform)
    assert platform.base_url == "http://gpu-box:11434"
    assert platform.config.timeout == 5.0


def test_needs_api_key():
    assert platforms.needs_api_key("ollama") is False
    assert platforms.needs_api_key("anthropic") is True
    assert platforms.needs_api_key("something-else") is True
    assert platforms.needs_api_key(None) is True
    assert platforms.needs_api_key("Ollama") is True
    assert platforms.needs_api_key(" ollama ") is True


def test_message_bag_separates_system_messages():
    bag = MessageBag(
        Message.for_system("one"),
        Message.of_user("hi"),
        Message.for_system("two"),
    )

    assert bag.system == "one\n\ntwo"
    assert [message.content for message in bag.without_system()] == ["hi"]
    extended = bag.with_messages(Message.of_assistant("hello"))
    assert len(extended) == 4
    assert len(bag) == 3
    assert MessageBag(Message.of_user("x")).system is None
