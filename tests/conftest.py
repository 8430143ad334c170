"""Shared fixtures for the agentstack test-suite."""

from __future__ import annotations

from typing import Any, List

import pytest

from agentstack import config as config_module
from agentstack.llm import AgentResponse, ChatPlatform, MessageBag, ModelInfo


_ENV_KEYS = (
    "ENV_FILE",
    "APP_CONFIG_FILE",
    "AGENT_PLATFORM",
    "AGENT_API_KEY",
    "AGENT_URL",
    "AGENT_MODEL",
    "OLLAMA_HOST",
    "OLLAMA_TIMEOUT",
    "OPENAI_BASE_URL",
    "OPENAI_ORG",
    "ANTHROPIC_BASE_URL",
    "ANTHROPIC_MAX_TOKENS",
    "GEMINI_BASE_URL",
    "AGENT_MAX_RETRIES",
    "AGENT_TOOL_MAX_ROUNDS",
    "PROBE_SYSTEM_PROMPT",
    "PROBE_USER_PROMPT",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep developer .env files and shell variables out of the tests."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config_module, "_DOTENV_LOADED", True)


class ScriptedPlatform(ChatPlatform):
    """Transport double that replays queued responses or raises queued errors."""

    name = "scripted"

    def __init__(self, *replies: Any) -> None:
        self.replies: List[Any] = list(replies)
        self.calls: List[dict] = []

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        self.calls.append({"model": model, "messages": list(messages), "options": options})
        reply = self.replies.pop(0) if self.replies else AgentResponse(content="ok", model=model)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def list_models(self) -> List[ModelInfo]:
        return [ModelInfo(name="scripted-model")]


@pytest.fixture
def scripted_platform():
    return ScriptedPlatform
