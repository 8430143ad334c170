"""Tests for the agent_cli entry point."""

from __future__ import annotations

import pytest

import agent_cli
from agentstack.agent import Agent
from agentstack.connection import AgentConnection


@pytest.fixture(autouse=True)
def no_project_config(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_CONFIG_FILE", str(tmp_path / "absent.yaml"))


def test_describe_prints_form(capsys):
    assert agent_cli.main(["--describe", "--log-level", "WARNING"]) == 0

    output = capsys.readouterr().out
    for name in ("platform", "model", "api_key", "url"):
        assert name in output


def test_list_catalog_models(capsys):
    assert agent_cli.main(["--list-models", "--platform", "anthropic"]) == 0
    assert "claude-sonnet-4-5" in capsys.readouterr().out


def test_missing_model_is_reported(capsys):
    assert agent_cli.main(["--platform", "anthropic", "--api-key", "k"]) == 1
    assert "Provided no model" in capsys.readouterr().out


def test_ping_success_and_failure(monkeypatch, capsys):
    args = ["--platform", "anthropic", "--api-key", "k", "--model", "claude-haiku-4-5"]

    monkeypatch.setattr(AgentConnection, "ping", lambda self, connection: True)
    assert agent_cli.main(args) == 0
    assert "answered" in capsys.readouterr().out

    monkeypatch.setattr(AgentConnection, "ping", lambda self, connection: False)
    assert agent_cli.main(args) == 1
    assert "not reachable" in capsys.readouterr().out


def test_prompt_prints_answer(monkeypatch, capsys):
    monkeypatch.setattr(Agent, "ask", lambda self, prompt, **_: f"echo: {prompt}")

    code = agent_cli.main(
        ["--platform", "ollama", "--url", "http://localhost:11434", "--model", "llama3.2", "--prompt", "hi"]
    )

    assert code == 0
    output = capsys.readouterr().out
    assert "You: hi" in output
    assert "echo: hi" in output


def test_environment_supplies_connection(monkeypatch):
    monkeypatch.setenv("AGENT_PLATFORM", "gemini")
    monkeypatch.setenv("AGENT_API_KEY", "k")
    monkeypatch.setenv("AGENT_MODEL", "gemini-2.5-flash")
    seen = {}

    def fake_ping(self, connection):
        seen["agent"] = connection
        return True

    monkeypatch.setattr(AgentConnection, "ping", fake_ping)

    assert agent_cli.main([]) == 0
    assert seen["agent"].provider == "gemini"
    assert seen["agent"].model == "gemini-2.5-flash"
