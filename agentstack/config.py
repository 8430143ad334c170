"""Configuration models and helpers for agent connections."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return

    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if not env_path.is_absolute():
        env_path = PROJECT_ROOT / env_file
    if env_path.exists():
        load_dotenv(env_path, override=False)
    _DOTENV_LOADED = True


def _env(key: str) -> Optional[str]:
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _tag(value: Any) -> Optional[str]:
    # Platform tags are matched exactly; only a blank tag counts as missing.
    if value is None or not str(value).strip():
        return None
    return str(value)


def _update_dataclass(instance: Any, values: Mapping[str, Any]) -> None:
    for key, value in values.items():
        if hasattr(instance, key):
            setattr(instance, key, value)


@dataclass
class ConnectionConfig:
    """The four settings the host stores for one agent connection.

    Blank strings are normalised to ``None`` so emptiness checks stay simple.
    """

    platform: Optional[str] = None
    api_key: Optional[str] = None
    url: Optional[str] = None
    model: Optional[str] = None

    def __post_init__(self) -> None:
        self.platform = _tag(self.platform)
        self.api_key = _clean(self.api_key)
        self.url = _clean(self.url)
        self.model = _clean(self.model)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ConnectionConfig":
        # The form stores the provider selector as "type"; accept it as an alias.
        platform = payload.get("platform")
        if _tag(platform) is None:
            platform = payload.get("type")
        return cls(
            platform=platform,
            api_key=payload.get("api_key"),
            url=payload.get("url"),
            model=payload.get("model"),
        )

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return (
            f"ConnectionConfig(platform={self.platform!r}, api_key={masked!r}, "
            f"url={self.url!r}, model={self.model!r})"
        )


@dataclass
class OllamaConfig:
    """HTTP settings for the Ollama REST API."""

    timeout: float = 30.0


@dataclass
class OpenAIConfig:
    """Settings for OpenAI-compatible Chat Completions endpoints."""

    base_url: Optional[str] = None
    organization: Optional[str] = None
    max_retries: int = 0


@dataclass
class AnthropicConfig:
    """Settings for the Anthropic Messages API."""

    base_url: Optional[str] = None
    max_tokens: int = 1024
    max_retries: int = 0


@dataclass
class GeminiConfig:
    """Settings for the Google Gen AI client."""

    base_url: Optional[str] = None


@dataclass
class ProbeConfig:
    """Messages sent by the connectivity check."""

    system_prompt: str = "You are invoked through the AI integration of the API platform."
    user_prompt: str = (
        "This is just a test message to check whether the integration works, "
        'can you respond with "ok" in case everything works?'
    )


@dataclass
class ToolConfig:
    """Limits applied when a toolbox is attached to an agent."""

    max_rounds: int = 8


@dataclass
class AppConfig:
    """Aggregate configuration container used throughout the project."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    anthropic: AnthropicConfig = field(default_factory=AnthropicConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    tools: ToolConfig = field(default_factory=ToolConfig)
    # platform -> {model id -> description}, appended to the packaged catalogs
    catalog: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def load(cls, *, config_path: Optional[Path] = None) -> "AppConfig":
        """Create an :class:`AppConfig` from YAML/JSON and environment overrides."""

        _load_dotenv_once()
        instance = cls()

        file_path = config_path or _env("APP_CONFIG_FILE")
        if file_path is None:
            yaml_path = PROJECT_ROOT / "config.yaml"
            json_path = PROJECT_ROOT / "config.json"
            file_path = yaml_path if yaml_path.exists() or not json_path.exists() else json_path
        file_path = Path(file_path)
        if not file_path.is_absolute():
            file_path = PROJECT_ROOT / file_path
        if file_path.exists():
            with file_path.open("r", encoding="utf-8") as handle:
                if file_path.suffix.lower() in {".yaml", ".yml"}:
                    payload = yaml.safe_load(handle) or {}
                else:
                    payload = json.load(handle)
            instance.apply_mapping(payload)

        instance.apply_environment()
        return instance

    # ------------------------------------------------------------------
    # Override helpers
    # ------------------------------------------------------------------
    def apply_mapping(self, payload: Mapping[str, Any]) -> None:
        if not payload:
            return

        if "connection" in payload:
            self.connection = ConnectionConfig.from_mapping(payload["connection"] or {})
        if "ollama" in payload:
            _update_dataclass(self.ollama, payload["ollama"])
        if "openai" in payload:
            _update_dataclass(self.openai, payload["openai"])
        if "anthropic" in payload:
            _update_dataclass(self.anthropic, payload["anthropic"])
        if "gemini" in payload:
            _update_dataclass(self.gemini, payload["gemini"])
        if "probe" in payload:
            _update_dataclass(self.probe, payload["probe"])
        if "tools" in payload:
            _update_dataclass(self.tools, payload["tools"])
        if "catalog" in payload:
            self.catalog = {
                str(platform): {str(name): str(desc or "") for name, desc in (models or {}).items()}
                for platform, models in payload["catalog"].items()
            }

    def apply_environment(self) -> None:
        platform = _env("AGENT_PLATFORM")
        if platform:
            self.connection.platform = platform
        api_key = _env("AGENT_API_KEY")
        if api_key:
            self.connection.api_key = api_key
        url = _env("AGENT_URL")
        if url:
            self.connection.url = url
        elif self.connection.url is None:
            ollama_host = _env("OLLAMA_HOST")
            if ollama_host:
                self.connection.url = ollama_host
        model = _env("AGENT_MODEL")
        if model:
            self.connection.model = model

        ollama_timeout = _env("OLLAMA_TIMEOUT")
        if ollama_timeout:
            self.ollama.timeout = float(ollama_timeout)

        openai_base = _env("OPENAI_BASE_URL")
        if openai_base:
            self.openai.base_url = openai_base
        openai_org = _env("OPENAI_ORG")
        if openai_org:
            self.openai.organization = openai_org

        anthropic_base = _env("ANTHROPIC_BASE_URL")
        if anthropic_base:
            self.anthropic.base_url = anthropic_base
        anthropic_max_tokens = _env("ANTHROPIC_MAX_TOKENS")
        if anthropic_max_tokens:
            self.anthropic.max_tokens = int(anthropic_max_tokens)

        gemini_base = _env("GEMINI_BASE_URL")
        if gemini_base:
            self.gemini.base_url = gemini_base

        max_retries = _env("AGENT_MAX_RETRIES")
        if max_retries:
            self.openai.max_retries = int(max_retries)
            self.anthropic.max_retries = int(max_retries)

        max_rounds = _env("AGENT_TOOL_MAX_ROUNDS")
        if max_rounds:
            self.tools.max_rounds = int(max_rounds)

        system_prompt = _env("PROBE_SYSTEM_PROMPT")
        if system_prompt:
            self.probe.system_prompt = system_prompt
        user_prompt = _env("PROBE_USER_PROMPT")
        if user_prompt:
            self.probe.user_prompt = user_prompt
