"""Packaged model catalogs used to populate the model selector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .config import AppConfig
from .llm import ModelNotFoundError
from .platforms import ANTHROPIC, GEMINI, OLLAMA, CHATGPT

TEXT = "text"
TOOLS = "tools"
VISION = "vision"
REASONING = "reasoning"


@dataclass(frozen=True)
class ModelCatalogEntry:
    """A model known to a provider, with a short human readable description."""

    name: str
    description: str = ""
    capabilities: Tuple[str, ...] = (TEXT,)


class ModelCatalog:
    def __init__(self, platform: str, entries: Mapping[str, ModelCatalogEntry]) -> None:
        self.platform = platform
        self._entries: Dict[str, ModelCatalogEntry] = dict(entries)

    def get_models(self) -> Dict[str, ModelCatalogEntry]:
        return dict(self._entries)

    def get_model(self, name: str) -> ModelCatalogEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise ModelNotFoundError(
                f"Model '{name}' is not part of the {self.platform} catalog."
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _entries(*rows: Tuple[str, str, Tuple[str, ...]]) -> Dict[str, ModelCatalogEntry]:
    return {name: ModelCatalogEntry(name, description, capabilities) for name, description, capabilities in rows}


_CATALOGS: Dict[str, Dict[str, ModelCatalogEntry]] = {
    ANTHROPIC: _entries(
        ("claude-3-haiku-20240307", "Claude 3 Haiku", (TEXT, TOOLS, VISION)),
        ("claude-3-5-haiku-latest", "Claude 3.5 Haiku", (TEXT, TOOLS, VISION)),
        ("claude-3-7-sonnet-latest", "Claude 3.7 Sonnet", (TEXT, TOOLS, VISION, REASONING)),
        ("claude-sonnet-4-20250514", "Claude Sonnet 4", (TEXT, TOOLS, VISION, REASONING)),
        ("claude-opus-4-20250514", "Claude Opus 4", (TEXT, TOOLS, VISION, REASONING)),
        ("claude-opus-4-1", "Claude Opus 4.1", (TEXT, TOOLS, VISION, REASONING)),
        ("claude-sonnet-4-5", "Claude Sonnet 4.5", (TEXT, TOOLS, VISION, REASONING)),
        ("claude-haiku-4-5", "Claude Haiku 4.5", (TEXT, TOOLS, VISION, REASONING)),
    ),
    GEMINI: _entries(
        ("gemini-2.0-flash", "Gemini 2.0 Flash", (TEXT, TOOLS, VISION)),
        ("gemini-2.0-flash-lite", "Gemini 2.0 Flash-Lite", (TEXT, TOOLS, VISION)),
        ("gemini-2.5-flash", "Gemini 2.5 Flash", (TEXT, TOOLS, VISION, REASONING)),
        ("gemini-2.5-flash-lite", "Gemini 2.5 Flash-Lite", (TEXT, TOOLS, VISION, REASONING)),
        ("gemini-2.5-pro", "Gemini 2.5 Pro", (TEXT, TOOLS, VISION, REASONING)),
    ),
    OLLAMA: _entries(
        ("llama3.1", "Meta Llama 3.1", (TEXT, TOOLS)),
        ("llama3.2", "Meta Llama 3.2", (TEXT, TOOLS)),
        ("llama3.2-vision", "Meta Llama 3.2 Vision", (TEXT, VISION)),
        ("mistral", "Mistral 7B", (TEXT, TOOLS)),
        ("qwen2.5", "Qwen 2.5", (TEXT, TOOLS)),
        ("qwen3", "Qwen 3", (TEXT, TOOLS, REASONING)),
        ("gemma3", "Google Gemma 3", (TEXT, VISION)),
        ("deepseek-r1", "DeepSeek-R1", (TEXT, REASONING)),
    ),
    CHATGPT: _entries(
        ("gpt-4o", "GPT-4o", (TEXT, TOOLS, VISION)),
        ("gpt-4o-mini", "GPT-4o mini", (TEXT, TOOLS, VISION)),
        ("gpt-4.1", "GPT-4.1", (TEXT, TOOLS, VISION)),
        ("gpt-4.1-mini", "GPT-4.1 mini", (TEXT, TOOLS, VISION)),
        ("gpt-4.1-nano", "GPT-4.1 nano", (TEXT, TOOLS, VISION)),
        ("o3", "OpenAI o3", (TEXT, TOOLS, VISION, REASONING)),
        ("o4-mini", "OpenAI o4-mini", (TEXT, TOOLS, VISION, REASONING)),
        ("gpt-5", "GPT-5", (TEXT, TOOLS, VISION, REASONING)),
        ("gpt-5-mini", "GPT-5 mini", (TEXT, TOOLS, VISION, REASONING)),
    ),
}


def get_model_catalog(platform: Optional[str], config: Optional[AppConfig] = None) -> ModelCatalog:
    """Return a freshly built catalog for *platform*.

    Unknown platforms get the OpenAI-compatible catalog. Models declared under
    ``catalog.<platform>`` in the configuration are appended.
    """

    key = platform or CHATGPT
    if key not in _CATALOGS:
        key = CHATGPT
    entries = dict(_CATALOGS[key])
    if config is not None:
        for name, description in config.catalog.get(key, {}).items():
            entries.setdefault(name, ModelCatalogEntry(name, description))
    return ModelCatalog(key, entries)
