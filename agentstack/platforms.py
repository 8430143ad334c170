"""Dispatch from a platform tag to the transport that serves it.

Every known tag maps to one construction strategy. Tags are compared
exactly, without case or whitespace folding. Tags that are not in the
table, including a missing tag, resolve to :data:`DEFAULT_PLATFORM`
(OpenAI-compatible) with a warning instead of an error, so stored
connections that use an older or misspelled tag keep working.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .config import AppConfig
from .llm import ChatPlatform
from .logging import get_logger

LOGGER = get_logger(__name__)

ANTHROPIC = "anthropic"
GEMINI = "gemini"
OLLAMA = "ollama"
CHATGPT = "chatgpt"

DEFAULT_PLATFORM = CHATGPT

# Display names in form order.
PLATFORM_NAMES: Dict[str, str] = {
    ANTHROPIC: "Anthropic",
    GEMINI: "Gemini",
    OLLAMA: "Ollama",
    CHATGPT: "ChatGPT",
}


def _create_anthropic(api_key: Optional[str], url: Optional[str], settings: AppConfig) -> ChatPlatform:
    from .anthropic_client import AnthropicPlatform

    return AnthropicPlatform(api_key or "", settings.anthropic)


def _create_gemini(api_key: Optional[str], url: Optional[str], settings: AppConfig) -> ChatPlatform:
    from .gemini import GeminiPlatform

    return GeminiPlatform(api_key or "", settings.gemini)


def _create_ollama(api_key: Optional[str], url: Optional[str], settings: AppConfig) -> ChatPlatform:
    from .ollama import OllamaPlatform

    return OllamaPlatform(url or "", settings.ollama)


def _create_openai(api_key: Optional[str], url: Optional[str], settings: AppConfig) -> ChatPlatform:
    from .openai_client import OpenAIPlatform

    return OpenAIPlatform(api_key or "", settings.openai)


PlatformFactory = Callable[[Optional[str], Optional[str], AppConfig], ChatPlatform]


@dataclass(frozen=True)
class PlatformStrategy:
    """How one platform is built and which credential it needs."""

    tag: str
    factory: PlatformFactory
    needs_api_key: bool = True


_PLATFORMS: Dict[str, PlatformStrategy] = {
    ANTHROPIC: PlatformStrategy(ANTHROPIC, _create_anthropic),
    GEMINI: PlatformStrategy(GEMINI, _create_gemini),
    OLLAMA: PlatformStrategy(OLLAMA, _create_ollama, needs_api_key=False),
    CHATGPT: PlatformStrategy(CHATGPT, _create_openai),
}


def resolve_strategy(tag: Optional[str]) -> PlatformStrategy:
    """Return the strategy for *tag*, falling back to the default platform."""

    strategy = _PLATFORMS.get(tag or "")
    if strategy is not None:
        return strategy
    LOGGER.warning(
        "Unknown agent platform %r, using the default %r platform.", tag, DEFAULT_PLATFORM
    )
    return _PLATFORMS[DEFAULT_PLATFORM]


def needs_api_key(tag: Optional[str]) -> bool:
    # Tags match exactly; anything else uses the default strategy, which needs a key.
    strategy = _PLATFORMS.get(tag or "", _PLATFORMS[DEFAULT_PLATFORM])
    return strategy.needs_api_key


def create_platform(
    tag: Optional[str],
    *,
    api_key: Optional[str] = None,
    url: Optional[str] = None,
    settings: Optional[AppConfig] = None,
) -> ChatPlatform:
    """Instantiate the transport for *tag*.

    Construction is local: SDK clients are created but nothing is sent.
    """

    strategy = resolve_strategy(tag)
    return strategy.factory(api_key, url, settings or AppConfig())
