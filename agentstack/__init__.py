"""Agent connections for the host API platform."""

from .agent import Agent
from .catalog import ModelCatalog, ModelCatalogEntry, get_model_catalog
from .config import (
    AnthropicConfig,
    AppConfig,
    ConnectionConfig,
    GeminiConfig,
    OllamaConfig,
    OpenAIConfig,
    ProbeConfig,
    ToolConfig,
)
from .connection import AgentConnection, ConfigurationError
from .form import ElementFactory, FormBuilder, InputElement, SelectElement
from .llm import (
    AgentResponse,
    ChatPlatform,
    Message,
    MessageBag,
    ModelAuthenticationError,
    ModelClientError,
    ModelConnectionError,
    ModelInfo,
    ModelNotFoundError,
    ToolCall,
    ToolDefinition,
)
from .platforms import DEFAULT_PLATFORM, PLATFORM_NAMES, create_platform
from .tools import (
    StaticToolsResolver,
    Toolbox,
    ToolError,
    ToolExecutionError,
    ToolLoopError,
    ToolNotFoundError,
    ToolProcessor,
    ToolsResolver,
)

__all__ = [
    "Agent",
    "ModelCatalog",
    "ModelCatalogEntry",
    "get_model_catalog",
    "AnthropicConfig",
    "AppConfig",
    "ConnectionConfig",
    "GeminiConfig",
    "OllamaConfig",
    "OpenAIConfig",
    "ProbeConfig",
    "ToolConfig",
    "AgentConnection",
    "ConfigurationError",
    "ElementFactory",
    "FormBuilder",
    "InputElement",
    "SelectElement",
    "AgentResponse",
    "ChatPlatform",
    "Message",
    "MessageBag",
    "ModelAuthenticationError",
    "ModelClientError",
    "ModelConnectionError",
    "ModelInfo",
    "ModelNotFoundError",
    "ToolCall",
    "ToolDefinition",
    "DEFAULT_PLATFORM",
    "PLATFORM_NAMES",
    "create_platform",
    "StaticToolsResolver",
    "Toolbox",
    "ToolError",
    "ToolExecutionError",
    "ToolLoopError",
    "ToolNotFoundError",
    "ToolProcessor",
    "ToolsResolver",
]
