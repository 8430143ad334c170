"""Agent connection plugin for the host API platform.

The host calls :meth:`AgentConnection.configure` to render the settings form,
:meth:`AgentConnection.get_connection` to turn the stored settings into an
:class:`~agentstack.agent.Agent`, and :meth:`AgentConnection.ping` to check
that the agent answers.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .agent import Agent
from .catalog import get_model_catalog
from .config import AppConfig, ConnectionConfig
from .form import ElementFactory, FormBuilder
from .llm import Message, MessageBag, ModelClientError
from .logging import get_logger
from .platforms import PLATFORM_NAMES, create_platform, needs_api_key
from .tools import StaticToolsResolver, SupportsTools, ToolProcessor, ToolsResolver

LOGGER = get_logger(__name__)


class ConfigurationError(ValueError):
    """Raised when the stored connection settings are incomplete."""


class AgentConnection:
    def __init__(
        self,
        tools: Optional[ToolsResolver] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.tools = tools or StaticToolsResolver()
        self.config = config or AppConfig()

    def get_name(self) -> str:
        return "Agent"

    def get_connection(self, config: Union[ConnectionConfig, Mapping[str, Any]]) -> Agent:
        """Validate *config* and build an agent for it.

        Raises :class:`ConfigurationError` before any client is created when
        the model, the API key or the URL is missing.
        """

        if not isinstance(config, ConnectionConfig):
            config = ConnectionConfig.from_mapping(config)

        if not config.model:
            raise ConfigurationError("Provided no model")

        requires_key = needs_api_key(config.platform)
        if requires_key and not config.api_key:
            raise ConfigurationError("Provided no api key")
        if not requires_key and not config.url:
            raise ConfigurationError("Provided no url")

        platform = create_platform(
            config.platform,
            api_key=config.api_key,
            url=config.url,
            settings=self.config,
        )

        toolbox = self.tools.resolve()
        if isinstance(toolbox, SupportsTools):
            platform = ToolProcessor(platform, toolbox, max_rounds=self.config.tools.max_rounds)

        LOGGER.debug("Built %s agent for model %s", platform.name, config.model)
        return Agent(platform, config.model)

    def configure(self, builder: FormBuilder, element_factory: ElementFactory) -> None:
        models = {}
        for platform, display_name in PLATFORM_NAMES.items():
            catalog = get_model_catalog(platform, self.config)
            for model_name in catalog.get_models():
                models[model_name] = f"{display_name} - {model_name}"

        builder.add(element_factory.new_select("platform", "Type", PLATFORM_NAMES, "The agent type"))
        builder.add(element_factory.new_select("model", "Model", models, "The selected model"))
        builder.add(element_factory.new_input("api_key", "Password", "password", "The API key"))
        builder.add(
            element_factory.new_input(
                "url",
                "Url",
                "text",
                "For Ollama provide an url of the host i.e. http://localhost:11434",
            )
        )

    def ping(self, connection: Any) -> bool:
        """Return whether *connection* answers a short test conversation.

        Only provider errors count as a failed ping; anything else propagates.
        """

        if not isinstance(connection, Agent):
            return False

        messages = MessageBag(
            Message.for_system(self.config.probe.system_prompt),
            Message.of_user(self.config.probe.user_prompt),
        )
        try:
            connection.call(messages)
        except ModelClientError as exc:
            LOGGER.warning("Ping to %s model %s failed: %s", connection.provider, connection.model, exc)
            return False
        return True
