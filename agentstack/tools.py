"""Toolsets and the processor that lets an agent call them."""

from __future__ import annotations

import inspect
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, get_type_hints, runtime_checkable

from .llm import (
    AgentResponse,
    ChatPlatform,
    Message,
    MessageBag,
    ModelClientError,
    ModelInfo,
    ToolCall,
    ToolDefinition,
)
from .logging import get_logger

LOGGER = get_logger(__name__)

_JSON_TYPES = {str: "string", int: "integer", float: "number", bool: "boolean", list: "array", dict: "object"}


class ToolError(ModelClientError):
    """Base exception for tool lookups and execution."""


class ToolNotFoundError(ToolError):
    """Raised when the model asks for a tool the toolbox does not have."""


class ToolExecutionError(ToolError):
    """Raised when a tool fails while handling a call."""


class ToolLoopError(ToolError):
    """Raised when the model keeps requesting tools past the configured limit."""


@runtime_checkable
class SupportsTools(Protocol):
    """What the tool processor needs from a toolset."""

    def get_tools(self) -> Sequence[ToolDefinition]:
        ...

    def execute(self, call: ToolCall) -> str:
        ...


class ToolsResolver(Protocol):
    """Supplies the toolset for new connections, or ``None`` when there is none."""

    def resolve(self) -> Optional[SupportsTools]:
        ...


class StaticToolsResolver:
    """Resolver that always returns the toolbox it was created with."""

    def __init__(self, toolbox: Optional[SupportsTools] = None) -> None:
        self.toolbox = toolbox

    def resolve(self) -> Optional[SupportsTools]:
        return self.toolbox


def _infer_parameters(func: Callable[..., Any]) -> Dict[str, Any]:
    try:
        hints = get_type_hints(func)
    except (NameError, TypeError):
        hints = {}
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, parameter in inspect.signature(func).parameters.items():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation = hints.get(name, parameter.annotation)
        properties[name] = {"type": _JSON_TYPES.get(annotation, "string")}
        if parameter.default is inspect.Parameter.empty:
            required.append(name)
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


@dataclass
class _RegisteredTool:
    definition: ToolDefinition
    handler: Callable[..., Any]


class Toolbox:
    """In-memory registry of callables exposed to the model."""

    def __init__(self) -> None:
        self._tools: Dict[str, _RegisteredTool] = {}

    def register(
        self,
        handler: Callable[..., Any],
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> ToolDefinition:
        tool_name = name or handler.__name__
        definition = ToolDefinition(
            name=tool_name,
            description=description if description is not None else inspect.getdoc(handler) or "",
            parameters=parameters if parameters is not None else _infer_parameters(handler),
        )
        self._tools[tool_name] = _RegisteredTool(definition, handler)
        return definition

    def tool(
        self,
        name: Optional[str] = None,
        *,
        description: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.register(handler, name=name, description=description, parameters=parameters)
            return handler

        return decorator

    def get_tools(self) -> List[ToolDefinition]:
        return [registered.definition for registered in self._tools.values()]

    def execute(self, call: ToolCall) -> str:
        registered = self._tools.get(call.name)
        if registered is None:
            raise ToolNotFoundError(f"Tool '{call.name}' is not registered.")
        try:
            result = registered.handler(**call.arguments)
        except Exception as exc:
            raise ToolExecutionError(f"Tool '{call.name}' failed: {exc}") from exc
        if isinstance(result, str):
            return result
        return json.dumps(result, default=str)

    def __len__(self) -> int:
        return len(self._tools)


class ToolProcessor(ChatPlatform):
    """Transport decorator that runs tool calls through a toolset.

    The outbound request gets the toolset definitions attached. Each inbound
    response that asks for tools is answered with the tool results and sent
    back, until the model replies without tool calls.
    """

    def __init__(self, platform: ChatPlatform, toolbox: SupportsTools, *, max_rounds: int = 8) -> None:
        self.platform = platform
        self.toolbox = toolbox
        self.max_rounds = max_rounds

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.platform.name

    def list_models(self) -> List[ModelInfo]:
        return self.platform.list_models()

    def process_input(self, options: Dict[str, Any]) -> Dict[str, Any]:
        processed = dict(options)
        if not processed.get("tools"):
            tools = list(self.toolbox.get_tools())
            if tools:
                processed["tools"] = tools
        return processed

    def process_output(
        self,
        model: str,
        messages: MessageBag,
        response: AgentResponse,
        options: Dict[str, Any],
    ) -> AgentResponse:
        conversation = messages
        rounds = 0
        while response.has_tool_calls:
            if rounds >= self.max_rounds:
                raise ToolLoopError(
                    f"Model '{model}' requested tools for more than {self.max_rounds} rounds."
                )
            rounds += 1
            results = []
            for call in response.tool_calls:
                LOGGER.debug("Running tool %s for model %s", call.name, model)
                results.append(Message.of_tool_result(call, self.toolbox.execute(call)))
            conversation = conversation.with_messages(
                Message.of_assistant(response.content, response.tool_calls), *results
            )
            response = self.platform.call(model, conversation, **options)
        return response

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        processed = self.process_input(options)
        response = self.platform.call(model, messages, **processed)
        return self.process_output(model, messages, response, processed)
