"""Transport for OpenAI-compatible Chat Completions APIs."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from openai import OpenAI
from openai import APIConnectionError, AuthenticationError, NotFoundError, OpenAIError, PermissionDeniedError

from .config import OpenAIConfig
from .llm import (
    ASSISTANT,
    TOOL,
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


class OpenAIClientError(ModelClientError):
    """Base exception raised for OpenAI client errors."""


class OpenAIAuthenticationError(OpenAIClientError, ModelAuthenticationError):
    """Raised when authentication with OpenAI fails."""


class OpenAIConnectionError(OpenAIClientError, ModelConnectionError):
    """Raised when the OpenAI endpoint cannot be reached."""


class OpenAIModelNotFoundError(OpenAIClientError, ModelNotFoundError):
    """Raised when the requested OpenAI model is unavailable."""


def _tool_payload(tool: ToolDefinition) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        },
    }


def _message_payload(message: Message) -> Dict[str, Any]:
    if message.role == TOOL:
        return {"role": "tool", "tool_call_id": message.tool_call_id, "content": message.content}
    payload: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.role == ASSISTANT and message.tool_calls:
        payload["content"] = message.content or None
        payload["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": json.dumps(call.arguments)},
            }
            for call in message.tool_calls
        ]
    return payload


def _parse_tool_calls(raw_calls: Any) -> List[ToolCall]:
    calls: List[ToolCall] = []
    for raw in raw_calls or []:
        function = getattr(raw, "function", None)
        if function is None:
            continue
        arguments = getattr(function, "arguments", None) or "{}"
        try:
            parsed = json.loads(arguments)
        except ValueError as exc:
            raise OpenAIClientError(
                f"Model returned malformed arguments for tool '{function.name}'."
            ) from exc
        calls.append(ToolCall(id=str(raw.id), name=str(function.name), arguments=dict(parsed or {})))
    return calls


class OpenAIPlatform(ChatPlatform):
    name = "chatgpt"

    def __init__(self, api_key: str, config: Optional[OpenAIConfig] = None) -> None:
        config = config or OpenAIConfig()
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": config.max_retries}
        if config.base_url:
            client_kwargs["base_url"] = config.base_url
        if config.organization:
            client_kwargs["organization"] = config.organization

        self.config = config
        self._client = OpenAI(**client_kwargs)

    def list_models(self) -> List[ModelInfo]:
        try:
            response = self._client.models.list()
        except AuthenticationError as exc:
            raise OpenAIAuthenticationError("Authentication with OpenAI failed.") from exc
        except APIConnectionError as exc:
            raise OpenAIConnectionError(f"Unable to reach OpenAI: {exc}") from exc
        except OpenAIError as exc:
            raise OpenAIClientError(f"Failed to list OpenAI models: {exc}") from exc

        data = getattr(response, "data", [])
        return [ModelInfo(name=item.id) for item in data if getattr(item, "id", None)]

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        request: Dict[str, Any] = {
            "model": model,
            "messages": [_message_payload(message) for message in messages],
        }
        tools = options.get("tools")
        if tools:
            request["tools"] = [_tool_payload(tool) for tool in tools]
        if options.get("temperature") is not None:
            request["temperature"] = options["temperature"]
        if options.get("max_tokens") is not None:
            request["max_tokens"] = options["max_tokens"]

        try:
            response = self._client.chat.completions.create(**request)
        except (AuthenticationError, PermissionDeniedError) as exc:
            raise OpenAIAuthenticationError("Authentication with OpenAI failed.") from exc
        except NotFoundError as exc:
            raise OpenAIModelNotFoundError(f"Model '{model}' is not available.") from exc
        except APIConnectionError as exc:
            raise OpenAIConnectionError(f"Unable to reach OpenAI: {exc}") from exc
        except OpenAIError as exc:
            raise OpenAIClientError(f"OpenAI chat completion failed: {exc}") from exc

        choices = getattr(response, "choices", [])
        if not choices:
            return AgentResponse(model=model, raw=response)
        message = choices[0].message
        return AgentResponse(
            content=str(getattr(message, "content", None) or ""),
            tool_calls=_parse_tool_calls(getattr(message, "tool_calls", None)),
            model=getattr(response, "model", None) or model,
            raw=response,
        )
