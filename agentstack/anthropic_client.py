"""Transport for the Anthropic Messages API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import anthropic
from anthropic import Anthropic

from .config import AnthropicConfig
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


class AnthropicClientError(ModelClientError):
    """Base exception raised for Anthropic client errors."""


class AnthropicAuthenticationError(AnthropicClientError, ModelAuthenticationError):
    """Raised when Anthropic rejects the API key."""


class AnthropicConnectionError(AnthropicClientError, ModelConnectionError):
    """Raised when the Anthropic API cannot be reached."""


class AnthropicModelNotFoundError(AnthropicClientError, ModelNotFoundError):
    """Raised when the requested Claude model does not exist."""


def _tool_payload(tool: ToolDefinition) -> Dict[str, Any]:
    return {"name": tool.name, "description": tool.description, "input_schema": tool.parameters}


def _convert_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Translate neutral messages into Anthropic turns.

    Tool results travel as ``tool_result`` blocks inside a user turn; results
    that follow each other are merged into the same turn.
    """

    converted: List[Dict[str, Any]] = []
    for message in messages:
        if message.role == TOOL:
            block = {
                "type": "tool_result",
                "tool_use_id": message.tool_call_id,
                "content": message.content,
            }
            previous = converted[-1] if converted else None
            if (
                previous is not None
                and previous["role"] == "user"
                and isinstance(previous["content"], list)
                and all(part.get("type") == "tool_result" for part in previous["content"])
            ):
                previous["content"].append(block)
            else:
                converted.append({"role": "user", "content": [block]})
            continue

        if message.role == ASSISTANT and message.tool_calls:
            blocks: List[Dict[str, Any]] = []
            if message.content:
                blocks.append({"type": "text", "text": message.content})
            for call in message.tool_calls:
                blocks.append(
                    {"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments}
                )
            converted.append({"role": "assistant", "content": blocks})
            continue

        converted.append({"role": message.role, "content": message.content})
    return converted


class AnthropicPlatform(ChatPlatform):
    name = "anthropic"

    def __init__(self, api_key: str, config: Optional[AnthropicConfig] = None) -> None:
        config = config or AnthropicConfig()
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": config.max_retries}
        if config.base_url:
            client_kwargs["base_url"] = config.base_url
        self.config = config
        self._client = Anthropic(**client_kwargs)

    def list_models(self) -> List[ModelInfo]:
        try:
            page = self._client.models.list()
        except anthropic.AuthenticationError as exc:
            raise AnthropicAuthenticationError("Authentication with Anthropic failed.") from exc
        except anthropic.APIConnectionError as exc:
            raise AnthropicConnectionError(f"Unable to reach Anthropic: {exc}") from exc
        except anthropic.AnthropicError as exc:
            raise AnthropicClientError(f"Failed to list Anthropic models: {exc}") from exc
        return [ModelInfo(name=item.id) for item in getattr(page, "data", []) if getattr(item, "id", None)]

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        request: Dict[str, Any] = {
            "model": model,
            "max_tokens": options.get("max_tokens") or self.config.max_tokens,
            "messages": _convert_messages(messages.without_system()),
        }
        if messages.system:
            request["system"] = messages.system
        tools = options.get("tools")
        if tools:
            request["tools"] = [_tool_payload(tool) for tool in tools]
        if options.get("temperature") is not None:
            request["temperature"] = options["temperature"]

        try:
            response = self._client.messages.create(**request)
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            raise AnthropicAuthenticationError("Authentication with Anthropic failed.") from exc
        except anthropic.NotFoundError as exc:
            raise AnthropicModelNotFoundError(f"Model '{model}' is not available.") from exc
        except anthropic.APIConnectionError as exc:
            raise AnthropicConnectionError(f"Unable to reach Anthropic: {exc}") from exc
        except anthropic.AnthropicError as exc:
            raise AnthropicClientError(f"Anthropic request failed: {exc}") from exc

        text_parts: List[str] = []
        tool_calls: List[ToolCall] = []
        for block in getattr(response, "content", None) or []:
            block_type = getattr(block, "type", None)
            if block_type == "text":
                text_parts.append(str(block.text))
            elif block_type == "tool_use":
                tool_calls.append(
                    ToolCall(id=str(block.id), name=str(block.name), arguments=dict(block.input or {}))
                )
        return AgentResponse(
            content="".join(text_parts),
            tool_calls=tool_calls,
            model=getattr(response, "model", None) or model,
            raw=response,
        )
