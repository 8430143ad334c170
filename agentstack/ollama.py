"""HTTP transport for the Ollama REST API."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import OllamaConfig
from .llm import (
    ASSISTANT,
    TOOL,
    AgentResponse,
    ChatPlatform,
    Message,
    MessageBag,
    ModelClientError,
    ModelConnectionError,
    ModelInfo,
    ModelNotFoundError,
    ToolCall,
    ToolDefinition,
)


class OllamaClientError(ModelClientError):
    """Base exception raised for Ollama client errors."""


class OllamaConnectionError(OllamaClientError, ModelConnectionError):
    """Raised when the Ollama HTTP API cannot be reached."""


class OllamaModelNotFoundError(OllamaClientError, ModelNotFoundError):
    """Raised when the requested model is not installed on the Ollama host."""


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
    payload: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.role == ASSISTANT and message.tool_calls:
        payload["tool_calls"] = [
            {"function": {"name": call.name, "arguments": call.arguments}}
            for call in message.tool_calls
        ]
    if message.role == TOOL and message.name:
        payload["tool_name"] = message.name
    return payload


def _parse_tool_calls(raw_calls: Sequence[Dict[str, Any]]) -> List[ToolCall]:
    calls: List[ToolCall] = []
    for index, raw in enumerate(raw_calls):
        function = raw.get("function", {}) or {}
        arguments = function.get("arguments") or {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments) if arguments.strip() else {}
            except ValueError as exc:
                raise OllamaClientError(
                    f"Ollama returned malformed arguments for tool '{function.get('name')}'."
                ) from exc
        calls.append(
            ToolCall(
                id=str(raw.get("id") or f"call_{index}"),
                name=str(function.get("name", "")),
                arguments=dict(arguments),
            )
        )
    return calls


class OllamaPlatform(ChatPlatform):
    name = "ollama"

    def __init__(
        self,
        host_url: str,
        config: Optional[OllamaConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.host_url = host_url
        self.config = config or OllamaConfig()
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self.host_url.rstrip("/")

    def list_models(self) -> List[ModelInfo]:
        url = f"{self.base_url}/api/tags"
        try:
            response = self._session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise OllamaConnectionError(f"Unable to reach Ollama at {self.host_url}") from exc

        if response.status_code == 404:
            raise OllamaClientError(
                "Ollama server responded with 404 for /api/tags. "
                "Ensure the Ollama HTTP API is running."
            )

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise OllamaClientError(
                f"Unexpected Ollama response ({response.status_code}): {response.text}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise OllamaClientError("Ollama returned a model list that is not valid JSON.") from exc
        models = payload.get("models", [])
        return [ModelInfo(name=model.get("name", "")) for model in models if model.get("name")]

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        url = f"{self.base_url}/api/chat"
        payload: Dict[str, Any] = {
            "model": model,
            "messages": [_message_payload(message) for message in messages],
            "stream": False,
        }
        tools = options.get("tools")
        if tools:
            payload["tools"] = [_tool_payload(tool) for tool in tools]
        model_options: Dict[str, Any] = {}
        if options.get("temperature") is not None:
            model_options["temperature"] = options["temperature"]
        if options.get("max_tokens") is not None:
            model_options["num_predict"] = options["max_tokens"]
        if model_options:
            payload["options"] = model_options

        try:
            response = self._session.post(url, json=payload, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise OllamaConnectionError("Failed to connect to Ollama while calling /api/chat.") from exc

        if response.status_code == 404:
            raise OllamaModelNotFoundError(f"Model '{model}' is not available on Ollama.")

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise OllamaClientError(
                f"Ollama responded with status {response.status_code}: {response.text}"
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise OllamaClientError("Ollama returned a response that is not valid JSON.") from exc
        message = data.get("message", {}) or {}
        return AgentResponse(
            content=str(message.get("content", "")),
            tool_calls=_parse_tool_calls(message.get("tool_calls") or []),
            model=data.get("model", model),
            raw=data,
        )
