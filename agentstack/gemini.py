"""Transport for Google Gemini through the ``google-genai`` SDK."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from .config import GeminiConfig
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


class GeminiClientError(ModelClientError):
    """Base exception raised for Gemini client errors."""


class GeminiAuthenticationError(GeminiClientError, ModelAuthenticationError):
    """Raised when Gemini rejects the API key."""


class GeminiConnectionError(GeminiClientError, ModelConnectionError):
    """Raised when the Gemini API cannot be reached."""


class GeminiModelNotFoundError(GeminiClientError, ModelNotFoundError):
    """Raised when the requested Gemini model does not exist."""


def _map_api_error(exc: genai_errors.APIError, model: Optional[str] = None) -> GeminiClientError:
    code = getattr(exc, "code", None)
    if code in (401, 403):
        return GeminiAuthenticationError("Authentication with Gemini failed.")
    if code == 404:
        return GeminiModelNotFoundError(f"Model '{model}' is not available.")
    return GeminiClientError(f"Gemini request failed ({code}): {getattr(exc, 'message', exc)}")


def _tool_payload(tools: List[ToolDefinition]) -> genai_types.Tool:
    return genai_types.Tool(
        function_declarations=[
            genai_types.FunctionDeclaration(
                name=tool.name,
                description=tool.description,
                parameters_json_schema=tool.parameters,
            )
            for tool in tools
        ]
    )


def _convert_messages(messages: List[Message]) -> List[genai_types.Content]:
    """Translate neutral messages into Gemini contents.

    Consecutive tool results share one user turn, mirroring the single model
    turn that requested them.
    """

    contents: List[genai_types.Content] = []
    pending_results: List[genai_types.Part] = []

    def flush_results() -> None:
        if pending_results:
            contents.append(genai_types.Content(role="user", parts=list(pending_results)))
            pending_results.clear()

    for message in messages:
        if message.role == TOOL:
            pending_results.append(
                genai_types.Part.from_function_response(
                    name=message.name or "",
                    response={"result": message.content},
                )
            )
            continue

        flush_results()
        if message.role == ASSISTANT:
            parts: List[genai_types.Part] = []
            if message.content:
                parts.append(genai_types.Part(text=message.content))
            for call in message.tool_calls:
                parts.append(
                    genai_types.Part(
                        function_call=genai_types.FunctionCall(
                            id=call.id, name=call.name, args=call.arguments
                        )
                    )
                )
            contents.append(genai_types.Content(role="model", parts=parts))
        else:
            contents.append(
                genai_types.Content(role="user", parts=[genai_types.Part(text=message.content)])
            )
    flush_results()
    return contents


class GeminiPlatform(ChatPlatform):
    name = "gemini"

    def __init__(self, api_key: str, config: Optional[GeminiConfig] = None) -> None:
        config = config or GeminiConfig()
        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if config.base_url:
            client_kwargs["http_options"] = genai_types.HttpOptions(base_url=config.base_url)
        self.config = config
        self._client = genai.Client(**client_kwargs)

    def list_models(self) -> List[ModelInfo]:
        try:
            models = list(self._client.models.list())
        except genai_errors.APIError as exc:
            raise _map_api_error(exc) from exc
        except httpx.HTTPError as exc:
            raise GeminiConnectionError(f"Unable to reach Gemini: {exc}") from exc
        names = []
        for item in models:
            name = str(getattr(item, "name", "") or "")
            if name:
                names.append(ModelInfo(name=name.split("/", 1)[-1] if name.startswith("models/") else name))
        return names

    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        config_kwargs: Dict[str, Any] = {}
        if messages.system:
            config_kwargs["system_instruction"] = messages.system
        tools = options.get("tools")
        if tools:
            config_kwargs["tools"] = [_tool_payload(list(tools))]
        if options.get("temperature") is not None:
            config_kwargs["temperature"] = options["temperature"]
        if options.get("max_tokens") is not None:
            config_kwargs["max_output_tokens"] = options["max_tokens"]

        try:
            response = self._client.models.generate_content(
                model=model,
                contents=_convert_messages(messages.without_system()),
                config=genai_types.GenerateContentConfig(**config_kwargs),
            )
        except genai_errors.APIError as exc:
            raise _map_api_error(exc, model) from exc
        except httpx.HTTPError as exc:
            raise GeminiConnectionError(f"Unable to reach Gemini: {exc}") from exc

        tool_calls = [
            ToolCall(
                id=str(call.id or f"call_{index}"),
                name=str(call.name or ""),
                arguments=dict(call.args or {}),
            )
            for index, call in enumerate(getattr(response, "function_calls", None) or [])
        ]
        text = "" if tool_calls else (getattr(response, "text", None) or "")
        return AgentResponse(
            content=str(text),
            tool_calls=tool_calls,
            model=getattr(response, "model_version", None) or model,
            raw=response,
        )
