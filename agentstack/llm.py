"""Shared message models, the transport interface and provider exceptions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"
TOOL = "tool"


@dataclass
class ModelInfo:
    """Basic metadata describing an available model."""

    name: str


class ModelClientError(RuntimeError):
    """Base exception raised for chat provider errors."""


class ModelConnectionError(ModelClientError):
    """Raised when the provider cannot be reached."""


class ModelAuthenticationError(ModelClientError):
    """Raised when the provider rejects the configured credentials."""


class ModelNotFoundError(ModelClientError):
    """Raised when the requested model is unavailable."""


@dataclass(frozen=True)
class ToolCall:
    """A request from the model to run one tool."""

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and JSON schema of a tool offered to the model."""

    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )


@dataclass(frozen=True)
class Message:
    role: str
    content: str = ""
    tool_calls: Tuple[ToolCall, ...] = ()
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def for_system(cls, content: str) -> "Message":
        return cls(role=SYSTEM, content=content)

    @classmethod
    def of_user(cls, content: str) -> "Message":
        return cls(role=USER, content=content)

    @classmethod
    def of_assistant(cls, content: str = "", tool_calls: Sequence[ToolCall] = ()) -> "Message":
        return cls(role=ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def of_tool_result(cls, call: ToolCall, content: str) -> "Message":
        return cls(role=TOOL, content=content, tool_call_id=call.id, name=call.name)


class MessageBag:
    """Ordered conversation handed to a transport.

    Bags are never mutated in place; :meth:`with_messages` returns a new bag.
    """

    def __init__(self, *messages: Message) -> None:
        self._messages: Tuple[Message, ...] = tuple(messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"MessageBag({len(self._messages)} messages)"

    @property
    def system(self) -> Optional[str]:
        """Joined content of the system messages, or ``None`` when there are none."""

        parts = [message.content for message in self._messages if message.role == SYSTEM]
        if not parts:
            return None
        return "\n\n".join(parts)

    def without_system(self) -> List[Message]:
        return [message for message in self._messages if message.role != SYSTEM]

    def with_messages(self, *messages: Message) -> "MessageBag":
        return MessageBag(*self._messages, *messages)

    @classmethod
    def from_iterable(cls, messages: Iterable[Message]) -> "MessageBag":
        return cls(*messages)


@dataclass
class AgentResponse:
    """Normalised reply of a single provider call."""

    content: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    model: Optional[str] = None
    raw: Any = None

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class ChatPlatform(ABC):
    """Conversational transport bound to one provider.

    Implementations translate :class:`MessageBag` into the provider request
    and map provider exceptions onto :class:`ModelClientError`.
    """

    name: str = "unknown"

    @abstractmethod
    def call(self, model: str, messages: MessageBag, **options: Any) -> AgentResponse:
        """Send *messages* to *model* and return the normalised reply."""

    @abstractmethod
    def list_models(self) -> List[ModelInfo]:
        """Return the models the provider reports as available."""
