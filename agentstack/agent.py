"""The agent client handed to the host platform."""

from __future__ import annotations

from typing import Any, Iterable, Union

from .llm import AgentResponse, ChatPlatform, Message, MessageBag


class Agent:
    """A conversational client bound to one transport and one model.

    Agents keep no conversation state; every :meth:`call` is independent.
    """

    def __init__(self, platform: ChatPlatform, model: str) -> None:
        self.platform = platform
        self.model = model

    @property
    def provider(self) -> str:
        return self.platform.name

    def call(self, messages: Union[MessageBag, Iterable[Message]], **options: Any) -> AgentResponse:
        if not isinstance(messages, MessageBag):
            messages = MessageBag.from_iterable(messages)
        return self.platform.call(self.model, messages, **options)

    def ask(self, prompt: str, *, system: str | None = None, **options: Any) -> str:
        """Send a single user prompt and return the reply text."""

        bag = MessageBag(Message.for_system(system)) if system else MessageBag()
        return self.call(bag.with_messages(Message.of_user(prompt)), **options).content

    def __repr__(self) -> str:
        return f"Agent(provider={self.provider!r}, model={self.model!r})"
