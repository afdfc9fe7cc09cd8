"""
Conversation history for a single chat session.

``ChatHistory`` is an append-only, ordered list of role-tagged ``Message``
objects.  It always starts with exactly one system message; everything after
it is user, assistant and tool messages in the order they happened.  Nothing
is persisted; the history lives as long as the session.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterator, Literal

logger = logging.getLogger(__name__)

Role = Literal["system", "user", "assistant", "tool"]

_ROLES: frozenset[str] = frozenset({"system", "user", "assistant", "tool"})


@dataclass(frozen=True)
class Message:
    """A single role/content pair in the conversation.

    Attributes:
        role: ``"system"``, ``"user"``, ``"assistant"`` or ``"tool"``.
        content: The message text.
        tool_calls: For assistant messages that requested tools, the
            requests as ``(id, name, arguments)`` triples.  Empty otherwise.
        tool_call_id: For tool messages, the id of the request answered.
    """

    role: Role
    content: str
    tool_calls: tuple[tuple[str, str, dict[str, Any]], ...] = ()
    tool_call_id: str | None = None

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")

    def to_openai_format(self) -> dict[str, Any]:
        """Serialise to the OpenAI chat message format."""
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call_id,
                    "type": "function",
                    "function": {"name": name, "arguments": json.dumps(arguments)},
                }
                for call_id, name, arguments in self.tool_calls
            ]
        if self.tool_call_id is not None:
            message["tool_call_id"] = self.tool_call_id
        return message

    def to_ollama_format(self) -> dict[str, Any]:
        """Serialise to Ollama's native ``/api/chat`` message format.

        Ollama expects tool-call arguments as an object rather than a JSON
        string and has no notion of call ids.
        """
        message: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {"function": {"name": name, "arguments": arguments}}
                for _call_id, name, arguments in self.tool_calls
            ]
        return message


class ChatHistory:
    """Ordered, append-only message history starting with one system message.

    Usage::

        history = ChatHistory(system_prompt="You are helpful.")
        history.append(Message(role="user", content="Hi"))
        provider.complete(history.messages(), tools)
    """

    def __init__(self, system_prompt: str) -> None:
        self._messages: list[Message] = [Message(role="system", content=system_prompt)]

    def append(self, message: Message) -> None:
        """Append *message* to the end of the history.

        Raises:
            ValueError: If *message* is a system message; the only system
                message is the one the history was created with.
        """
        if message.role == "system":
            raise ValueError("ChatHistory already has its system message.")
        self._messages.append(message)
        logger.debug("History +%s (%d messages)", message.role, len(self._messages))

    def add_user(self, text: str) -> Message:
        message = Message(role="user", content=text)
        self.append(message)
        return message

    def add_assistant(self, text: str) -> Message:
        message = Message(role="assistant", content=text)
        self.append(message)
        return message

    def messages(self) -> list[Message]:
        """Return a snapshot of the history (a new list, same messages)."""
        return list(self._messages)

    @property
    def system_message(self) -> Message:
        return self._messages[0]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))
