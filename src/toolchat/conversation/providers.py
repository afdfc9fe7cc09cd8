"""
LLM Provider abstractions for the toolchat conversation package.

Defines the `LLMProvider` Protocol so the `AgenticLoop` can work with any
chat backend without being tied to a specific vendor or SDK.

Two concrete implementations are provided:

- `OpenAICompatibleProvider` uses the ``openai`` SDK against any
  OpenAI-compatible base URL (Ollama's ``/v1``, OpenAI, LiteLLM, ...).
- `OllamaChatProvider` speaks Ollama's native ``/api/chat`` JSON protocol
  directly over ``httpx``.

Also provides the exception hierarchy for chat endpoint errors.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx
from openai import APIConnectionError, APIError, APIStatusError, OpenAI, RateLimitError

from toolchat.conversation.history import Message

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exception hierarchy
# ---------------------------------------------------------------------------


class LLMError(Exception):
    """Base exception for all LLM provider errors."""


class LLMRateLimitError(LLMError):
    """Raised when the LLM API returns a rate-limit (429) response."""


class LLMConnectionError(LLMError):
    """Raised when the LLM API endpoint cannot be reached."""


class LLMResponseError(LLMError):
    """Raised when the endpoint answers with a body that cannot be decoded."""


class LLMAPIError(LLMError):
    """Raised for other LLM API errors (e.g., 5xx, authentication failures).

    Attributes:
        status_code: HTTP status code from the API, or ``None`` if unavailable.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Core data types
# ---------------------------------------------------------------------------


@dataclass
class ToolDefinition:
    """Describes a callable tool available to the LLM.

    Attributes:
        name: The tool's unique name (used by the LLM to invoke it).
        description: Human-readable description shown in the LLM's tool prompt.
        parameters: JSON Schema dict describing the tool's input parameters.
    """

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_openai_format(self) -> dict[str, Any]:
        """Serialise to OpenAI tool definition format (also accepted by Ollama)."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass
class ToolCall:
    """A tool invocation requested by the LLM.

    Attributes:
        id: Call ID returned by the LLM (used to correlate the result).
        name: Name of the tool to invoke.
        arguments: Parsed JSON arguments dict.
    """

    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class CompletionResult:
    """Result of a single LLM completion call.

    The loop checks `tool_calls` to decide whether the content is final or
    whether tools must be dispatched first.

    Attributes:
        content: Assistant text; may be empty when tools were requested.
        tool_calls: Requested tool invocations, in the order the model listed
            them.
        finish_reason: Finish reason reported by the endpoint, if any.
    """

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: str | None = None


# ---------------------------------------------------------------------------
# LLMProvider Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM backends used by AgenticLoop and the coder tool."""

    def complete(
        self,
        messages: list[Message],
        tools: list[ToolDefinition],
        model: str | None = None,
    ) -> CompletionResult:
        """Send a completion request to the LLM.

        Args:
            messages: The full conversation history.
            tools: The available tool definitions (may be empty).
            model: Model override for this call; the provider's configured
                model is used when ``None``.

        Returns:
            A `CompletionResult` describing the LLM's response.

        Raises:
            LLMRateLimitError: If the API returns a 429 rate-limit response.
            LLMConnectionError: If the API endpoint cannot be reached.
            LLMResponseError: If the response body cannot be decoded.
            LLMAPIError: For other API-level failures.
        """
        ...


def _parse_arguments(raw: Any) -> dict[str, Any]:
    """Normalise tool-call arguments to a dict.

    Endpoints send either a JSON-encoded string (OpenAI) or an object
    (Ollama).  Anything that does not decode to an object becomes ``{}``.
    """
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Could not decode tool arguments: %r", raw)
            return {}
        if isinstance(decoded, dict):
            return decoded
    return {}


# ---------------------------------------------------------------------------
# OpenAI-compatible provider
# ---------------------------------------------------------------------------


class OpenAICompatibleProvider:
    """LLM provider backed by any OpenAI-compatible endpoint.

    Works with:
    - Ollama (``http://localhost:11434/v1``)
    - OpenAI (``https://api.openai.com/v1``)
    - Any other OpenAI-compatible API

    Attributes:
        base_url: The API base URL.
        model: The default model identifier.
        temperature: Sampling temperature (0.0-2.0).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "llama3.1:8b",
        api_key: str = "ollama",
        temperature: float = 0.7,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self._client = OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)

    def complete(
        self,
        messages: list[Message],
        tools: list[ToolDefinition],
        model: str | None = None,
    ) -> CompletionResult:
        """Call the LLM and return a structured `CompletionResult`.

        Raises:
            LLMRateLimitError: If the API returns a 429 response.
            LLMConnectionError: If the API endpoint cannot be reached.
            LLMResponseError: If the body cannot be decoded or carries no
                usable choices.
            LLMAPIError: For other API-level failures (e.g. 4xx/5xx).
        """
        model = model or self.model
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": [m.to_openai_format() for m in messages],
            "temperature": self.temperature,
            "stream": False,
        }
        if tools:
            kwargs["tools"] = [t.to_openai_format() for t in tools]

        logger.debug(
            "LLM request: model=%s, messages=%d, tools=%d",
            model,
            len(messages),
            len(tools),
        )

        try:
            response = self._client.chat.completions.create(**kwargs)
        except RateLimitError as exc:
            logger.warning("LLM rate limit exceeded: %s", exc)
            raise LLMRateLimitError(f"Rate limit exceeded: {exc}") from exc
        except APIConnectionError as exc:
            logger.error("LLM connection failed: %s", exc)
            raise LLMConnectionError(f"Could not connect to LLM endpoint: {exc}") from exc
        except APIStatusError as exc:
            logger.error("LLM API error %d: %s", exc.status_code, exc)
            raise LLMAPIError(
                f"LLM API returned status {exc.status_code}: {exc}",
                status_code=exc.status_code,
            ) from exc
        except APIError as exc:
            logger.error("LLM API error: %s", exc)
            raise LLMAPIError(f"LLM API error: {exc}") from exc
        except ValueError as exc:
            logger.error("LLM response body could not be decoded: %s", exc)
            raise LLMResponseError(f"JSON decode error: {exc}") from exc

        try:
            return self._parse_response(response)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.error("Unreadable LLM response: %r", response)
            raise LLMResponseError(f"Unreadable LLM response: {exc}") from exc

    @staticmethod
    def _parse_response(response: Any) -> CompletionResult:
        if not response.choices:
            raise LLMResponseError("LLM response contained no choices")

        choice = response.choices[0]
        message = choice.message

        tool_calls: list[ToolCall] = []
        for index, tc in enumerate(message.tool_calls or []):
            tool_calls.append(
                ToolCall(
                    id=tc.id or f"call_{index}",
                    name=tc.function.name,
                    arguments=_parse_arguments(tc.function.arguments),
                )
            )

        logger.debug(
            "LLM response: finish_reason=%s, tool_calls=%d",
            choice.finish_reason,
            len(tool_calls),
        )

        return CompletionResult(
            content=message.content or "",
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason,
        )


# ---------------------------------------------------------------------------
# Ollama native provider
# ---------------------------------------------------------------------------


class OllamaChatProvider:
    """LLM provider speaking Ollama's native ``POST /api/chat`` protocol.

    Request body: ``{"model", "messages", "tools", "stream": false}``.
    Response body: ``{"message": {"content", "tool_calls": [{"function":
    {"name", "arguments"}}]}}``.

    Attributes:
        base_url: Ollama server root, e.g. ``http://localhost:11434``.
        model: The default model identifier.
        temperature: Sampling temperature passed through ``options``.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.7,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    def complete(
        self,
        messages: list[Message],
        tools: list[ToolDefinition],
        model: str | None = None,
    ) -> CompletionResult:
        model = model or self.model
        payload: dict[str, Any] = {
            "model": model,
            "messages": [m.to_ollama_format() for m in messages],
            "stream": False,
            "options": {"temperature": self.temperature},
        }
        if tools:
            payload["tools"] = [t.to_openai_format() for t in tools]

        logger.debug(
            "Ollama request: model=%s, messages=%d, tools=%d",
            model,
            len(messages),
            len(tools),
        )

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(f"{self.base_url}/api/chat", json=payload)
        except httpx.TransportError as exc:
            logger.error("Ollama connection failed: %s", exc)
            raise LLMConnectionError(f"Error POSTing to Ollama: {exc}") from exc

        if response.status_code == 429:
            raise LLMRateLimitError(f"Rate limit exceeded: {response.text}")
        if response.status_code != 200:
            logger.error("Ollama API error %d: %s", response.status_code, response.text)
            raise LLMAPIError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(
                f"JSON decode error: {exc}\nRaw: {response.text}"
            ) from exc

        if not isinstance(data, dict):
            raise LLMResponseError(f"Unexpected Ollama response shape: {response.text}")
        message = data.get("message") or {}
        if not isinstance(message, dict):
            raise LLMResponseError(f"Unexpected Ollama response shape: {response.text}")

        raw_calls = message.get("tool_calls") or []
        if not isinstance(raw_calls, list):
            raise LLMResponseError(f"Unexpected tool_calls in Ollama response: {raw_calls!r}")

        tool_calls: list[ToolCall] = []
        for index, tc in enumerate(raw_calls):
            function = tc.get("function") if isinstance(tc, dict) else None
            if not isinstance(function, dict):
                raise LLMResponseError(f"Malformed tool call in Ollama response: {tc!r}")
            tool_calls.append(
                ToolCall(
                    id=tc.get("id") or f"call_{index}",
                    name=function.get("name") or "",
                    arguments=_parse_arguments(function.get("arguments")),
                )
            )

        return CompletionResult(
            content=message.get("content") or "",
            tool_calls=tool_calls,
            finish_reason=data.get("done_reason"),
        )
