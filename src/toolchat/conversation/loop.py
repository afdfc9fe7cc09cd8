"""
AgenticLoop: the tool-calling engine for toolchat.

This module implements the core behaviour of the chat client: calling the
LLM, dispatching the tool calls it requests, feeding results back, and
repeating until the LLM produces a plain text response or the per-turn tool
budget runs out.

Everything is synchronous.  Multiple tool calls in one response are
dispatched one after another, in the order the model listed them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal

from toolchat.conversation.history import ChatHistory, Message
from toolchat.conversation.providers import (
    CompletionResult,
    LLMError,
    LLMProvider,
    ToolCall,
    ToolDefinition,
)

logger = logging.getLogger(__name__)

# Callable type for tool dispatcher functions.
# Receives (tool_name, tool_arguments) and returns a string result.
ToolDispatcher = Callable[[str, dict[str, Any]], str]

TurnStatus = Literal["final", "budget_exhausted", "error"]

DEFAULT_MAX_TOOL_CALLS = 5

# Tool results longer than this are truncated in debug logs.
_LOG_RESULT_CHARS = 100


@dataclass
class TurnResult:
    """Outcome of one user turn.

    Attributes:
        status: ``"final"`` when the model answered in plain text,
            ``"budget_exhausted"`` when it kept asking for tools past the
            budget, ``"error"`` when the chat endpoint failed.
        content: Final text, partial text, or ``""`` on error.
        tool_rounds: Number of tool-dispatch rounds performed this turn.
        error: Error description when ``status == "error"``.
    """

    status: TurnStatus
    content: str
    tool_rounds: int = 0
    error: str | None = None


class AgenticLoop:
    """Executes the LLM + tool-calling loop for one conversation turn.

    Typical usage::

        history = ChatHistory(system_prompt="You are helpful.")
        loop = AgenticLoop(provider=my_provider, tool_dispatcher=registry.dispatch)
        result = loop.run_turn("What is the weather in Kansas?", history, tools)

    Attributes:
        provider: The LLM backend (any `LLMProvider` implementation).
        tool_dispatcher: Callable ``(name, args) -> result_str`` that
            executes tool calls.
        max_tool_calls: Maximum number of tool-dispatch rounds per turn.
            A response that requests tools once the budget is spent ends the
            turn without dispatching.
    """

    def __init__(
        self,
        provider: LLMProvider,
        tool_dispatcher: ToolDispatcher,
        max_tool_calls: int = DEFAULT_MAX_TOOL_CALLS,
    ) -> None:
        if max_tool_calls < 0:
            raise ValueError("max_tool_calls must not be negative.")
        self.provider = provider
        self.tool_dispatcher = tool_dispatcher
        self.max_tool_calls = max_tool_calls

    def run_turn(
        self,
        user_text: str,
        history: ChatHistory,
        tools: list[ToolDefinition] | None = None,
    ) -> TurnResult:
        """Run one conversation turn.

        The user message, any assistant tool requests, tool results and the
        final assistant answer are appended to *history* as they happen.  On
        an endpoint error the turn is abandoned and *history* keeps whatever
        was appended so far.

        Args:
            user_text: The user's input line.
            history: The session history; mutated in place.
            tools: Tool definitions available for this turn.

        Returns:
            A `TurnResult` describing how the turn ended.
        """
        tools = tools or []
        history.add_user(user_text)

        tool_rounds = 0
        turn_start = time.monotonic()

        while True:
            llm_t0 = time.monotonic()
            try:
                result: CompletionResult = self.provider.complete(history.messages(), tools)
            except LLMError as exc:
                logger.error("Chat endpoint failed: %s", exc)
                return TurnResult(
                    status="error", content="", tool_rounds=tool_rounds, error=str(exc)
                )
            logger.debug(
                "LLM call took %.3fs (tool_calls=%d)",
                time.monotonic() - llm_t0,
                len(result.tool_calls),
            )

            if not result.tool_calls:
                history.add_assistant(result.content)
                logger.info(
                    "Turn complete after %d tool round(s) in %.3fs",
                    tool_rounds,
                    time.monotonic() - turn_start,
                )
                return TurnResult(status="final", content=result.content, tool_rounds=tool_rounds)

            if tool_rounds >= self.max_tool_calls:
                logger.warning(
                    "Tool budget of %d exhausted; ignoring %d further request(s)",
                    self.max_tool_calls,
                    len(result.tool_calls),
                )
                return TurnResult(
                    status="budget_exhausted",
                    content=result.content,
                    tool_rounds=tool_rounds,
                )
            tool_rounds += 1

            history.append(
                Message(
                    role="assistant",
                    content=result.content,
                    tool_calls=tuple((tc.id, tc.name, tc.arguments) for tc in result.tool_calls),
                )
            )
            for tc in result.tool_calls:
                history.append(self._dispatch(tc))

    def _dispatch(self, tc: ToolCall) -> Message:
        """Run one tool call and wrap its result in a tool-role message."""
        logger.debug("Model requested tool %r with args: %s", tc.name, tc.arguments)
        try:
            result_str = self.tool_dispatcher(tc.name, tc.arguments)
        except Exception as exc:
            logger.error("Tool %r failed: %s", tc.name, exc, exc_info=True)
            result_str = f"Error: {exc}"

        if len(result_str) > _LOG_RESULT_CHARS:
            logger.debug("Tool %r result: %s...", tc.name, result_str[:_LOG_RESULT_CHARS])
        else:
            logger.debug("Tool %r result: %s", tc.name, result_str)

        return Message(
            role="tool",
            content=f"Tool '{tc.name}' result: {result_str}",
            tool_call_id=tc.id,
        )
