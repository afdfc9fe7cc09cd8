"""
Line-oriented console front end for the agentic loop.

Reads one line at a time from the user, runs it through ``AgenticLoop`` and
prints the outcome.  ``exit`` (any case) or end-of-input ends the session.
No error ends the session early; a failed turn is reported and the next line
is read.
"""

from __future__ import annotations

import logging
from typing import Callable

from toolchat.conversation.history import ChatHistory
from toolchat.conversation.loop import AgenticLoop, TurnResult
from toolchat.conversation.providers import ToolDefinition

logger = logging.getLogger(__name__)

WELCOME = "Welcome to toolchat (function-calling). Type 'exit' to quit."
PROMPT = "\nYou: "
GOODBYE = "Goodbye!"
BUDGET_NOTICE = "(Hit maximum tool calls - ignoring further requests.)"


def format_turn(result: TurnResult) -> list[str]:
    """Return the console lines describing *result*."""
    if result.status == "final":
        return [f"Assistant: {result.content}"]
    if result.status == "budget_exhausted":
        return [BUDGET_NOTICE, f"Assistant (partial): {result.content}"]
    return [f"Error: {result.error}"]


class ChatConsole:
    """Interactive read-eval-print loop around one chat session.

    Attributes:
        loop: The tool-calling engine.
        history: The session history, shared across turns.
        tools: Tool definitions sent with every request.
    """

    def __init__(
        self,
        loop: AgenticLoop,
        history: ChatHistory,
        tools: list[ToolDefinition],
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self.loop = loop
        self.history = history
        self.tools = tools
        self._input = input_func
        self._output = output_func

    def run(self) -> None:
        """Run until the user types ``exit`` or input ends."""
        self._output(WELCOME)
        while True:
            try:
                line = self._input(PROMPT)
            except EOFError:
                break
            except KeyboardInterrupt:
                self._output("")
                break

            user_text = line.strip()
            if user_text.lower() == "exit":
                break
            if not user_text:
                continue

            for out in format_turn(self.handle(user_text)):
                self._output(out)

        self._output(GOODBYE)

    def handle(self, user_text: str) -> TurnResult:
        """Run a single turn and return its result."""
        result = self.loop.run_turn(user_text, self.history, self.tools)
        logger.info(
            "Turn ended with status=%s after %d tool round(s)",
            result.status,
            result.tool_rounds,
        )
        return result
