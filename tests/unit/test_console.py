"""Unit tests for toolchat.console."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from toolchat.console import (
    BUDGET_NOTICE,
    GOODBYE,
    PROMPT,
    WELCOME,
    ChatConsole,
    format_turn,
)
from toolchat.conversation.history import ChatHistory
from toolchat.conversation.loop import AgenticLoop, TurnResult
from toolchat.conversation.providers import OllamaChatProvider


# ---------------------------------------------------------------------------
# format_turn
# ---------------------------------------------------------------------------


def test_format_final_answer() -> None:
    assert format_turn(TurnResult(status="final", content="Hi.")) == ["Assistant: Hi."]


def test_format_budget_exhausted() -> None:
    result = TurnResult(status="budget_exhausted", content="Still thinking", tool_rounds=5)
    assert format_turn(result) == [BUDGET_NOTICE, "Assistant (partial): Still thinking"]


def test_format_error() -> None:
    result = TurnResult(status="error", content="", error="connection refused")
    assert format_turn(result) == ["Error: connection refused"]


# ---------------------------------------------------------------------------
# ChatConsole
# ---------------------------------------------------------------------------


def _console(lines: list[str], results: list[TurnResult] | None = None):
    loop = MagicMock(spec=AgenticLoop)
    loop.run_turn.side_effect = results or []
    output: list[str] = []
    prompts: list[str] = []
    feed = iter(lines)

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    console = ChatConsole(
        loop=loop,
        history=ChatHistory(system_prompt="sys"),
        tools=[],
        input_func=fake_input,
        output_func=output.append,
    )
    return console, loop, output, prompts


def test_run_prints_welcome_and_goodbye_on_eof() -> None:
    console, loop, output, prompts = _console([])

    console.run()

    assert output == [WELCOME, GOODBYE]
    assert prompts == [PROMPT]
    loop.run_turn.assert_not_called()


@pytest.mark.parametrize("word", ["exit", "EXIT", "  Exit  "])
def test_exit_ends_session(word: str) -> None:
    console, loop, output, _ = _console([word, "never read"])

    console.run()

    assert output[-1] == GOODBYE
    loop.run_turn.assert_not_called()


def test_blank_lines_are_skipped() -> None:
    console, loop, _, _ = _console(["", "   ", "exit"])

    console.run()

    loop.run_turn.assert_not_called()


def test_each_line_runs_one_turn() -> None:
    results = [
        TurnResult(status="final", content="Four."),
        TurnResult(status="error", content="", error="boom"),
        TurnResult(status="final", content="Still here."),
    ]
    console, loop, output, _ = _console(["2+2?", "again", "hello"], results)

    console.run()

    assert [c.args[0] for c in loop.run_turn.call_args_list] == ["2+2?", "again", "hello"]
    assert output == [
        WELCOME,
        "Assistant: Four.",
        "Error: boom",
        "Assistant: Still here.",
        GOODBYE,
    ]


def test_turn_receives_shared_history_and_tools() -> None:
    console, loop, _, _ = _console(["hi"], [TurnResult(status="final", content="yo")])

    console.run()

    _, history, tools = loop.run_turn.call_args.args
    assert history is console.history
    assert tools is console.tools


def test_keyboard_interrupt_ends_session() -> None:
    loop = MagicMock(spec=AgenticLoop)
    output: list[str] = []

    def interrupted(prompt: str) -> str:
        raise KeyboardInterrupt

    ChatConsole(loop, ChatHistory("sys"), [], interrupted, output.append).run()

    assert output[-1] == GOODBYE


def test_malformed_endpoint_reply_does_not_end_session() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    loop = AgenticLoop(
        provider=OllamaChatProvider(transport=transport),
        tool_dispatcher=lambda name, args: "unused",
    )
    lines = iter(["hi", "still there?", "exit"])
    output: list[str] = []

    ChatConsole(loop, ChatHistory("sys"), [], lambda prompt: next(lines), output.append).run()

    assert len(output) == 4
    assert output[0] == WELCOME
    assert output[1].startswith("Error: Unexpected Ollama response shape")
    assert output[2].startswith("Error: Unexpected Ollama response shape")
    assert output[3] == GOODBYE
