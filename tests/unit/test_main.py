"""Unit tests for toolchat.main and toolchat.config."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from toolchat.config import Settings, get_settings
from toolchat.console import ChatConsole
from toolchat.conversation.prompts import DEFAULT_SYSTEM_PROMPT
from toolchat.conversation.providers import (
    CompletionResult,
    LLMProvider,
    OllamaChatProvider,
    OpenAICompatibleProvider,
)
from toolchat.main import build_console, build_provider, main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("TOOLCHAT_MODEL", "TOOLCHAT_API", "TOOLCHAT_MAX_TOOL_CALLS", "TOOLCHAT_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.api == "openai"
        assert settings.model == "llama3.1:8b"
        assert settings.coder_model == "codellama:code"
        assert settings.max_tool_calls == 5
        assert settings.system_prompt == DEFAULT_SYSTEM_PROMPT

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("TOOLCHAT_MODEL", "qwen2.5:7b")
        monkeypatch.setenv("TOOLCHAT_MAX_TOOL_CALLS", "3")

        settings = get_settings()

        assert settings.model == "qwen2.5:7b"
        assert settings.max_tool_calls == 3

    def test_system_prompt_lists_every_tool(self) -> None:
        for name in (
            "get_time",
            "calc",
            "define_word",
            "wikipedia_titles",
            "wikipedia_search",
            "get_weather",
            "coder_llm",
        ):
            assert name in DEFAULT_SYSTEM_PROMPT


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def test_build_provider_openai() -> None:
    with patch("toolchat.conversation.providers.OpenAI"):
        provider = build_provider(Settings(_env_file=None))
    assert isinstance(provider, OpenAICompatibleProvider)


def test_build_provider_ollama() -> None:
    settings = Settings(_env_file=None, api="ollama", ollama_url="http://gpu-box:11434")

    provider = build_provider(settings)

    assert isinstance(provider, OllamaChatProvider)


def test_build_console_wires_tools_and_budget() -> None:
    provider = MagicMock(spec=LLMProvider)
    provider.complete.return_value = CompletionResult(content="Hello.")
    settings = Settings(_env_file=None, max_tool_calls=2, system_prompt="Be brief.")

    console = build_console(settings, provider=provider)

    assert isinstance(console, ChatConsole)
    assert len(console.tools) == 7
    assert console.loop.max_tool_calls == 2
    assert console.history.system_message.content == "Be brief."

    result = console.handle("hi")
    assert result.content == "Hello."
    assert provider.complete.call_args.args[1] == console.tools


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


def test_main_applies_command_line_overrides() -> None:
    with patch("toolchat.main.build_console") as build, patch("toolchat.main.logging.basicConfig"):
        assert main(["--model", "mistral", "--api", "ollama", "--base-url", "http://h:1"]) == 0

    settings = build.call_args.args[0]
    assert settings.model == "mistral"
    assert settings.api == "ollama"
    assert settings.ollama_url == "http://h:1"
    build.return_value.run.assert_called_once_with()


def test_main_debug_flag_sets_log_level() -> None:
    with patch("toolchat.main.build_console") as build, patch(
        "toolchat.main.logging.basicConfig"
    ) as basic_config:
        main(["--debug"])

    assert build.call_args.args[0].log_level == "DEBUG"
    assert basic_config.call_args.kwargs["level"] == "DEBUG"
