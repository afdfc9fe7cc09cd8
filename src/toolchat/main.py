"""
toolchat - Main Entry Point.

Loads configuration, configures logging, builds the LLM provider, the tool
registry and the agentic loop, and hands control to the console.

Architecture:
    - config.py: Configuration management
    - conversation/providers.py: Chat endpoint clients
    - conversation/loop.py: Tool-calling loop
    - conversation/tools/: Tool implementations and registry
    - console.py: Interactive console
    - main.py: Orchestration and entry point
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from toolchat.config import Settings, get_settings
from toolchat.console import ChatConsole
from toolchat.conversation.history import ChatHistory
from toolchat.conversation.loop import AgenticLoop
from toolchat.conversation.providers import (
    LLMProvider,
    OllamaChatProvider,
    OpenAICompatibleProvider,
)
from toolchat.conversation.tools import build_default_registry

logger = logging.getLogger(__name__)


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolchat",
        description="Command-line chat client with tool calling",
    )
    parser.add_argument(
        "--model",
        default=settings.model,
        help=f"Chat model (default: {settings.model})",
    )
    parser.add_argument(
        "--api",
        choices=["openai", "ollama"],
        default=settings.api,
        help=f"Chat endpoint protocol (default: {settings.api})",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Endpoint URL; overrides TOOLCHAT_BASE_URL or TOOLCHAT_OLLAMA_URL",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def build_provider(settings: Settings) -> LLMProvider:
    """Create the chat backend selected by ``settings.api``."""
    if settings.api == "ollama":
        return OllamaChatProvider(
            base_url=settings.ollama_url,
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.http_timeout,
        )
    return OpenAICompatibleProvider(
        base_url=settings.base_url,
        model=settings.model,
        api_key=settings.api_key,
        temperature=settings.temperature,
        timeout=settings.http_timeout,
    )


def build_console(settings: Settings, provider: LLMProvider | None = None) -> ChatConsole:
    """Wire provider, tools, loop and history into a ready-to-run console."""
    provider = provider or build_provider(settings)
    registry = build_default_registry(settings, provider)
    loop = AgenticLoop(
        provider=provider,
        tool_dispatcher=registry.build_dispatcher(),
        max_tool_calls=settings.max_tool_calls,
    )
    return ChatConsole(
        loop=loop,
        history=ChatHistory(system_prompt=settings.system_prompt),
        tools=registry.get_definitions(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Console script entry point."""
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    overrides: dict[str, object] = {"model": args.model, "api": args.api}
    if args.base_url:
        overrides["ollama_url" if args.api == "ollama" else "base_url"] = args.base_url
    if args.debug:
        overrides["log_level"] = "DEBUG"
    settings = settings.model_copy(update=overrides)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Using %s endpoint with model %s", settings.api, settings.model)

    build_console(settings).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
