"""
Built-in tools for the toolchat agentic loop.

Each tool module exposes:
- A tool class with a synchronous implementation.
- A ``TOOL_DEFINITION`` attribute (``ToolDefinition``) advertised to the LLM.
- An ``Arguments`` model (``ToolArguments``) the raw arguments are validated
  against.
- An ``as_dispatcher_entry()`` method returning a handler for ``ToolRegistry``.

Quick-start example::

    from toolchat.conversation.tools import ToolRegistry, WeatherTool

    registry = ToolRegistry()
    weather = WeatherTool()
    registry.register(
        WeatherTool.TOOL_DEFINITION, WeatherTool.Arguments, weather.as_dispatcher_entry()
    )
    dispatcher = registry.build_dispatcher()

``build_default_registry(settings, provider)`` registers the full set.
"""

from toolchat.conversation.tools.builtin import build_default_registry
from toolchat.conversation.tools.calculator import CalculatorTool
from toolchat.conversation.tools.coder import CoderTool
from toolchat.conversation.tools.datetime_tool import DateTimeTool
from toolchat.conversation.tools.dictionary import DictionaryTool
from toolchat.conversation.tools.registry import (
    UNKNOWN_TOOL_RESULT,
    ToolArguments,
    ToolHandler,
    ToolRegistry,
)
from toolchat.conversation.tools.weather import WeatherTool
from toolchat.conversation.tools.wikipedia import WikipediaSearchTool, WikipediaTitlesTool

__all__ = [
    "CalculatorTool",
    "CoderTool",
    "DateTimeTool",
    "DictionaryTool",
    "ToolArguments",
    "ToolHandler",
    "ToolRegistry",
    "UNKNOWN_TOOL_RESULT",
    "WeatherTool",
    "WikipediaSearchTool",
    "WikipediaTitlesTool",
    "build_default_registry",
]
