"""Assembly of the built-in tool set from application settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from toolchat.conversation.providers import LLMProvider
from toolchat.conversation.tools.calculator import CalculatorTool
from toolchat.conversation.tools.coder import CoderTool
from toolchat.conversation.tools.datetime_tool import DateTimeTool
from toolchat.conversation.tools.dictionary import DictionaryTool
from toolchat.conversation.tools.registry import ToolRegistry
from toolchat.conversation.tools.weather import WeatherTool
from toolchat.conversation.tools.wikipedia import WikipediaSearchTool, WikipediaTitlesTool

if TYPE_CHECKING:
    from toolchat.config import Settings


def build_default_registry(settings: Settings, provider: LLMProvider) -> ToolRegistry:
    """Register every built-in tool, configured from *settings*.

    Args:
        settings: Application settings (timeouts, URLs, modes).
        provider: Chat backend reused by the ``coder_llm`` tool.
    """
    registry = ToolRegistry()

    registry.register(
        DateTimeTool.TOOL_DEFINITION,
        DateTimeTool.Arguments,
        DateTimeTool().as_dispatcher_entry(),
    )
    registry.register(
        CalculatorTool.TOOL_DEFINITION,
        CalculatorTool.Arguments,
        CalculatorTool(mode=settings.calc_mode).as_dispatcher_entry(),
    )
    registry.register(
        DictionaryTool.TOOL_DEFINITION,
        DictionaryTool.Arguments,
        DictionaryTool().as_dispatcher_entry(),
    )

    wiki_options = {
        "api_url": settings.wikipedia_url,
        "timeout": settings.http_timeout,
        "user_agent": settings.user_agent,
    }
    registry.register(
        WikipediaTitlesTool.TOOL_DEFINITION,
        WikipediaTitlesTool.Arguments,
        WikipediaTitlesTool(**wiki_options).as_dispatcher_entry(),
    )
    registry.register(
        WikipediaSearchTool.TOOL_DEFINITION,
        WikipediaSearchTool.Arguments,
        WikipediaSearchTool(**wiki_options).as_dispatcher_entry(),
    )

    registry.register(
        WeatherTool.TOOL_DEFINITION,
        WeatherTool.Arguments,
        WeatherTool(
            timeout=settings.http_timeout,
            temperature_unit=settings.temperature_unit,
            geocoding_url=settings.geocoding_url,
            forecast_url=settings.forecast_url,
        ).as_dispatcher_entry(),
    )
    registry.register(
        CoderTool.TOOL_DEFINITION,
        CoderTool.Arguments,
        CoderTool(provider, model=settings.coder_model).as_dispatcher_entry(),
    )
    return registry
