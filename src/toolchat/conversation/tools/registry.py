"""
Tool registry for the toolchat agentic loop.

Provides ``ToolRegistry``, a container mapping tool names to their
definition, a typed argument model and a handler, and building a dispatcher
callable for ``AgenticLoop``.

Each tool declares its arguments as a ``ToolArguments`` (pydantic) model.
Registration checks that the JSON Schema advertised to the model matches
the argument model, and dispatch validates the raw arguments sent by the
model before the handler runs.  A missing required argument comes back as a
tool error message instead of silently becoming an empty value.

Typical usage::

    from toolchat.conversation.tools.registry import ToolRegistry
    from toolchat.conversation.tools.weather import WeatherTool

    registry = ToolRegistry()
    weather = WeatherTool()
    registry.register(
        WeatherTool.TOOL_DEFINITION, WeatherTool.Arguments, weather.as_dispatcher_entry()
    )

    loop = AgenticLoop(provider=provider, tool_dispatcher=registry.build_dispatcher())
    result = loop.run_turn("What is the weather in Kansas?", history, registry.get_definitions())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from toolchat.conversation.providers import ToolDefinition

logger = logging.getLogger(__name__)

UNKNOWN_TOOL_RESULT = "Unknown tool call"


class ToolArguments(BaseModel):
    """Base class for per-tool argument models.

    Unknown keys are ignored and numbers are accepted where text is expected,
    since models frequently send ``{"expression": 4}``.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


# Type alias for a single tool handler: (validated_args) -> result_str
ToolHandler = Callable[[Any], str]


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    arguments_model: type[ToolArguments]
    handler: ToolHandler


def _check_schema(definition: ToolDefinition, arguments_model: type[ToolArguments]) -> None:
    """Raise ``ValueError`` if *definition* does not describe *arguments_model*."""
    params = definition.parameters
    properties = set((params.get("properties") or {}).keys())
    required = set(params.get("required") or [])
    fields = arguments_model.model_fields

    model_fields = set(fields.keys())
    model_required = {name for name, info in fields.items() if info.is_required()}

    if properties != model_fields:
        raise ValueError(
            f"Tool {definition.name!r}: schema properties {sorted(properties)} "
            f"do not match argument fields {sorted(model_fields)}."
        )
    if required != model_required:
        raise ValueError(
            f"Tool {definition.name!r}: schema requires {sorted(required)} "
            f"but argument model requires {sorted(model_required)}."
        )


def _describe_validation_error(tool_name: str, exc: ValidationError) -> str:
    """Render the first validation problem as a tool error message."""
    first = exc.errors()[0]
    field_name = ".".join(str(part) for part in first.get("loc", ())) or "?"
    if first.get("type") == "missing":
        return f"Error: missing required argument '{field_name}' for tool '{tool_name}'"
    return (
        f"Error: invalid argument '{field_name}' for tool '{tool_name}': "
        f"{first.get('msg', 'invalid value')}"
    )


class ToolRegistry:
    """Registry mapping tool names to definitions, argument models and handlers.

    Use ``get_definitions()`` to obtain the ``ToolDefinition`` list sent with
    every request, and ``build_dispatcher()`` (or ``dispatch()``) to execute
    tool calls.
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        definition: ToolDefinition,
        arguments_model: type[ToolArguments],
        handler: ToolHandler,
    ) -> None:
        """Register a tool.

        Args:
            definition: The tool's ``ToolDefinition`` (name, description,
                parameters).
            arguments_model: Pydantic model the raw arguments are validated
                against.  Must match ``definition.parameters``.
            handler: Callable ``(arguments) -> str`` receiving an instance of
                *arguments_model*.

        Raises:
            ValueError: If a tool with the same name is already registered,
                or if the schema and argument model disagree.
        """
        if definition.name in self._tools:
            raise ValueError(
                f"Tool {definition.name!r} is already registered. "
                "Tool names must be unique."
            )
        _check_schema(definition, arguments_model)
        self._tools[definition.name] = RegisteredTool(definition, arguments_model, handler)
        logger.debug("Registered tool: %r", definition.name)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_definitions(self) -> list[ToolDefinition]:
        """Return all registered ``ToolDefinition`` objects (insertion order)."""
        return [entry.definition for entry in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, name: str, args: dict[str, Any]) -> str:
        """Validate *args* and run the tool called *name*.

        Returns:
            The handler's text result, ``UNKNOWN_TOOL_RESULT`` for an
            unregistered name, or an ``Error: ...`` message when the
            arguments fail validation.  Handler exceptions propagate.
        """
        return self._dispatch_from(self._tools, name, args)

    def build_dispatcher(self) -> Callable[[str, dict[str, Any]], str]:
        """Build a dispatcher compatible with ``AgenticLoop.tool_dispatcher``.

        The registry is snapshotted at build time; later registrations are
        not reflected in the returned dispatcher.
        """
        registry_snapshot = dict(self._tools)

        def _dispatch(name: str, args: dict[str, Any]) -> str:
            return self._dispatch_from(registry_snapshot, name, args)

        return _dispatch

    @staticmethod
    def _dispatch_from(
        tools: dict[str, RegisteredTool], name: str, args: dict[str, Any]
    ) -> str:
        entry = tools.get(name)
        if entry is None:
            logger.warning("Unknown tool requested: %r", name)
            return UNKNOWN_TOOL_RESULT

        try:
            arguments = entry.arguments_model.model_validate(args or {})
        except ValidationError as exc:
            logger.warning("Invalid arguments for tool %r: %s", name, exc)
            return _describe_validation_error(name, exc)

        return entry.handler(arguments)
