"""
Time tool for the toolchat agentic loop.

Returns the current wall-clock time as ``HH:MM:SS``.  By default this is the
local time of the machine running the client; an optional IANA timezone name
shifts it.  This tool requires no external API.

The ``DateTimeTool`` class exposes:

- ``DateTimeTool.TOOL_DEFINITION``: the ``get_time`` ``ToolDefinition``.
- ``DateTimeTool.Arguments``: the typed argument model.
- ``DateTimeTool.get_time(timezone)``: returns the formatted time.
- ``DateTimeTool.as_dispatcher_entry()``: returns a handler for
  ``ToolRegistry``.

An unrecognised timezone key falls back to local time; the output format
never changes.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M:%S"


class DateTimeTool:
    """Returns the current time, with optional timezone support.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for ``AgenticLoop``.
    """

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="get_time",
        description=(
            "Get the current time as HH:MM:SS. "
            "Optionally accepts an IANA timezone name such as "
            "'America/New_York' or 'Europe/London'; defaults to local time."
        ),
        parameters={
            "type": "object",
            "properties": {
                "timezone": {
                    "type": "string",
                    "description": (
                        "IANA timezone name, e.g. 'America/Chicago'. "
                        "Omit for local time."
                    ),
                }
            },
            "required": [],
        },
    )

    class Arguments(ToolArguments):
        timezone: str | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_time(self, timezone_name: str | None = None) -> str:
        """Return the current time formatted as ``HH:MM:SS``."""
        tz = self._resolve_timezone(timezone_name)
        return datetime.now(tz=tz).strftime(TIME_FORMAT)

    def as_dispatcher_entry(self):
        """Return a handler for use with ``ToolRegistry``.

        Usage::

            dt = DateTimeTool()
            registry.register(
                DateTimeTool.TOOL_DEFINITION, DateTimeTool.Arguments, dt.as_dispatcher_entry()
            )
        """

        def _call(args: DateTimeTool.Arguments) -> str:
            return self.get_time(args.timezone or None)

        return _call

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_timezone(self, timezone_name: str | None) -> tzinfo | None:
        """Resolve *timezone_name*; ``None`` means local time."""
        if not timezone_name:
            return None
        try:
            return ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone: %r; falling back to local time", timezone_name)
            return None
