"""
Dictionary tool for the toolchat agentic loop.

``define_word`` is advertised to the model but no dictionary backend is
wired in; the handler answers with a placeholder definition.
"""

from __future__ import annotations

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments


class DictionaryTool:
    """Placeholder ``define_word`` tool."""

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="define_word",
        description="Look up the definition of a given word in English.",
        parameters={
            "type": "object",
            "properties": {
                "word": {"type": "string", "description": "The word to define"}
            },
            "required": ["word"],
        },
    )

    class Arguments(ToolArguments):
        word: str

    def define(self, word: str) -> str:
        return f"'{word}': A sample definition. No dictionary service is configured."

    def as_dispatcher_entry(self):
        def _call(args: DictionaryTool.Arguments) -> str:
            return self.define(args.word)

        return _call
