"""
Coder delegation tool for the toolchat agentic loop.

``coder_llm`` sends one user message to a second, separately configured
model (``codellama:code`` by default) through the same ``LLMProvider`` the
main conversation uses, and returns that model's text answer.  The call is
one-off: no history and no tools are sent.
"""

from __future__ import annotations

import logging

from toolchat.conversation.history import Message
from toolchat.conversation.providers import LLMError, LLMProvider, ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments

logger = logging.getLogger(__name__)


class CoderTool:
    """Delegates a single message to the configured coder model.

    Attributes:
        provider: Backend used for the one-off call.
        model: Model the message is sent to.  The ``model`` argument sent by
            the conversation model is logged but not used, since it tends to
            name models that are not installed.
    """

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="coder_llm",
        description="Call another LLM model with a single message",
        parameters={
            "type": "object",
            "properties": {
                "model": {"type": "string", "description": "Model name to call"},
                "message": {
                    "type": "string",
                    "description": "Message to send to the model",
                },
            },
            "required": ["message"],
        },
    )

    class Arguments(ToolArguments):
        model: str | None = None
        message: str

    def __init__(self, provider: LLMProvider, model: str = "codellama:code") -> None:
        self.provider = provider
        self.model = model

    def ask(self, message: str, requested_model: str | None = None) -> str:
        if requested_model and requested_model != self.model:
            logger.debug(
                "coder_llm requested model %r; using configured %r", requested_model, self.model
            )
        try:
            result = self.provider.complete(
                [Message(role="user", content=message)], [], model=self.model
            )
        except LLMError as exc:
            logger.error("Coder model %r failed: %s", self.model, exc)
            return f"Error calling model '{self.model}': {exc}"
        return result.content

    def as_dispatcher_entry(self):
        def _call(args: CoderTool.Arguments) -> str:
            return self.ask(args.message, args.model)

        return _call
