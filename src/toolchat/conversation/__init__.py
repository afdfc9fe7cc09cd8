"""
toolchat Conversation Package.

Implements the synchronous tool-calling loop, the session history and the
LLM provider abstractions.
"""

from toolchat.conversation.history import ChatHistory, Message
from toolchat.conversation.loop import AgenticLoop, ToolDispatcher, TurnResult
from toolchat.conversation.providers import (
    CompletionResult,
    LLMAPIError,
    LLMConnectionError,
    LLMError,
    LLMProvider,
    LLMRateLimitError,
    LLMResponseError,
    OllamaChatProvider,
    OpenAICompatibleProvider,
    ToolCall,
    ToolDefinition,
)

__all__ = [
    "AgenticLoop",
    "ChatHistory",
    "CompletionResult",
    "LLMAPIError",
    "LLMConnectionError",
    "LLMError",
    "LLMProvider",
    "LLMRateLimitError",
    "LLMResponseError",
    "Message",
    "OllamaChatProvider",
    "OpenAICompatibleProvider",
    "ToolCall",
    "ToolDefinition",
    "ToolDispatcher",
    "TurnResult",
]
