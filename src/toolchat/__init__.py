"""
toolchat - a command-line chat client with tool calling.

Connects a chat model (Ollama or any OpenAI-compatible endpoint) to a small
set of tools: time, arithmetic, dictionary, Wikipedia, weather and a second
"coder" model.

Quick Start:
    >>> from toolchat.config import get_settings
    >>> from toolchat.main import build_console
    >>> build_console(get_settings()).run()
"""

__version__ = "0.1.0"
