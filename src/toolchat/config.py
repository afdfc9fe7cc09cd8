"""
Configuration management for the toolchat CLI.

This module provides a Settings class that loads configuration from environment
variables, allowing model names and endpoint URLs to be changed per
environment without code changes.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from toolchat.conversation.prompts import DEFAULT_SYSTEM_PROMPT


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Chat endpoint
    api: Literal["openai", "ollama"] = "openai"
    base_url: str = "http://localhost:11434/v1"  # OpenAI-compatible endpoint
    ollama_url: str = "http://localhost:11434"  # native /api/chat endpoint
    model: str = "llama3.1:8b"
    api_key: str = "ollama"
    temperature: float = 0.7

    # Second model used by the coder_llm tool
    coder_model: str = "codellama:code"

    # Conversation loop
    max_tool_calls: int = 5
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Tools
    calc_mode: Literal["left_to_right", "precedence"] = "left_to_right"
    temperature_unit: Literal["fahrenheit", "celsius"] = "fahrenheit"
    http_timeout: float = 30.0
    user_agent: str = "toolchat/0.1 (command-line chat client)"
    wikipedia_url: str = "https://en.wikipedia.org/w/api.php"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"

    # Logging
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="TOOLCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


def get_settings() -> Settings:
    """Get the application settings instance."""
    return Settings()
