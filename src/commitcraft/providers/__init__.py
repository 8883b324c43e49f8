"""Generation backends, one module per provider."""

from __future__ import annotations

from commitcraft.config import Config
from commitcraft.models import Provider
from commitcraft.providers.base import BaseProvider
from commitcraft.providers.claude import ClaudeProvider
from commitcraft.providers.gemini import GeminiProvider
from commitcraft.providers.groq import GroqProvider
from commitcraft.providers.ollama import OllamaProvider

PROVIDERS: dict[Provider, type[BaseProvider]] = {
    Provider.ANTHROPIC: ClaudeProvider,
    Provider.GOOGLE: GeminiProvider,
    Provider.GROQ: GroqProvider,
    Provider.OLLAMA: OllamaProvider,
}


def get_provider(config: Config, api_key: str | None = None) -> BaseProvider:
    """Build the provider selected by ``config.provider``."""
    return PROVIDERS[config.provider](config, api_key=api_key)


def default_model(provider: Provider) -> str:
    return PROVIDERS[provider].DEFAULT_MODEL


__all__ = [
    "BaseProvider",
    "ClaudeProvider",
    "GeminiProvider",
    "GroqProvider",
    "OllamaProvider",
    "PROVIDERS",
    "get_provider",
    "default_model",
]
