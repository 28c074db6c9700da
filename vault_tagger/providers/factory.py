"""Provider selection from settings."""

from __future__ import annotations

from typing import Optional

import httpx

from vault_tagger.data_models import TaggerSettings
from vault_tagger.errors import ConfigurationError
from vault_tagger.providers.base import TagProvider
from vault_tagger.providers.gemini import GeminiProvider
from vault_tagger.providers.ollama import OllamaProvider
from vault_tagger.providers.openai import MistralProvider, OpenAIProvider


def is_provider_configured(settings: TaggerSettings) -> bool:
    """Return True when the selected provider has the credentials it needs."""
    provider = settings.ai_provider
    if provider == "openai":
        return bool(settings.openai_api_key)
    if provider == "mistral":
        return bool(settings.mistral_api_key)
    if provider == "gemini":
        return bool(settings.gemini_api_key)
    if provider == "ollama":
        return bool(settings.ollama_host)
    return False


def create_provider(
    settings: TaggerSettings,
    client: Optional[httpx.AsyncClient] = None,
) -> TagProvider:
    """Instantiate the provider named by ``settings.ai_provider``.

    Args:
        settings: Tagging settings with provider credentials.
        client: Optional pre-built HTTP client (used by tests).

    Raises:
        ConfigurationError: If the provider is unknown or missing credentials.
    """
    provider = settings.ai_provider
    timeout = settings.request_timeout

    if provider == "openai":
        return OpenAIProvider(settings.openai_api_key, settings.openai_model, timeout, client)
    if provider == "mistral":
        return MistralProvider(settings.mistral_api_key, settings.mistral_model, timeout, client)
    if provider == "gemini":
        return GeminiProvider(settings.gemini_api_key, settings.gemini_model, timeout, client)
    if provider == "ollama":
        return OllamaProvider(settings.ollama_host, settings.ollama_model, timeout, client)

    raise ConfigurationError(f"Unknown AI provider: {provider}")
