"""AI backends that turn note text into candidate tags."""

from vault_tagger.providers.base import TagProvider, split_tag_response
from vault_tagger.providers.factory import create_provider, is_provider_configured
from vault_tagger.providers.gemini import GeminiProvider
from vault_tagger.providers.ollama import OllamaProvider
from vault_tagger.providers.openai import MistralProvider, OpenAIProvider

__all__ = [
    "TagProvider",
    "split_tag_response",
    "create_provider",
    "is_provider_configured",
    "OpenAIProvider",
    "MistralProvider",
    "OllamaProvider",
    "GeminiProvider",
]
