"""OpenAI and Mistral chat-completion providers."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from vault_tagger.constants import (
    AI_TEMPERATURE,
    MISTRAL_URL,
    OPENAI_URL,
    REQUEST_TIMEOUT_SECONDS,
    SYSTEM_PROMPT,
)
from vault_tagger.errors import ConfigurationError
from vault_tagger.providers.base import TagProvider


class OpenAIProvider(TagProvider):
    """OpenAI chat completions API."""

    name = "openai"
    url = OPENAI_URL

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the provider.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not api_key:
            raise ConfigurationError(f"{self.name} API key is not set")
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key
        self.model = model

    def build_request(self, message: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": message},
            ],
            "temperature": AI_TEMPERATURE,
        }
        return self.url, headers, payload

    def extract_content(self, data: Any) -> str:
        return data["choices"][0]["message"]["content"] or ""


class MistralProvider(OpenAIProvider):
    """Mistral's OpenAI-compatible chat completions API."""

    name = "mistral"
    url = MISTRAL_URL
