"""Ollama local model provider."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from vault_tagger.constants import AI_TEMPERATURE, REQUEST_TIMEOUT_SECONDS
from vault_tagger.errors import ConfigurationError
from vault_tagger.providers.base import TagProvider


class OllamaProvider(TagProvider):
    """Ollama ``/api/generate`` endpoint. Needs no credentials."""

    name = "ollama"

    def __init__(
        self,
        host: str,
        model: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not host:
            raise ConfigurationError("Ollama host is not set")
        super().__init__(timeout=timeout, client=client)
        self.host = host.rstrip("/")
        self.model = model

    def build_request(self, message: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        payload = {
            "model": self.model,
            "prompt": message,
            "stream": False,
            "options": {"temperature": AI_TEMPERATURE},
        }
        return f"{self.host}/api/generate", {}, payload

    def extract_content(self, data: Any) -> str:
        return data["response"]
