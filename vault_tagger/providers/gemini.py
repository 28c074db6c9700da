"""Google Gemini provider."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from vault_tagger.constants import (
    AI_TEMPERATURE,
    GEMINI_URL,
    REQUEST_TIMEOUT_SECONDS,
    SYSTEM_PROMPT,
)
from vault_tagger.errors import ConfigurationError
from vault_tagger.providers.base import TagProvider


class GeminiProvider(TagProvider):
    """Gemini ``generateContent`` API authenticated with an API key."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("gemini API key is not set")
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key
        self.model = model

    def build_request(self, message: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {"x-goog-api-key": self.api_key}
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": message}]}],
            "generationConfig": {"temperature": AI_TEMPERATURE},
        }
        return f"{GEMINI_URL}/{self.model}:generateContent", headers, payload

    def extract_content(self, data: Any) -> str:
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)
