"""Abstract base class for AI tag providers."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from vault_tagger.constants import MAX_INPUT_CHARS, REQUEST_TIMEOUT_SECONDS
from vault_tagger.errors import ProviderError

logger = logging.getLogger(__name__)

_RESPONSE_SEPARATORS = re.compile(r"[,\n]")
_LIST_MARKER = re.compile(r"^(?:[-*•]+|\d+[.)])\s*")


def compose_user_message(prompt: str, text: str) -> str:
    """Combine the instruction prompt with the capped source text."""
    return f"{prompt}\n\nText: {text[:MAX_INPUT_CHARS]}"


def split_tag_response(content: str) -> list[str]:
    """Turn a backend's free-text answer into raw tag strings.

    The answer is split on commas and newlines; list bullets, numbering and
    leading ``#`` characters are removed and empty entries dropped.

    Examples:
        >>> split_tag_response("1. machine learning\\n2. #python")
        ['machine learning', 'python']
    """
    tags = []
    for part in _RESPONSE_SEPARATORS.split(content):
        tag = _LIST_MARKER.sub("", part.strip()).lstrip("#").strip()
        if tag:
            tags.append(tag)
    return tags


class TagProvider(ABC):
    """An HTTP text-completion backend that answers with candidate tags.

    Subclasses describe the request and where the answer text lives in the
    response; transport, status handling and parsing are shared.
    """

    name: str = "provider"

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @abstractmethod
    def build_request(self, message: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return ``(url, headers, json_payload)`` for one completion request."""

    @abstractmethod
    def extract_content(self, data: Any) -> str:
        """Return the answer text from a decoded JSON response."""

    async def request_tags(self, text: str, prompt: str) -> list[str]:
        """Ask the backend for tags describing ``text``.

        Args:
            text: Source text; only the first ``MAX_INPUT_CHARS`` characters are sent.
            prompt: Instruction prompt with placeholders already substituted.

        Returns:
            Raw tag strings in the order the backend produced them.

        Raises:
            ProviderError: On transport failure, a non-success status, or an
                unexpected response body.
        """
        url, headers, payload = self.build_request(compose_user_message(prompt, text))
        logger.debug("Requesting tags from %s (%d chars of text)", self.name, min(len(text), MAX_INPUT_CHARS))

        try:
            response = await self._client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"{self.name} request failed: {exc}",
                provider=self.name,
                kind="transport",
            ) from exc

        self._raise_for_status(response)

        try:
            content = self.extract_content(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderError(
                f"Invalid response from {self.name}",
                provider=self.name,
                kind="response",
                status_code=response.status_code,
            ) from exc

        tags = split_tag_response(content or "")
        logger.debug("%s returned %d raw tags", self.name, len(tags))
        return tags

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        status = response.status_code
        if status == 429:
            raise ProviderError(
                f"{self.name} rate limit exceeded. Please try again later.",
                provider=self.name,
                kind="rate_limit",
                status_code=status,
            )

        message = self._error_message(response)
        kind = "auth" if status in (401, 403) else "transport"
        raise ProviderError(message, provider=self.name, kind=kind, status_code=status)

    def _error_message(self, response: httpx.Response) -> str:
        fallback = f"{self.name} error ({response.status_code})"
        try:
            data = response.json()
        except ValueError:
            return fallback

        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return f"{self.name}: {error['message']}"
        if isinstance(error, str) and error:
            return f"{self.name}: {error}"
        return fallback

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "TagProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
