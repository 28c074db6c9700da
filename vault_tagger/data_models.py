"""Data models for vault metadata and tagging configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional

from vault_tagger.constants import (
    DEFAULT_MAX_TAGS,
    DEFAULT_MAX_WORDS_PER_TAG,
    DEFAULT_PROMPT,
    DEFAULT_TEMPLATE,
    OLLAMA_HOST,
    REQUEST_TIMEOUT_SECONDS,
)

CaseFormat = Literal["lowercase", "uppercase", "titlecase", "retain"]
LanguagePreference = Literal["uk", "us"]
MergeMode = Literal["append", "replace"]
ProviderName = Literal["openai", "mistral", "ollama", "gemini"]

CASE_FORMATS: tuple[str, ...] = ("lowercase", "uppercase", "titlecase", "retain")
LANGUAGE_PREFERENCES: tuple[str, ...] = ("uk", "us")
MERGE_MODES: tuple[str, ...] = ("append", "replace")
PROVIDER_NAMES: tuple[str, ...] = ("openai", "mistral", "ollama", "gemini")


@dataclass(frozen=True)
class VaultMetadata:
    """Normalized metadata describing a Markdown vault."""

    name: str
    path: Path
    description: str
    exists: bool

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "exists": self.path.is_dir(),
        }


@dataclass(frozen=True)
class TaggerSettings:
    """Read-only tagging settings threaded into every core operation."""

    max_tags: int = DEFAULT_MAX_TAGS
    max_words_per_tag: int = DEFAULT_MAX_WORDS_PER_TAG
    tag_case_format: CaseFormat = "lowercase"
    language_preference: LanguagePreference = "uk"
    merge_mode: MergeMode = "append"
    default_template: str = DEFAULT_TEMPLATE
    ai_prompt: str = DEFAULT_PROMPT
    accepted_file_types: tuple[str, ...] = ("pdf",)
    include_extracted_text: bool = False

    ai_provider: ProviderName = "openai"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    mistral_api_key: str = ""
    mistral_model: str = "mistral-small-latest"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    ollama_host: str = OLLAMA_HOST
    ollama_model: str = "llama2"
    request_timeout: float = REQUEST_TIMEOUT_SECONDS

    def as_payload(self) -> dict[str, Any]:
        """Return the non-secret settings as a serializable payload."""
        return {
            "max_tags": self.max_tags,
            "max_words_per_tag": self.max_words_per_tag,
            "tag_case_format": self.tag_case_format,
            "language_preference": self.language_preference,
            "merge_mode": self.merge_mode,
            "accepted_file_types": list(self.accepted_file_types),
            "include_extracted_text": self.include_extracted_text,
            "ai_provider": self.ai_provider,
        }


@dataclass
class TaggerConfiguration:
    """Holds vault metadata, the default vault, and tagging settings.

    Loaded once from tagger.yaml. Provides vault lookup by name and payload
    serialization for MCP responses.
    """

    default_vault: str
    vaults: dict[str, VaultMetadata]
    settings: TaggerSettings = field(default_factory=TaggerSettings)

    def get(self, name: Optional[str] = None) -> VaultMetadata:
        """Get vault metadata by name.

        Args:
            name: The name of the vault to retrieve. ``None`` selects the default.

        Returns:
            VaultMetadata for the requested vault.

        Raises:
            ValueError: If the vault name is not found in configuration.
        """
        key = name or self.default_vault
        try:
            return self.vaults[key]
        except KeyError as exc:
            raise ValueError(f"Unknown vault '{key}'") from exc

    def as_payload(self) -> dict[str, Any]:
        """Return serializable configuration payload."""
        return {
            "default": self.default_vault,
            "vaults": [vault.as_payload() for vault in self.vaults.values()],
            "settings": self.settings.as_payload(),
        }
