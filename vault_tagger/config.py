"""Configuration loading: vault registry and tagging settings."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

from vault_tagger.constants import CONFIG_ENV_VAR, CONFIG_PATH
from vault_tagger.data_models import (
    CASE_FORMATS,
    LANGUAGE_PREFERENCES,
    MERGE_MODES,
    PROVIDER_NAMES,
    TaggerConfiguration,
    TaggerSettings,
    VaultMetadata,
)
from vault_tagger.errors import ConfigurationError

logger = logging.getLogger(__name__)

_API_KEY_ENV_VARS = {
    "openai_api_key": "OPENAI_API_KEY",
    "mistral_api_key": "MISTRAL_API_KEY",
    "gemini_api_key": "GEMINI_API_KEY",
}


def _load_vaults(raw_config: dict[str, Any]) -> tuple[str, dict[str, VaultMetadata]]:
    vaults_section = raw_config.get("vaults")
    if not isinstance(vaults_section, dict) or not vaults_section:
        raise ConfigurationError("Configuration must include a non-empty 'vaults' mapping")

    processed: dict[str, VaultMetadata] = {}
    for name, entry in vaults_section.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Vault '{name}' must map to a dictionary of settings")

        raw_path = entry.get("path")
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise ConfigurationError(f"Vault '{name}' is missing a valid 'path' string")

        resolved_path = Path(raw_path).expanduser().resolve(strict=False)
        description = str(entry.get("description", "")).strip()

        processed[name] = VaultMetadata(
            name=name,
            path=resolved_path,
            description=description,
            exists=resolved_path.is_dir(),
        )

    default_vault = raw_config.get("default")
    if not isinstance(default_vault, str) or default_vault not in processed:
        raise ConfigurationError("Configuration must specify a 'default' vault present in the mapping")

    return default_vault, processed


def _choice(section: dict[str, Any], key: str, allowed: tuple[str, ...], default: str) -> str:
    value = section.get(key, default)
    if value not in allowed:
        raise ConfigurationError(f"'{key}' must be one of {', '.join(allowed)} (got {value!r})")
    return value


def _positive_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"'{key}' must be a positive integer (got {value!r})")
    return value


def load_settings(raw_config: dict[str, Any]) -> TaggerSettings:
    """Build :class:`TaggerSettings` from the ``tagging`` and ``provider`` sections.

    Missing keys take their defaults. Empty API keys fall back to the
    ``OPENAI_API_KEY``, ``MISTRAL_API_KEY`` and ``GEMINI_API_KEY`` environment
    variables.

    Raises:
        ConfigurationError: If a section is not a mapping or a value is invalid.
    """
    defaults = TaggerSettings()
    tagging = raw_config.get("tagging") or {}
    provider = raw_config.get("provider") or {}
    if not isinstance(tagging, dict) or not isinstance(provider, dict):
        raise ConfigurationError("'tagging' and 'provider' must be mappings")

    file_types = tagging.get("accepted_file_types", list(defaults.accepted_file_types))
    if not isinstance(file_types, list) or not all(isinstance(item, str) for item in file_types):
        raise ConfigurationError("'accepted_file_types' must be a list of extensions")

    credentials = {}
    for key, env_var in _API_KEY_ENV_VARS.items():
        credentials[key] = str(provider.get(key) or os.environ.get(env_var, ""))

    return TaggerSettings(
        max_tags=_positive_int(tagging, "max_tags", defaults.max_tags),
        max_words_per_tag=_positive_int(tagging, "max_words_per_tag", defaults.max_words_per_tag),
        tag_case_format=_choice(tagging, "tag_case_format", CASE_FORMATS, defaults.tag_case_format),
        language_preference=_choice(
            tagging, "language_preference", LANGUAGE_PREFERENCES, defaults.language_preference
        ),
        merge_mode=_choice(tagging, "merge_mode", MERGE_MODES, defaults.merge_mode),
        default_template=str(tagging.get("default_template", defaults.default_template)),
        ai_prompt=str(tagging.get("ai_prompt", defaults.ai_prompt)),
        accepted_file_types=tuple(item.lower().lstrip(".") for item in file_types),
        include_extracted_text=bool(tagging.get("include_extracted_text", defaults.include_extracted_text)),
        ai_provider=_choice(provider, "name", PROVIDER_NAMES, defaults.ai_provider),
        openai_model=str(provider.get("openai_model", defaults.openai_model)),
        mistral_model=str(provider.get("mistral_model", defaults.mistral_model)),
        gemini_model=str(provider.get("gemini_model", defaults.gemini_model)),
        ollama_host=str(provider.get("ollama_host", defaults.ollama_host)),
        ollama_model=str(provider.get("ollama_model", defaults.ollama_model)),
        request_timeout=float(provider.get("timeout", defaults.request_timeout)),
        **credentials,
    )


def load_configuration(config_path: Optional[Path] = None) -> TaggerConfiguration:
    """Load and validate the tagger configuration file.

    Args:
        config_path: Path to the YAML configuration file. Defaults to the
            ``VAULT_TAGGER_CONFIG`` environment variable, then ``tagger.yaml``
            next to the package.

    Returns:
        A fully populated :class:`TaggerConfiguration`.

    Raises:
        FileNotFoundError: If the configuration file is missing.
        ConfigurationError: If the file does not provide the expected structure.
    """
    if config_path is None:
        config_path = Path(os.environ.get(CONFIG_ENV_VAR, CONFIG_PATH))

    if not config_path.exists():
        raise FileNotFoundError(f"Tagger configuration file not found at {config_path}")

    try:
        raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Configuration file is not valid YAML: {exc}") from exc

    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    default_vault, vaults = _load_vaults(raw_config)
    settings = load_settings(raw_config)
    logger.info(
        "Loaded configuration from %s (%d vaults, provider=%s)",
        config_path,
        len(vaults),
        settings.ai_provider,
    )
    return TaggerConfiguration(default_vault=default_vault, vaults=vaults, settings=settings)


@lru_cache(maxsize=1)
def get_configuration() -> TaggerConfiguration:
    """Return the process-wide configuration, loading it on first use."""
    return load_configuration()
