"""Tag generation with validation and a bounded retry loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from vault_tagger.constants import MAX_ATTEMPTS, RETRY_DELAY_SECONDS
from vault_tagger.core.tag_validation import filter_erroneous_tags
from vault_tagger.data_models import TaggerSettings
from vault_tagger.errors import ConfigurationError

logger = logging.getLogger(__name__)

StatusCallback = Callable[[int, int], Awaitable[None]]


class TagRequester(Protocol):
    """Anything that can turn text and a prompt into raw tag strings."""

    name: str

    async def request_tags(self, text: str, prompt: str) -> list[str]: ...


def build_prompt(template: str, max_tags: int, max_words_per_tag: int) -> str:
    """Substitute ``{{max_tags}}`` and ``{{max_words}}`` in the configured prompt."""
    return (
        template.replace("{{max_tags}}", str(max_tags))
        .replace("{{max_words}}", str(max_words_per_tag))
    )


def build_retry_prompt(max_tags: int, max_words_per_tag: int) -> str:
    """A stricter prompt used after an attempt produced no usable tags."""
    plural = "s" if max_words_per_tag > 1 else ""
    return (
        f"Generate exactly {max_tags} relevant tags for this text.\n"
        f"Each tag MUST have no more than {max_words_per_tag} word{plural}.\n"
        'Return ONLY the tags as a comma-separated list (e.g., "tag1, tag2, tag3").\n'
        "Do not include explanations, hashes, or additional text.\n"
        "Do not concatenate tags with hyphens or other characters.\n"
        "Do not number the tags."
    )


def _check_settings(settings: TaggerSettings) -> None:
    if settings.max_tags < 1:
        raise ConfigurationError("max_tags must be at least 1")
    if settings.max_words_per_tag < 1:
        raise ConfigurationError("max_words_per_tag must be at least 1")


async def generate_tags(
    text: str,
    settings: TaggerSettings,
    provider: Optional[TagRequester],
    on_status: Optional[StatusCallback] = None,
    retry_delay: float = RETRY_DELAY_SECONDS,
    max_attempts: int = MAX_ATTEMPTS,
) -> list[str]:
    """Generate validated tags for ``text``.

    Each attempt asks the provider for tags and filters them by word count. The
    loop ends as soon as an attempt yields at least one valid tag; after the last
    attempt whatever survived is returned, possibly nothing. The result is
    truncated to ``settings.max_tags`` once, keeping the provider's order.

    Args:
        text: Source text to describe.
        settings: Tagging settings (prompt, limits).
        provider: Backend used for every attempt.
        on_status: Awaited with ``(attempt_number, max_attempts)`` before each
            network request.
        retry_delay: Seconds to wait between attempts.
        max_attempts: Upper bound on network requests.

    Returns:
        Valid tags in backend order, at most ``settings.max_tags`` of them.

    Raises:
        ConfigurationError: If no provider is given or the limits are unusable.
        ProviderError: Propagated unchanged from the provider.
    """
    if provider is None:
        raise ConfigurationError("AI provider is not properly configured")
    _check_settings(settings)

    valid_tags: list[str] = []
    for attempt in range(max_attempts):
        if attempt == 0:
            prompt = build_prompt(settings.ai_prompt, settings.max_tags, settings.max_words_per_tag)
        else:
            await asyncio.sleep(retry_delay)
            prompt = build_retry_prompt(settings.max_tags, settings.max_words_per_tag)

        if on_status is not None:
            await on_status(attempt + 1, max_attempts)

        logger.info("Generating tags using %s (attempt %d/%d)", provider.name, attempt + 1, max_attempts)
        logger.debug("Prompt: %s", prompt)
        raw_tags = await provider.request_tags(text, prompt)

        result = filter_erroneous_tags(raw_tags, settings.max_words_per_tag)
        valid_tags = result.valid_tags
        if not result.has_erroneous_tags:
            break
        logger.warning("No usable tags from %s on attempt %d", provider.name, attempt + 1)
    else:
        logger.warning("No usable tags after %d attempts", max_attempts)

    return valid_tags[: settings.max_tags]
