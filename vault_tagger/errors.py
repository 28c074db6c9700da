"""Exception types raised by tagging operations."""

from __future__ import annotations

from typing import Literal, Optional

ProviderErrorKind = Literal["auth", "rate_limit", "transport", "response"]


class TaggerError(Exception):
    """Base class for all tagger failures."""


class ConfigurationError(TaggerError, ValueError):
    """A required credential or setting is missing or unusable."""


class ProviderError(TaggerError):
    """An AI backend could not produce a response.

    Only rate limiting is retriable, and the retry decision belongs to the
    caller: the orchestrator never retries on a provider failure.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        kind: ProviderErrorKind = "transport",
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.kind = kind
        self.status_code = status_code

    @property
    def retriable(self) -> bool:
        return self.kind == "rate_limit"


class ExtractionError(TaggerError):
    """Text could not be extracted from a source file."""


class MalformedInputError(TaggerError, ValueError):
    """A frontmatter block could not be parsed under strict reading.

    The frontmatter merger never raises it: malformed blocks are treated as absent.
    """


class UserCancelled(TaggerError):
    """The user dismissed a manual tag prompt."""
