"""Base Pydantic model for tools that address a single note.

Every note-level tagging input inherits title and vault validation from
BaseNoteInput.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BaseNoteInput(BaseModel):
    """A note identifier plus an optional vault name."""

    title: str = Field(
        min_length=1,
        description=(
            "Note identifier: vault-relative path, '.md' optional. "
            "Examples: 'Reading/Atomic Habits', 'Inbox/Meeting 2025-10-27'. "
            "Use forward slashes for folders."
        ),
        examples=["Reading/Atomic Habits", "Inbox/Meeting 2025-10-27", "README"]
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Normalize the title and keep it inside the vault.

        Surrounding whitespace and a trailing ``.md`` are removed. Absolute
        paths and ``.``/``..`` segments are rejected.

        Raises:
            ValueError: If the title is empty, absolute, or traverses folders
        """
        cleaned = v.strip()
        if not cleaned:
            raise ValueError(
                "Note title cannot be empty. "
                "Provide a note identifier like 'Reading/Atomic Habits'."
            )

        if cleaned.startswith("/"):
            raise ValueError(
                "Note title must be a relative path within the vault. "
                f"Invalid title: '{cleaned}'"
            )

        if any(part in {".", ".."} for part in cleaned.split("/")):
            raise ValueError(
                "Note title cannot contain '.' or '..' path segments. "
                f"Invalid title: '{cleaned}'"
            )

        if cleaned.endswith(".md"):
            cleaned = cleaned[:-3]
        if not cleaned:
            raise ValueError("Note title cannot be just '.md'.")

        return cleaned

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Strip the vault name; an empty string is an error, not 'use default'."""
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Omit the vault parameter to use the active vault, "
                "or pass a name from list_vaults()."
            )

        return v.strip() if v else None
