"""Pydantic input models for tagging operations.

This module defines input models for the tagging tools:
- Generate tags for a note with the configured AI backend
- Apply user-supplied tags to a note
- Read the current tags of a note
- Create a tagged companion note for a non-Markdown file
- Tag every untagged note in a folder
"""

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .base import BaseNoteInput


MergeModeOption = Optional[Literal["append", "replace"]]


class GenerateNoteTagsInput(BaseNoteInput):
    """Input model for generate_note_tags tool.

    Examples:
        >>> GenerateNoteTagsInput(title="Reading/Atomic Habits")
        >>> GenerateNoteTagsInput(title="Meeting", vault="work", mode="replace")
    """

    mode: MergeModeOption = Field(
        None,
        description=(
            "How generated tags combine with existing ones: 'append' keeps "
            "existing tags, 'replace' discards them. Omit to use the configured default."
        ),
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Reading/Atomic Habits", "vault": None},
                {"title": "Meeting", "vault": "work", "mode": "replace"}
            ]
        }


class ApplyNoteTagsInput(BaseNoteInput):
    """Input model for apply_note_tags tool.

    Merges tags chosen by the user. No AI backend is contacted.

    Examples:
        >>> ApplyNoteTagsInput(title="My Note", tags=["habits", "productivity"])
    """

    tags: list[str] = Field(
        min_length=1,
        description=(
            "Tags to merge into the note's frontmatter. "
            "They are formatted with the configured case format before writing."
        ),
        examples=[["habits", "productivity"], ["machine learning"]]
    )

    mode: MergeModeOption = Field(
        None,
        description="'append' or 'replace'. Omit to use the configured default.",
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Drop blank entries and require at least one real tag.

        Raises:
            ValueError: If every tag is empty or whitespace
        """
        cleaned = [tag.strip() for tag in v if tag.strip()]
        if not cleaned:
            raise ValueError(
                "Provide at least one non-empty tag. "
                "Example: ['habits', 'productivity']"
            )
        return cleaned


class ReadNoteTagsInput(BaseNoteInput):
    """Input model for read_note_tags tool.

    Examples:
        >>> ReadNoteTagsInput(title="My Note")
    """

    # Inherits title and vault from BaseNoteInput


class CreateNoteForFileInput(BaseModel):
    """Input model for create_note_for_file tool.

    Examples:
        >>> CreateNoteForFileInput(file_path="Papers/attention.pdf")
    """

    file_path: str = Field(
        min_length=1,
        description=(
            "Vault-relative path of the source file, including its extension. "
            "Examples: 'Papers/attention.pdf', 'scan.pdf'."
        ),
        examples=["Papers/attention.pdf", "scan.pdf"]
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """Reject traversal segments and absolute paths.

        Raises:
            ValueError: If the path is empty, absolute, or contains '.'/'..'
        """
        cleaned = v.strip().replace("\\", "/")
        if not cleaned:
            raise ValueError("File path cannot be empty.")

        if cleaned.startswith("/"):
            raise ValueError(
                "File path must be relative to the vault. "
                f"Invalid path: '{cleaned}'"
            )

        if any(part in {".", ".."} for part in cleaned.split("/")):
            raise ValueError(
                "File path cannot contain '.' or '..' path segments. "
                f"Invalid path: '{cleaned}'"
            )

        if cleaned.lower().endswith((".md", ".markdown")):
            raise ValueError(
                "File path points to a note. Use generate_note_tags() to tag notes."
            )

        return cleaned

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Validate vault name format."""
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Omit the vault parameter to use the active vault."
            )
        return v.strip() if v else None


class TagFolderInput(BaseModel):
    """Input model for tag_folder tool.

    Examples:
        >>> TagFolderInput(folder="Reading")
        >>> TagFolderInput()  # vault root
    """

    folder: str = Field(
        "",
        description=(
            "Vault-relative folder whose notes should be tagged. "
            "Omit or pass '' for the vault root. Subfolders are not visited."
        ),
        examples=["Reading", "Inbox/2025"]
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('folder')
    @classmethod
    def validate_folder(cls, v: str) -> str:
        """Normalize separators and keep the folder inside the vault.

        Raises:
            ValueError: If the folder is absolute or contains '.'/'..'
        """
        cleaned = v.strip().replace("\\", "/").rstrip("/")
        if v.strip().startswith(("/", "\\")):
            raise ValueError(
                "Folder must be relative to the vault. "
                f"Invalid folder: '{v.strip()}'"
            )

        if cleaned and any(part in {".", ".."} for part in cleaned.split("/")):
            raise ValueError(
                "Folder cannot contain '.' or '..' path segments. "
                f"Invalid folder: '{cleaned}'"
            )

        return cleaned

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Validate vault name format."""
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Omit the vault parameter to use the active vault."
            )
        return v.strip() if v else None

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"folder": "Reading"},
                {"folder": "", "vault": "work"}
            ]
        }


class ManualTagsPrompt(BaseModel):
    """Form shown to the user when tags cannot be generated automatically."""

    tags: str = Field(
        description="Comma-separated tags, e.g. 'habits, productivity, reading'",
    )
