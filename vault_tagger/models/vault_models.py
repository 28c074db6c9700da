"""Pydantic input models for vault selection.

- List configured vaults, tagging settings and in-flight notes
- Choose the vault that tagging tools use when none is named
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ListVaultsInput(BaseModel):
    """Input model for list_vaults tool. Takes no parameters.

    Examples:
        >>> ListVaultsInput()
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {"examples": [{}]}


class SetActiveVaultInput(BaseModel):
    """Input model for set_active_vault tool.

    Tagging tools called without a vault parameter afterwards operate on
    this vault for the rest of the session.

    Examples:
        >>> SetActiveVaultInput(vault="work")
    """

    vault: str = Field(
        min_length=1,
        description=(
            "Vault name as configured under 'vaults' in tagger.yaml. "
            "Use list_vaults() to discover valid names."
        ),
        examples=["personal", "work"]
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank names.

        Raises:
            ValueError: If the vault name is empty or only whitespace
        """
        cleaned = v.strip()
        if not cleaned:
            raise ValueError(
                "Vault name cannot be empty. "
                "Use list_vaults() to see the vaults configured in tagger.yaml."
            )
        return cleaned
