"""Vault path resolution and document storage."""

from pathlib import Path

from vault_tagger.data_models import VaultMetadata


def ensure_vault_ready(vault: VaultMetadata) -> None:
    """Ensure the target vault directory is accessible before performing operations.

    Args:
        vault: Metadata describing the vault to use.

    Raises:
        FileNotFoundError: If the vault path does not exist or is not a directory.
    """
    if not vault.path.is_dir():
        raise FileNotFoundError(f"Vault '{vault.name}' is not accessible at {vault.path}")


def construct_note_path(identifier: str) -> Path:
    """Construct a relative note path from a pre-validated identifier.

    The identifier has already been stripped of ``.md`` and checked for
    traversal segments by the Pydantic input models.

    Examples:
        >>> construct_note_path("My Note")
        PosixPath('My Note.md')
        >>> construct_note_path("Folder/My Note")
        PosixPath('Folder/My Note.md')
    """
    parts = identifier.split("/")
    leaf_with_extension = f"{parts[-1]}.md"

    if len(parts) == 1:
        return Path(leaf_with_extension)
    return Path(*parts[:-1]) / leaf_with_extension


def _inside_vault(vault: VaultMetadata, relative: Path) -> Path:
    candidate = (vault.path / relative).resolve(strict=False)
    vault_root = vault.path.resolve(strict=False)

    if not candidate.is_relative_to(vault_root):
        raise ValueError("Path escapes the configured vault.")

    return candidate


def resolve_note_path(vault: VaultMetadata, title: str) -> Path:
    """Resolve a pre-validated note title to an absolute vault path.

    Raises:
        ValueError: If the resolved path escapes the vault root.
    """
    return _inside_vault(vault, construct_note_path(title))


def resolve_vault_file(vault: VaultMetadata, file_path: str) -> Path:
    """Resolve a vault-relative file path (any extension) to an absolute path.

    Raises:
        ValueError: If the resolved path escapes the vault root.
    """
    return _inside_vault(vault, Path(file_path))


def note_display_name(vault: VaultMetadata, path: Path) -> str:
    """Convert a note path into a forward-slash display name without extension."""
    relative = path.relative_to(vault.path.resolve(strict=False))
    return str(relative.with_suffix("")).replace("\\", "/")


def read_document(vault: VaultMetadata, path: Path) -> str:
    """Read a note as UTF-8 text.

    Raises:
        FileNotFoundError: If the note does not exist.
        ValueError: If the note is not UTF-8 encoded.
    """
    if not path.is_file():
        raise FileNotFoundError(
            f"Note '{note_display_name(vault, path)}' not found in vault '{vault.name}'."
        )

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(
            f"Note '{note_display_name(vault, path)}' is not UTF-8 encoded and cannot be processed."
        ) from exc


def write_document(path: Path, text: str) -> None:
    """Write a note as UTF-8 text, keeping newlines exactly as given."""
    path.write_text(text, encoding="utf-8", newline="")
