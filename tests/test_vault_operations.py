"""Tests for note path resolution and document storage."""

import pytest

from vault_tagger.core.vault_operations import (
    construct_note_path,
    ensure_vault_ready,
    note_display_name,
    read_document,
    resolve_note_path,
    resolve_vault_file,
    write_document,
)
from vault_tagger.data_models import VaultMetadata


def test_construct_preserves_dot_in_basename():
    identifier = "v1.4 Release Changelog"
    assert construct_note_path(identifier).as_posix() == "v1.4 Release Changelog.md"


def test_construct_nested_path():
    assert construct_note_path("Projects/v1.4 Release Notes").as_posix() == "Projects/v1.4 Release Notes.md"


def test_resolve_rejects_escape(vault):
    with pytest.raises(ValueError, match="escapes"):
        resolve_note_path(vault, "../outside")
    with pytest.raises(ValueError, match="escapes"):
        resolve_vault_file(vault, "../secret.pdf")


def test_resolve_vault_file_keeps_extension(vault):
    assert resolve_vault_file(vault, "Papers/a.pdf") == vault.path / "Papers" / "a.pdf"


def test_display_name(vault):
    assert note_display_name(vault, vault.path / "Reading" / "Book.md") == "Reading/Book"


def test_ensure_vault_ready(tmp_path):
    missing = VaultMetadata(name="gone", path=tmp_path / "gone", description="", exists=False)
    with pytest.raises(FileNotFoundError, match="not accessible"):
        ensure_vault_ready(missing)


def test_read_missing_note(vault):
    with pytest.raises(FileNotFoundError, match="Ghost"):
        read_document(vault, vault.path / "Ghost.md")


def test_read_non_utf8_note(vault):
    path = vault.path / "Latin.md"
    path.write_bytes("café".encode("latin-1"))
    with pytest.raises(ValueError, match="UTF-8"):
        read_document(vault, path)


def test_write_keeps_newlines(vault):
    path = vault.path / "Note.md"
    write_document(path, "a\nb\n")
    assert path.read_bytes() == b"a\nb\n"
