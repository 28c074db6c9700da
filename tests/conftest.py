"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from vault_tagger.data_models import TaggerSettings, VaultMetadata


class FakeProvider:
    """Scripted tag backend: each call pops the next response or raises it."""

    name = "fake"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    async def request_tags(self, text: str, prompt: str) -> list[str]:
        self.calls.append((text, prompt))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return list(response)


@pytest.fixture
def vault(tmp_path: Path) -> VaultMetadata:
    """Provide an empty vault directory."""
    vault_path = (tmp_path / "vault").resolve()
    vault_path.mkdir()
    return VaultMetadata(name="test", path=vault_path, description="test vault", exists=True)


@pytest.fixture
def settings() -> TaggerSettings:
    """Default tagging settings with an OpenAI key set."""
    return TaggerSettings(openai_api_key="sk-test")


def write_note(vault: VaultMetadata, name: str, content: str) -> Path:
    note_path = vault.path / f"{name}.md"
    note_path.parent.mkdir(parents=True, exist_ok=True)
    note_path.write_text(content, encoding="utf-8")
    return note_path
