"""Shared pytest fixtures for localeflow-sync tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from localeflow_sync.config import ResolvedOptions
from localeflow_sync.core.client import RemoteTranslations
from localeflow_sync.errors import RemoteError
from localeflow_sync.sync.models import ConflictEntry, Decision


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's environment out of config resolution."""
    for var in (
        "LOCALEFLOW_CONFIG",
        "LOCALEFLOW_API_URL",
        "LOCALEFLOW_API_KEY",
        "LOCALEFLOW_PROJECT",
        "LOCALEFLOW_SPACE",
        "LOCALEFLOW_BRANCH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


class FakeRemoteStore:
    """In-memory ``RemoteStore`` for engine tests.

    Records every call so tests can assert on stage ordering.
    """

    def __init__(
        self,
        translations: dict[str, dict[str, str]] | None = None,
        languages: list[str] | None = None,
        fail_fetch: bool = False,
        fail_upload: bool = False,
    ) -> None:
        self.translations = copy.deepcopy(translations or {})
        self.languages = languages or sorted(self.translations)
        self.fail_fetch = fail_fetch
        self.fail_upload = fail_upload
        self.calls: list[str] = []
        self.uploads: list[dict[str, dict[str, str]]] = []

    def resolve_branch(self, project: str, space: str, branch: str) -> str:
        self.calls.append("resolve_branch")
        return "branch-1"

    def fetch_translations(self, branch_id: str) -> RemoteTranslations:
        self.calls.append("fetch")
        if self.fail_fetch:
            raise RemoteError("connection refused", resource="translations")
        return RemoteTranslations(
            translations=copy.deepcopy(self.translations),
            languages=self.languages,
        )

    def upload_translations(
        self, branch_id: str, translations: dict[str, dict[str, str]]
    ) -> None:
        self.calls.append("upload")
        if self.fail_upload:
            raise RemoteError("HTTP 500", resource="translations", status_code=500)
        self.uploads.append(copy.deepcopy(translations))
        for lang, keys in translations.items():
            self.translations.setdefault(lang, {}).update(keys)


class ScriptedPrompter:
    """``ConflictPrompter`` returning pre-recorded answers in order."""

    def __init__(self, answers: list[Decision]) -> None:
        self.answers = list(answers)
        self.asked: list[ConflictEntry] = []

    def ask(
        self, conflict: ConflictEntry, position: int, total: int
    ) -> Decision:
        self.asked.append(conflict)
        return self.answers.pop(0)


@pytest.fixture
def make_options(tmp_path):
    """Factory for ``ResolvedOptions`` rooted in a temp directory."""

    def _make(**overrides: Any) -> ResolvedOptions:
        defaults: dict[str, Any] = {
            "api_url": "https://api.example.com",
            "project": "web",
            "space": "frontend",
            "branch": "main",
            "directory": tmp_path / "locales",
            "file_pattern": "{lang}.json",
            "format": "json",
            "nested": False,
            "indentation": 2,
        }
        defaults.update(overrides)
        return ResolvedOptions(**defaults)

    return _make


def write_json(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
