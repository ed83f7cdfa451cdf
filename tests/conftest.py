"""Shared test fixtures for textcat tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from textcat.profiles import ProfileRegistry

from corpora import (
    ENGLISH,
    ENGLISH_SENTENCE,
    ENGLISH_TEXT,
    FRENCH,
    FRENCH_SENTENCE,
    FRENCH_TEXT,
    GERMAN,
    GERMAN_TEXT,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TEXTCAT_* settings from the outer environment out of the tests."""
    for name in ("THRESHOLD_VALUE", "MAX_CANDIDATES", "MIN_DOC_SIZE"):
        monkeypatch.delenv(f"TEXTCAT_{name}", raising=False)


@pytest.fixture
def registry() -> ProfileRegistry:
    """Registry with English and French trained and enabled."""
    reg = ProfileRegistry()
    reg.train(ENGLISH, ENGLISH_TEXT)
    reg.train(FRENCH, FRENCH_TEXT)
    reg.enable_all()
    return reg


@pytest.fixture
def three_language_registry(registry: ProfileRegistry) -> ProfileRegistry:
    """English, French and German, all enabled."""
    registry.train(GERMAN, GERMAN_TEXT)
    registry.enable(GERMAN)
    return registry


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Directory holding the training texts and sample documents as files."""
    (tmp_path / "english.txt").write_text(ENGLISH_TEXT, encoding="utf-8")
    (tmp_path / "french.txt").write_text(FRENCH_TEXT, encoding="utf-8")
    (tmp_path / "doc_en.txt").write_text(ENGLISH_SENTENCE, encoding="utf-8")
    (tmp_path / "doc_fr.txt").write_text(FRENCH_SENTENCE, encoding="utf-8")
    (tmp_path / "short.txt").write_text("Too short.", encoding="utf-8")
    return tmp_path
