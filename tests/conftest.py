# tests/conftest.py

"""Shared pytest fixtures for all shopfront tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from shopfront.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point log and session files at a per-test temp directory."""
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(
        Settings, "TOKEN_STORE_PATH", tmp_path / "data" / "session.json"
    )
    yield
