"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from store_properties.config import settings as settings_module

SETTINGS_ENV_VARS = (
    "LOG_LEVEL",
    "JSON_LOGS",
    "DEFAULT_EXPANDED_PRIORITY",
    "PREDEFINED_PRIORITY_ONLY",
    "DEFAULT_ORDER_BY",
)


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory and return its config/ path."""
    monkeypatch.chdir(tmp_path)
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture(autouse=True)
def _reset_settings() -> Generator[None, None, None]:
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()
