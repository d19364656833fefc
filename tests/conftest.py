"""Pytest fixtures for ansispan tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest
from hypothesis import Phase, Verbosity, settings

from ansispan.cache import set_cache_size

settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=50,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """Path to a (not yet written) settings file."""
    return tmp_path / "ansispan.json"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Never read the user's settings file."""
    monkeypatch.setenv("ANSISPAN_SETTINGS", str(tmp_path / "missing.json"))


@pytest.fixture(autouse=True)
def _reset_cache_size() -> Iterator[None]:
    """The CLI resizes the shared conversion cache; put it back."""
    yield
    set_cache_size(256)
