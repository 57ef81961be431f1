"""Shared fixtures for the prefix-by-date tests."""

from pathlib import Path
from typing import Callable

import pytest

from prefix_by_date.core import Config, TimeMode, default_matcher_specs


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a file in the temporary directory."""

    def _make(name: str, content: str = "") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _make


@pytest.fixture
def config_only() -> Callable[..., Config]:
    """Build a config where only the named built-in matchers are enabled."""

    def _only(*names: str, time_mode: TimeMode = TimeMode.DATE_ONLY) -> Config:
        matchers = tuple(spec.with_enabled(spec.name in names) for spec in default_matcher_specs())
        return Config(time_mode=time_mode, matchers=matchers)

    return _only


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Empty configuration directory, also exported through the environment."""
    directory = tmp_path / "config"
    directory.mkdir()
    monkeypatch.setenv("PREFIX_BY_DATE_CONFIG", str(directory))
    return directory
