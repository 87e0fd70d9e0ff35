# tests/conftest.py
from __future__ import annotations

import pytest

from soroban.registry import discover
from soroban.runtime import reset


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Every test gets its own empty workspace and a fresh runtime."""
    ws = tmp_path / "ws"
    monkeypatch.setenv("SOROBAN_HOME", str(ws))
    reset()
    yield ws
    reset()


@pytest.fixture(scope="session")
def index():
    """Discover the packaged modes once."""
    return discover()
