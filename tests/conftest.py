from __future__ import annotations

import pytest

from bigfib import runtime


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own workspace and a fresh runtime."""
    ws = tmp_path / "workspace"
    monkeypatch.setenv("BIGFIB_HOME", str(ws))
    runtime.reset()
    yield ws
    runtime.reset()
