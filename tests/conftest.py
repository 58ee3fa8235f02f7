from __future__ import annotations

import os

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from feature_flags import reload as reload_features
from project_config import reload as reload_config
from session import eventlog


@pytest.fixture(autouse=True)
def _reset_runtime_state(tmp_path, monkeypatch):
    for name in ("SUDOKU_CONFIG", "SUDOKU_VISUAL", "CLI_SUDOKU_VISUAL"):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    reload_features()
    eventlog.configure(tmp_path / "solves", enabled=False)
    yield
    reload_config()
    eventlog.configure(tmp_path / "solves", enabled=False)
