from __future__ import annotations

import pytest

import project_config


def test_session_defaults_are_shipped() -> None:
    assert project_config.get_section("session.steps_per_tick") == 1
    assert project_config.get_section("session.default_preset") == "classic"


def test_missing_path_raises_or_returns_default() -> None:
    with pytest.raises(KeyError):
        project_config.get_section("session.no_such_key")
    assert project_config.get_section("render.no_such_key", 7) == 7


def test_config_path_can_be_overridden(tmp_path, monkeypatch) -> None:
    custom = tmp_path / "custom.toml"
    custom.write_text("[session]\nsteps_per_tick = 9\n", encoding="utf-8")
    monkeypatch.setenv("SUDOKU_CONFIG", str(custom))
    project_config.reload()
    try:
        assert project_config.get_section("session.steps_per_tick") == 9
    finally:
        monkeypatch.delenv("SUDOKU_CONFIG")
        project_config.reload()


def test_missing_file_yields_empty_config(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SUDOKU_CONFIG", str(tmp_path / "absent.toml"))
    project_config.reload()
    try:
        assert project_config.get_config() == {}
    finally:
        monkeypatch.delenv("SUDOKU_CONFIG")
        project_config.reload()
