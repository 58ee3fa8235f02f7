from __future__ import annotations

import json
import logging

import pytest

from engine.board import Board
from engine.errors import BoardValueError
from engine.solver import SolveStatus
from session import eventlog
from session.keymap import action_for_key
from session.session import Session

from sample_grids import CLASSIC, CLASSIC_SOLUTION, INKALA, INKALA_SOLUTION, ROW_CONFLICT


def _classic_session(**kwargs) -> Session:
    return Session(Board.from_string(CLASSIC), **kwargs)


def test_instant_solve_returns_result() -> None:
    session = _classic_session(visual=False)
    result = session.request_solve()

    assert result is not None and result.solved
    assert session.board.to_string() == CLASSIC_SOLUTION
    assert not session.solving
    assert session.last_result is result


def test_visual_solve_advances_per_tick() -> None:
    session = _classic_session(visual=True, steps_per_tick=5)

    assert session.request_solve() is None
    assert session.solving
    assert len(session.tick()) == 5
    assert len(session.tick(2)) == 2

    result = session.drain()
    assert result is not None and result.solved
    assert session.board.to_string() == CLASSIC_SOLUTION
    assert session.run is None


def test_visual_and_instant_modes_reach_same_board() -> None:
    instant = _classic_session(visual=False)
    visual = _classic_session(visual=True)
    instant.request_solve()
    visual.request_solve()
    visual.drain()

    assert instant.board == visual.board
    assert instant.last_result.steps == visual.last_result.steps


def test_manual_edit_cancels_active_run_and_keeps_progress() -> None:
    session = _classic_session(visual=True, rollback_on_cancel=False)
    session.request_solve()
    steps = session.tick(3)
    assert all(step.is_place for step in steps)

    session.edit_cell(8, 0, 3)

    assert not session.solving
    assert session.last_result is None
    assert session.board.get(8, 0) == 3
    assert 72 in session.given
    for step in steps:
        assert session.board[step.cell] == step.digit


def test_toggle_with_rollback_restores_board() -> None:
    session = _classic_session(visual=True, rollback_on_cancel=True)
    session.request_solve()
    session.tick(10)

    assert session.toggle_visual() is False
    assert not session.solving
    assert session.board.to_string() == CLASSIC


def test_second_solve_request_cancels_run() -> None:
    session = _classic_session(visual=True)
    session.request_solve()
    session.tick()

    assert session.request_solve() is None
    assert not session.solving
    assert session.last_result is None


def test_listeners_receive_every_step() -> None:
    received = []
    session = _classic_session(visual=False)
    session.add_step_listener(received.append)
    result = session.request_solve()

    assert len(received) == result.steps


def test_conflicting_preset_is_unsolvable_and_untouched() -> None:
    session = Session(visual=True)
    session.load_preset(ROW_CONFLICT)
    result = session.request_solve()

    assert result is not None
    assert result.status is SolveStatus.UNSOLVABLE
    assert result.reason == "conflict"
    assert session.board.to_string() == ROW_CONFLICT


def test_key_actions_drive_the_session() -> None:
    session = _classic_session(visual=False)

    assert session.apply(action_for_key("right"))
    assert session.cursor == (0, 1)
    session.apply(action_for_key("4"))
    assert session.board.get(0, 1) == 4
    assert 1 in session.given

    session.apply(action_for_key("backspace"))
    assert session.board.get(0, 1) == 0
    assert 1 not in session.given

    assert not session.apply(action_for_key("x"))


def test_load_preset_key_uses_default_preset() -> None:
    session = Session(visual=False)
    session.apply(action_for_key("t"))

    assert session.board.to_string() == CLASSIC
    assert len(session.given) == 30


def test_cursor_is_clamped_to_the_grid() -> None:
    session = Session(visual=False)
    assert session.move_cursor(-5, 20) == (0, 8)
    assert session.move_cursor(12, -1) == (8, 7)


def test_print_board_logs_layout(caplog) -> None:
    session = _classic_session(visual=False)
    with caplog.at_level(logging.INFO, logger="session.session"):
        text = session.print_board()

    assert text.splitlines()[0].startswith("+")
    assert text in caplog.text


def test_completed_solve_is_written_to_event_log(tmp_path) -> None:
    eventlog.configure(tmp_path / "events", enabled=True)
    session = _classic_session(visual=False)
    session.request_solve()

    path = eventlog.current_log_path()
    assert path is not None
    record = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert record["event"] == "solve.completed"
    assert record["mode"] == "instant"
    assert record["status"] == "SOLVED"
    assert record["initial"] == CLASSIC
    assert record["final"] == CLASSIC_SOLUTION


def test_visual_default_follows_environment() -> None:
    assert Session(env={"SUDOKU_VISUAL": "off"}).visual is False
    assert Session(profile="test").visual is False
    assert Session(profile="test", env={"CLI_SUDOKU_VISUAL": "1"}).visual is True


def test_solving_again_after_an_interrupted_run_discards_its_digits() -> None:
    session = Session(Board.from_string(INKALA), visual=True, rollback_on_cancel=False)
    session.request_solve()
    session.tick(60)
    session.request_solve()
    assert not session.solving
    assert session.board.to_string() != INKALA

    session.visual = False
    result = session.request_solve()

    assert result is not None and result.solved
    assert session.board.to_string() == INKALA_SOLUTION


def test_digits_typed_after_an_interrupted_run_are_kept() -> None:
    session = Session(Board.from_string(INKALA), visual=True, rollback_on_cancel=False)
    session.request_solve()
    session.tick(30)
    session.edit_cell(8, 8, int(INKALA_SOLUTION[80]))

    result = session.request_solve()
    assert result is None
    result = session.drain()

    assert result is not None and result.solved
    assert session.board.to_string() == INKALA_SOLUTION
    assert 80 in session.given


def test_unknown_preset_name_lists_available_presets() -> None:
    session = _classic_session(visual=False)
    with pytest.raises(KeyError, match="classic"):
        session.load_preset("classik")
    assert session.board.to_string() == CLASSIC


def test_invalid_edit_does_not_interrupt_the_run() -> None:
    session = _classic_session(visual=True)
    session.request_solve()
    session.tick()

    with pytest.raises(BoardValueError):
        session.edit_cell(0, 2, 10)
    with pytest.raises(BoardValueError):
        session.edit_cell(9, 0, 1)

    assert session.solving
    assert session.drain().solved
