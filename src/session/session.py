"""Interactive session state owned by the input/render adapter."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Mapping, Optional, Set, Tuple

from engine.board import EMPTY, SIZE, Board, cell_index, cell_position, check_cell
from engine.solver import SolveResult, SolveRun, StepSink, solve
from engine.steps import SolveStep
from feature_flags import is_visual_mode_enabled
from presets import PRESETS, PresetData, load_preset, parse_preset
from project_config import get_config

from . import eventlog
from .keymap import Action, ActionKind

_LOGGER = logging.getLogger(__name__)


def _session_config() -> dict:
    section = get_config().get("session", {})
    return section if isinstance(section, dict) else {}


class Session:
    """Board, cursor and solve mode of one interactive session.

    Only one actor mutates the board at a time: any manual edit, preset load,
    mode toggle or repeated solve request cancels an active visual run first.
    Digits an interrupted run leaves behind stay on the board until the next
    solve request, which clears them before searching again.
    """

    def __init__(
        self,
        board: Board | None = None,
        *,
        visual: bool | None = None,
        steps_per_tick: int | None = None,
        rollback_on_cancel: bool | None = None,
        env: Mapping[str, str] | None = None,
        profile: str | None = None,
    ) -> None:
        config = _session_config()
        self.board = board if board is not None else Board()
        self.cursor: Tuple[int, int] = (0, 0)
        self.given: Set[int] = {index for index, value in enumerate(self.board) if value != EMPTY}
        if visual is None:
            visual = is_visual_mode_enabled(os.environ if env is None else env, profile=profile)
        self.visual = visual
        self.steps_per_tick = max(1, int(steps_per_tick or config.get("steps_per_tick", 1)))
        if rollback_on_cancel is None:
            rollback_on_cancel = bool(config.get("rollback_on_cancel", False))
        self.rollback_on_cancel = rollback_on_cancel
        self.default_preset = str(config.get("default_preset", "classic"))
        self.run: Optional[SolveRun] = None
        self.last_result: Optional[SolveResult] = None
        self._listeners: List[StepSink] = []
        self._leftovers: Set[int] = set()

    # Queries ----------------------------------------------------------

    @property
    def solving(self) -> bool:
        return self.run is not None and not self.run.finished

    def snapshot(self) -> Tuple[int, ...]:
        return self.board.snapshot()

    def add_step_listener(self, listener: StepSink) -> None:
        """Register a callable that receives every solve step."""

        self._listeners.append(listener)

    # Editing ----------------------------------------------------------

    def move_cursor(self, d_row: int, d_col: int) -> Tuple[int, int]:
        row = min(max(self.cursor[0] + d_row, 0), SIZE - 1)
        col = min(max(self.cursor[1] + d_col, 0), SIZE - 1)
        self.cursor = (row, col)
        return self.cursor

    def write(self, digit: int) -> None:
        self.edit_cell(*self.cursor, digit)

    def erase(self) -> None:
        self.edit_cell(*self.cursor, EMPTY)

    def edit_cell(self, row: int, col: int, value: int) -> None:
        """Set a cell by hand; legality is not enforced."""

        check_cell(row, col, value)
        self._interrupt("edit")
        self.board.set(row, col, value)
        index = cell_index(row, col)
        self._leftovers.discard(index)
        if value == EMPTY:
            self.given.discard(index)
        else:
            self.given.add(index)
        self.last_result = None

    def load_preset(self, preset: str | PresetData | None = None) -> None:
        """Replace the board with a named preset or 81 raw values."""

        if preset is None:
            preset = self.default_preset
        if isinstance(preset, str) and (preset in PRESETS or len("".join(preset.split())) != SIZE * SIZE):
            values = load_preset(preset)
        else:
            values = parse_preset(preset)
        self._interrupt("preset")
        self.board.load(values)
        self.given = {index for index, value in enumerate(values) if value != EMPTY}
        self._leftovers.clear()
        self.last_result = None
        _LOGGER.info("loaded preset with %d given cells", len(self.given))

    def toggle_visual(self) -> bool:
        self._interrupt("toggle")
        self.visual = not self.visual
        _LOGGER.info("visual solving %s", "enabled" if self.visual else "disabled")
        return self.visual

    # Solving ----------------------------------------------------------

    def request_solve(self) -> Optional[SolveResult]:
        """Start a solve in the current mode.

        Instant mode returns the result immediately.  Visual mode starts a run
        that :meth:`tick` advances and returns ``None`` until it finishes.  A
        request while a run is active cancels that run instead.
        """

        if self.solving:
            self.cancel_solve()
            return None

        self._clear_leftovers()
        if not self.visual:
            initial = self.board.to_string()
            result = solve(self.board, sink=self._dispatch if self._listeners else None)
            self._finalize(result, mode="instant", initial=initial)
            return result

        self.run = SolveRun(self.board, sink=self._dispatch)
        _LOGGER.debug("visual run started with %d empty cells", len(self.board.empty_cells()))
        if self.run.finished:
            return self._finish_run()
        return None

    def tick(self, max_steps: int | None = None) -> List[SolveStep]:
        """Advance the active visual run by up to ``steps_per_tick`` steps."""

        run = self.run
        if run is None or run.finished:
            return []
        steps = run.advance_many(max_steps if max_steps is not None else self.steps_per_tick)
        if run.finished:
            self._finish_run()
        return steps

    def drain(self) -> Optional[SolveResult]:
        """Run the active visual run to completion."""

        while self.solving:
            self.tick(self.steps_per_tick)
        return self.last_result

    def cancel_solve(self, *, rollback: bool | None = None) -> Tuple[SolveStep, ...]:
        run = self.run
        if run is None or run.finished:
            return ()
        rollback = self.rollback_on_cancel if rollback is None else rollback
        retracted = run.cancel(rollback=rollback)
        self.run = None
        if not rollback:
            self._leftovers.update(
                index for index, value in enumerate(self.board) if value != EMPTY and index not in self.given
            )
        _LOGGER.info("solve cancelled (rollback=%s)", rollback)
        return retracted

    def print_board(self) -> str:
        text = self.board.format()
        _LOGGER.info("current board:\n%s", text)
        return text

    # Dispatch ---------------------------------------------------------

    def apply(self, action: Action) -> bool:
        """Execute an input action; returns ``True`` when a redraw is needed."""

        kind = action.kind
        if kind is ActionKind.MOVE:
            self.move_cursor(action.d_row, action.d_col)
        elif kind is ActionKind.WRITE:
            self.write(action.digit)
        elif kind is ActionKind.ERASE:
            self.erase()
        elif kind is ActionKind.SOLVE:
            self.request_solve()
        elif kind is ActionKind.TOGGLE_VISUAL:
            self.toggle_visual()
        elif kind is ActionKind.PRINT_BOARD:
            self.print_board()
        elif kind is ActionKind.LOAD_PRESET:
            self.load_preset()
        else:
            return False
        return True

    def apply_all(self, actions: Iterable[Action]) -> None:
        for action in actions:
            self.apply(action)

    # Internal helpers -------------------------------------------------

    def _dispatch(self, step: SolveStep) -> None:
        for listener in self._listeners:
            listener(step)

    def _interrupt(self, reason: str) -> None:
        if self.solving:
            _LOGGER.debug("interrupting active run: %s", reason)
            self.cancel_solve()

    def _clear_leftovers(self) -> None:
        if not self._leftovers:
            return
        for index in sorted(self._leftovers):
            self.board.clear(*cell_position(index))
        _LOGGER.debug("cleared %d digits left by an interrupted run", len(self._leftovers))
        self._leftovers.clear()

    def _finish_run(self) -> Optional[SolveResult]:
        run = self.run
        self.run = None
        if run is None or run.result is None:
            return None
        initial = Board(run.initial).to_string()
        self._finalize(run.result, mode="visual", initial=initial)
        return run.result

    def _finalize(self, result: SolveResult, *, mode: str, initial: str) -> None:
        self.last_result = result
        if result.solved:
            _LOGGER.info("solved in %d steps (%s mode)", result.steps, mode)
        else:
            _LOGGER.warning("board is unsolvable (%s)", result.reason)
        eventlog.append_event(
            {
                "event": "solve.completed",
                "mode": mode,
                "initial": initial,
                "final": self.board.to_string(),
                **result.to_payload(),
            }
        )


__all__ = ["Session"]
