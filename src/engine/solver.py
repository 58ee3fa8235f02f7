"""Backtracking Sudoku solver.

The search is a depth-first walk over empty cells driven by an explicit
stack of frames.  Each frame remembers the selected cell, its candidate
digits (ascending) and the digit currently placed there.  Cells are picked
with the minimum-remaining-values rule; ties go to the lowest row-major
index, so a given board always produces the same step sequence.

Instant solving (:func:`solve`) and visual solving (:class:`SolveRun`) drive
the same :class:`BacktrackingSearch`; the only difference is how often the
caller hands control back to its render loop.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from .board import CELLS, DIGITS, EMPTY, SIZE, Board, box_index, cell_position
from .errors import InvalidPlacement
from .steps import SolveStep, StepOp

_LOGGER = logging.getLogger(__name__)

StepSink = Callable[[SolveStep], None]

FULL_MASK = (1 << SIZE) - 1

_ROW_OF = tuple(cell_position(index)[0] for index in range(CELLS))
_COL_OF = tuple(cell_position(index)[1] for index in range(CELLS))
_BOX_OF = tuple(box_index(*cell_position(index)) for index in range(CELLS))


def _bit(digit: int) -> int:
    return 1 << (digit - 1)


def _mask_digits(mask: int) -> Tuple[int, ...]:
    return tuple(digit for digit in DIGITS if mask & _bit(digit))


class SolveStatus(str, Enum):
    """Final outcome of a solve request."""

    SOLVED = "SOLVED"
    UNSOLVABLE = "UNSOLVABLE"


class RunStatus(str, Enum):
    """Lifecycle of a stepped search."""

    RUNNING = "RUNNING"
    SOLVED = "SOLVED"
    UNSOLVABLE = "UNSOLVABLE"
    CANCELLED = "CANCELLED"


REASON_SOLVED = "solved"
REASON_CONFLICT = "conflict"
REASON_EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class SolveResult:
    """Summary of a finished search."""

    status: SolveStatus
    reason: str
    steps: int
    placements: int
    retractions: int
    conflicts: Tuple[Tuple[int, int], ...] = ()
    elapsed_ms: float = 0.0

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    def to_payload(self) -> dict:
        return {
            "status": self.status.value,
            "reason": self.reason,
            "steps": self.steps,
            "placements": self.placements,
            "retractions": self.retractions,
            "conflicts": [list(pair) for pair in self.conflicts],
            "elapsed_ms": round(self.elapsed_ms, 3),
        }


@dataclass
class _Frame:
    cell: int
    digits: Tuple[int, ...]
    cursor: int = 0
    placed: int = EMPTY


class BacktrackingSearch:
    """Explicit-stack MRV search that advances one step per call.

    The board is mutated in place.  Between two calls to :meth:`advance` the
    board always holds the fixed cells plus the digits of the current search
    path, so the search can be abandoned at any point.
    """

    def __init__(self, board: Board, *, sink: Optional[StepSink] = None) -> None:
        self.board = board
        self._sink = sink
        self._stack: List[_Frame] = []
        self._descend = True
        self._started = time.perf_counter()
        self._elapsed_ms = 0.0
        self.steps = 0
        self.placements = 0
        self.retractions = 0

        self._row_mask = [0] * SIZE
        self._col_mask = [0] * SIZE
        self._box_mask = [0] * SIZE
        self._order = board.empty_cells()

        self._conflicts = tuple(board.conflicts())
        if self._conflicts:
            self._status = RunStatus.UNSOLVABLE
            self._reason = REASON_CONFLICT
            self._finish()
            return

        self._status = RunStatus.RUNNING
        self._reason = ""
        for index, value in enumerate(board):
            if value != EMPTY:
                self._mark(index, value)

    # Public API -------------------------------------------------------

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def finished(self) -> bool:
        return self._status is not RunStatus.RUNNING

    @property
    def depth(self) -> int:
        return len(self._stack)

    def advance(self) -> Optional[SolveStep]:
        """Perform one placement or retraction.

        Returns the step taken, or ``None`` once the search has finished
        (solved, exhausted or cancelled).
        """

        if self._status is not RunStatus.RUNNING:
            return None

        if self._descend:
            self._descend = False
            selection = self._select()
            if selection is None:
                self._status = RunStatus.SOLVED
                self._reason = REASON_SOLVED
                self._finish()
                return None
            cell, mask = selection
            self._stack.append(_Frame(cell=cell, digits=_mask_digits(mask)))

        while self._stack:
            frame = self._stack[-1]
            if frame.placed != EMPTY:
                digit = frame.placed
                self._unplace(frame.cell, digit)
                frame.placed = EMPTY
                return self._emit(StepOp.RETRACT, frame.cell, digit)

            while frame.cursor < len(frame.digits):
                digit = frame.digits[frame.cursor]
                frame.cursor += 1
                try:
                    self._place(frame.cell, digit)
                except InvalidPlacement:
                    continue
                frame.placed = digit
                self._descend = True
                return self._emit(StepOp.PLACE, frame.cell, digit)

            self._stack.pop()

        self._status = RunStatus.UNSOLVABLE
        self._reason = REASON_EXHAUSTED
        self._finish()
        return None

    def cancel(self, *, rollback: bool = False) -> Tuple[SolveStep, ...]:
        """Abandon the search.

        Without ``rollback`` the board keeps the digits of the current search
        path.  With ``rollback`` those digits are retracted innermost first and
        the retract steps are returned (and passed to the sink).
        """

        if self._status is not RunStatus.RUNNING:
            return ()
        retracted: List[SolveStep] = []
        if rollback:
            while self._stack:
                frame = self._stack.pop()
                if frame.placed != EMPTY:
                    digit = frame.placed
                    self._unplace(frame.cell, digit)
                    frame.placed = EMPTY
                    retracted.append(self._emit(StepOp.RETRACT, frame.cell, digit))
        self._stack.clear()
        self._status = RunStatus.CANCELLED
        self._reason = "cancelled"
        self._finish()
        _LOGGER.debug("search cancelled after %d steps (rollback=%s)", self.steps, rollback)
        return tuple(retracted)

    def result(self) -> SolveResult:
        """Return the outcome of a finished search."""

        if self._status is RunStatus.SOLVED:
            status = SolveStatus.SOLVED
        elif self._status is RunStatus.UNSOLVABLE:
            status = SolveStatus.UNSOLVABLE
        else:
            raise RuntimeError(f"search has no result in state {self._status.value}")
        return SolveResult(
            status=status,
            reason=self._reason,
            steps=self.steps,
            placements=self.placements,
            retractions=self.retractions,
            conflicts=self._conflicts,
            elapsed_ms=self._elapsed_ms,
        )

    # Internal helpers -------------------------------------------------

    def _candidate_mask(self, index: int) -> int:
        used = (
            self._row_mask[_ROW_OF[index]]
            | self._col_mask[_COL_OF[index]]
            | self._box_mask[_BOX_OF[index]]
        )
        return FULL_MASK & ~used

    def _select(self) -> Optional[Tuple[int, int]]:
        # MRV; strict comparison keeps the lowest index on ties.
        best: Optional[Tuple[int, int]] = None
        best_count = SIZE + 1
        board = self.board
        for index in self._order:
            if board[index] != EMPTY:
                continue
            mask = self._candidate_mask(index)
            count = mask.bit_count()
            if count < best_count:
                best = (index, mask)
                best_count = count
                if count == 0:
                    break
        return best

    def _mark(self, index: int, digit: int) -> None:
        bit = _bit(digit)
        self._row_mask[_ROW_OF[index]] |= bit
        self._col_mask[_COL_OF[index]] |= bit
        self._box_mask[_BOX_OF[index]] |= bit

    def _place(self, index: int, digit: int) -> None:
        row, col = _ROW_OF[index], _COL_OF[index]
        if not self.board.is_legal(row, col, digit):
            raise InvalidPlacement(index, digit)
        self.board.set(row, col, digit)
        self._mark(index, digit)
        self.placements += 1

    def _unplace(self, index: int, digit: int) -> None:
        bit = _bit(digit)
        self.board.set(_ROW_OF[index], _COL_OF[index], EMPTY)
        self._row_mask[_ROW_OF[index]] &= ~bit
        self._col_mask[_COL_OF[index]] &= ~bit
        self._box_mask[_BOX_OF[index]] &= ~bit
        self.retractions += 1

    def _emit(self, op: StepOp, cell: int, digit: int) -> SolveStep:
        step = SolveStep(op, cell, digit)
        self.steps += 1
        if self._sink is not None:
            self._sink(step)
        return step

    def _finish(self) -> None:
        self._elapsed_ms = (time.perf_counter() - self._started) * 1000.0


class SolveRun:
    """Lazy, cancellable step sequence of one solve attempt.

    Iterating the run drives the search one step at a time; the caller decides
    the pacing.  Each instance is a fresh run over the board state it was
    created with.
    """

    def __init__(self, board: Board, *, sink: Optional[StepSink] = None) -> None:
        self.initial = board.snapshot()
        self._search = BacktrackingSearch(board, sink=sink)

    @property
    def board(self) -> Board:
        return self._search.board

    @property
    def status(self) -> RunStatus:
        return self._search.status

    @property
    def finished(self) -> bool:
        return self._search.finished

    @property
    def result(self) -> Optional[SolveResult]:
        if self._search.status in (RunStatus.SOLVED, RunStatus.UNSOLVABLE):
            return self._search.result()
        return None

    def advance(self) -> Optional[SolveStep]:
        return self._search.advance()

    def advance_many(self, count: int) -> List[SolveStep]:
        """Advance up to ``count`` steps; fewer are returned once finished."""

        taken: List[SolveStep] = []
        for _ in range(max(0, count)):
            step = self._search.advance()
            if step is None:
                break
            taken.append(step)
        return taken

    def cancel(self, *, rollback: bool = False) -> Tuple[SolveStep, ...]:
        return self._search.cancel(rollback=rollback)

    def __iter__(self) -> Iterator[SolveStep]:
        while True:
            step = self._search.advance()
            if step is None:
                return
            yield step


def solve(board: Board, *, sink: Optional[StepSink] = None) -> SolveResult:
    """Solve ``board`` in place.

    On success the board holds a complete valid grid that keeps every cell
    filled before the call.  On failure the board is left exactly as it was.
    ``sink`` receives every step in execution order.
    """

    search = BacktrackingSearch(board, sink=sink)
    while search.advance() is not None:
        pass
    result = search.result()
    _LOGGER.debug(
        "solve finished: status=%s reason=%s steps=%d",
        result.status.value,
        result.reason,
        result.steps,
    )
    return result


__all__ = [
    "BacktrackingSearch",
    "FULL_MASK",
    "REASON_CONFLICT",
    "REASON_EXHAUSTED",
    "REASON_SOLVED",
    "RunStatus",
    "SolveResult",
    "SolveRun",
    "SolveStatus",
    "StepSink",
    "solve",
]
