"""Sudoku solving engine: board state, backtracking search and solve steps."""

from __future__ import annotations

from .board import (
    CELLS,
    DIGITS,
    EMPTY,
    PEERS,
    SIZE,
    Board,
    box_index,
    cell_index,
    cell_position,
)
from .errors import (
    BoardValueError,
    InvalidPlacement,
    PresetFormatError,
    StepValidationError,
    SudokuError,
    TraceValidationError,
)
from .solver import (
    BacktrackingSearch,
    RunStatus,
    SolveResult,
    SolveRun,
    SolveStatus,
    StepSink,
    solve,
)
from .steps import SolveStep, StepLike, StepOp, ensure_step, replay
from .trace import StepTrace, TraceEntry

__all__ = [
    "BacktrackingSearch",
    "Board",
    "BoardValueError",
    "CELLS",
    "DIGITS",
    "EMPTY",
    "InvalidPlacement",
    "PEERS",
    "PresetFormatError",
    "RunStatus",
    "SIZE",
    "SolveResult",
    "SolveRun",
    "SolveStatus",
    "SolveStep",
    "StepLike",
    "StepOp",
    "StepSink",
    "StepTrace",
    "StepValidationError",
    "SudokuError",
    "TraceEntry",
    "TraceValidationError",
    "box_index",
    "cell_index",
    "cell_position",
    "ensure_step",
    "replay",
    "solve",
]
