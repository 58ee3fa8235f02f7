"""Shared error types for the Sudoku engine."""

from __future__ import annotations


class SudokuError(Exception):
    """Base class for all errors raised by the engine and its adapters."""


class BoardValueError(SudokuError, ValueError):
    """Raised when a row, column or cell value is outside the 9×9 board."""


class InvalidPlacement(SudokuError):
    """Raised by the search when a trial digit collides with a peer.

    The search catches it and moves on to the next candidate; it never leaves
    the solver.
    """

    def __init__(self, cell: int, digit: int) -> None:
        super().__init__(f"digit {digit} is not legal at cell {cell}")
        self.cell = cell
        self.digit = digit


class StepValidationError(SudokuError, ValueError):
    """Raised when a solve step payload is malformed."""


class TraceValidationError(SudokuError, ValueError):
    """Raised when a recorded trace entry breaks the ordering contract."""


class PresetFormatError(SudokuError, ValueError):
    """Raised when a preset is not 81 values in the range 0..9."""


__all__ = [
    "BoardValueError",
    "InvalidPlacement",
    "PresetFormatError",
    "StepValidationError",
    "SudokuError",
    "TraceValidationError",
]
