"""Solve step primitives shared by the solver, trace and renderers.

A step is one atomic action of the backtracking search: either a digit is
placed into an empty cell or a previously placed digit is retracted.  Steps
are ephemeral; renderers consume them as they are produced and
:func:`replay` re-applies a recorded sequence to a board.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Tuple

from .board import CELLS, EMPTY, Board, cell_position
from .errors import StepValidationError


class StepOp(str, Enum):
    """Kinds of search actions."""

    PLACE = "PLACE"
    RETRACT = "RETRACT"

    @classmethod
    def from_value(cls, value: object) -> "StepOp":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise StepValidationError(f"Unsupported step op: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class SolveStep:
    """Place ``digit`` at ``cell`` or retract it again."""

    op: StepOp
    cell: int
    digit: int

    def __post_init__(self) -> None:
        if not isinstance(self.op, StepOp):
            object.__setattr__(self, "op", StepOp.from_value(self.op))
        if not 0 <= int(self.cell) < CELLS:
            raise StepValidationError(f"cell must be in [0, 80], got {self.cell!r}")
        if not 1 <= int(self.digit) <= 9:
            raise StepValidationError(f"digit must be in [1, 9], got {self.digit!r}")

    @property
    def position(self) -> Tuple[int, int]:
        return cell_position(self.cell)

    @property
    def is_place(self) -> bool:
        return self.op is StepOp.PLACE

    def apply(self, board: Board) -> None:
        row, col = self.position
        board.set(row, col, self.digit if self.op is StepOp.PLACE else EMPTY)

    def to_payload(self) -> dict:
        return {"op": self.op.value, "cell": int(self.cell), "digit": int(self.digit)}


StepLike = SolveStep | Mapping[str, object]


def ensure_step(candidate: StepLike) -> SolveStep:
    """Normalise a step descriptor to :class:`SolveStep`."""

    if isinstance(candidate, SolveStep):
        return candidate
    if isinstance(candidate, Mapping):
        try:
            op = candidate["op"]
            cell = candidate["cell"]
            digit = candidate["digit"]
        except KeyError as exc:
            raise StepValidationError("step mapping is missing required keys") from exc
        return SolveStep(StepOp.from_value(op), int(cell), int(digit))  # type: ignore[arg-type]
    raise TypeError(f"Unsupported step descriptor: {type(candidate)!r}")


def replay(board: Board, steps: Iterable[StepLike]) -> Board:
    """Apply ``steps`` to ``board`` in order and return it."""

    for item in steps:
        ensure_step(item).apply(board)
    return board


__all__ = ["SolveStep", "StepLike", "StepOp", "ensure_step", "replay"]
