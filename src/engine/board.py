"""9×9 Sudoku board with constraint queries.

Cells are addressed either by ``(row, col)`` with both coordinates in
``0..8`` or by the row-major cell index ``row * 9 + col``.  ``0`` marks an
empty cell.  The board never enforces legality on :meth:`Board.set`; callers
that need the Sudoku invariant (the solver) check :meth:`Board.is_legal`
first.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence, Tuple

from .errors import BoardValueError

SIZE = 9
BOX = 3
CELLS = SIZE * SIZE
EMPTY = 0
DIGITS = tuple(range(1, SIZE + 1))


def cell_index(row: int, col: int) -> int:
    return row * SIZE + col


def cell_position(index: int) -> Tuple[int, int]:
    return divmod(index, SIZE)


def box_index(row: int, col: int) -> int:
    return (row // BOX) * BOX + (col // BOX)


def _build_peers() -> Tuple[Tuple[int, ...], ...]:
    table = []
    for index in range(CELLS):
        row, col = cell_position(index)
        peers = set()
        for k in range(SIZE):
            peers.add(cell_index(row, k))
            peers.add(cell_index(k, col))
        r0, c0 = BOX * (row // BOX), BOX * (col // BOX)
        for dr in range(BOX):
            for dc in range(BOX):
                peers.add(cell_index(r0 + dr, c0 + dc))
        peers.discard(index)
        table.append(tuple(sorted(peers)))
    return tuple(table)


# 20 peers per cell: same row, column or box, excluding the cell itself.
PEERS = _build_peers()


def _check_position(row: int, col: int) -> None:
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise BoardValueError(f"cell ({row}, {col}) is outside the 9x9 board")


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BoardValueError(f"cell value must be an int, got {value!r}")
    if not EMPTY <= value <= SIZE:
        raise BoardValueError(f"cell value must be in [0, 9], got {value!r}")
    return value


def check_cell(row: int, col: int, value: int) -> int:
    """Validate a cell write without touching any board."""

    _check_position(row, col)
    return _check_value(value)


class Board:
    """Mutable grid of 81 cells."""

    __slots__ = ("_cells",)

    def __init__(self, values: Iterable[int] | None = None) -> None:
        self._cells: List[int] = [EMPTY] * CELLS
        if values is not None:
            self.load(values)

    # Construction -----------------------------------------------------

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Parse 81 characters; ``0`` or ``.`` mark empty cells.

        Whitespace and the ``|``/``-``/``+`` characters of :meth:`format`
        output are ignored.
        """

        cleaned = [ch for ch in text if not ch.isspace() and ch not in "|-+"]
        if len(cleaned) != CELLS:
            raise BoardValueError(f"expected 81 cells, got {len(cleaned)}")
        values = []
        for ch in cleaned:
            if ch == ".":
                values.append(EMPTY)
            elif ch in "0123456789":
                values.append(int(ch))
            else:
                raise BoardValueError(f"unexpected character {ch!r} in board text")
        return cls(values)

    def load(self, values: Iterable[int]) -> None:
        """Replace all 81 cells in row-major order."""

        cells = [_check_value(value) for value in values]
        if len(cells) != CELLS:
            raise BoardValueError(f"expected 81 cells, got {len(cells)}")
        self._cells = cells

    def copy(self) -> "Board":
        return Board(self._cells)

    # Cell access ------------------------------------------------------

    def get(self, row: int, col: int) -> int:
        _check_position(row, col)
        return self._cells[cell_index(row, col)]

    def set(self, row: int, col: int, value: int) -> None:
        _check_position(row, col)
        self._cells[cell_index(row, col)] = _check_value(value)

    def clear(self, row: int, col: int) -> None:
        self.set(row, col, EMPTY)

    def __getitem__(self, index: int) -> int:
        return self._cells[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def __len__(self) -> int:
        return CELLS

    # Constraint queries -----------------------------------------------

    def is_legal(self, row: int, col: int, digit: int) -> bool:
        """Return ``True`` iff no peer of ``(row, col)`` currently holds ``digit``."""

        _check_position(row, col)
        if not 1 <= digit <= SIZE:
            raise BoardValueError(f"digit must be in [1, 9], got {digit!r}")
        cells = self._cells
        return all(cells[peer] != digit for peer in PEERS[cell_index(row, col)])

    def candidates(self, row: int, col: int) -> Tuple[int, ...]:
        """Ascending digits legal at an empty cell; empty for a filled cell."""

        _check_position(row, col)
        index = cell_index(row, col)
        if self._cells[index] != EMPTY:
            return ()
        taken = {self._cells[peer] for peer in PEERS[index]}
        return tuple(digit for digit in DIGITS if digit not in taken)

    def is_complete(self) -> bool:
        return EMPTY not in self._cells

    def conflicts(self) -> List[Tuple[int, int]]:
        """Return ``(a, b)`` index pairs of peers sharing a digit, ``a < b``."""

        cells = self._cells
        pairs = []
        for index, value in enumerate(cells):
            if value == EMPTY:
                continue
            for peer in PEERS[index]:
                if peer > index and cells[peer] == value:
                    pairs.append((index, peer))
        return pairs

    def is_valid(self) -> bool:
        return not self.conflicts()

    def is_solved(self) -> bool:
        return self.is_complete() and self.is_valid()

    def empty_cells(self) -> List[int]:
        return [index for index, value in enumerate(self._cells) if value == EMPTY]

    # Views ------------------------------------------------------------

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def rows(self) -> List[List[int]]:
        return [self._cells[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]

    def to_string(self) -> str:
        return "".join(str(value) for value in self._cells)

    def format(self) -> str:
        """Pretty grid with box separators, ``.`` for empty cells."""

        lines = []
        for r, row in enumerate(self.rows()):
            if r % BOX == 0:
                lines.append("+-------+-------+-------+")
            parts: List[str] = []
            for c, value in enumerate(row):
                if c % BOX == 0:
                    parts.append("|")
                parts.append(str(value) if value != EMPTY else ".")
            parts.append("|")
            lines.append(" ".join(parts))
        lines.append("+-------+-------+-------+")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Board):
            return self._cells == other._cells
        if isinstance(other, Sequence) and not isinstance(other, str):
            return list(other) == self._cells
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"


__all__ = [
    "BOX",
    "Board",
    "CELLS",
    "DIGITS",
    "EMPTY",
    "PEERS",
    "SIZE",
    "box_index",
    "cell_index",
    "cell_position",
    "check_cell",
]
