"""Matplotlib rendering of boards and solve animations.

Frames are drawn on unit-square axes: the grid spans ``[0, 1]`` in both
directions with row 0 at the top.  Given cells are shaded, digits filled by
the solver use a separate colour, and the cell touched by the latest step can
be highlighted.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.patches import Rectangle

from engine.board import EMPTY, SIZE, Board, cell_position
from engine.steps import SolveStep, StepLike, ensure_step
from project_config import get_config

_DEFAULTS: Dict[str, Any] = {
    "dpi": 100,
    "cell_inches": 0.5,
    "given_color": "#ffff00",
    "cursor_color": "#c8c8c8",
    "highlight_color": "#c8ffc8",
    "solved_digit_color": "#1f4e99",
    "conflict_background": "#ffdcdc",
}
_STORYBOARD_DEFAULTS: Dict[str, int] = {"every": 25, "rows": 3, "cols": 4}


def render_settings() -> Dict[str, Any]:
    """Return the ``[render]`` section merged over the built-in defaults.

    Read on every call so a reloaded configuration takes effect.
    """

    section = get_config().get("render", {})
    if not isinstance(section, dict):
        section = {}
    settings = dict(_DEFAULTS)
    settings.update({key: section[key] for key in _DEFAULTS if key in section})
    board = section.get("storyboard", {})
    if not isinstance(board, dict):
        board = {}
    for key, default in _STORYBOARD_DEFAULTS.items():
        settings[f"storyboard_{key}"] = max(1, int(board.get(key, default)))
    return settings


Frame = Tuple[int, Tuple[int, ...], Optional[SolveStep]]


def _shade(ax, index: int, color: str) -> None:
    row, col = cell_position(index)
    ax.add_patch(Rectangle((col / SIZE, 1 - (row + 1) / SIZE), 1 / SIZE, 1 / SIZE, color=color, zorder=0))


def draw_board(
    ax,
    cells: Sequence[int] | Board,
    *,
    given: Iterable[int] = (),
    cursor: Tuple[int, int] | None = None,
    highlight: int | None = None,
    title: str | None = None,
) -> None:
    """Draw ``cells`` (81 values, row-major) onto ``ax``."""

    settings = render_settings()
    values = list(cells)
    given_set = set(given)
    board = cells if isinstance(cells, Board) else Board(values)

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect("equal")
    ax.axis("off")
    if not board.is_valid():
        ax.add_patch(Rectangle((0, 0), 1, 1, color=settings["conflict_background"], zorder=-1))

    if cursor is not None:
        _shade(ax, cursor[0] * SIZE + cursor[1], settings["cursor_color"])
    for index in sorted(given_set):
        if values[index] != EMPTY:
            _shade(ax, index, settings["given_color"])
    if highlight is not None:
        _shade(ax, highlight, settings["highlight_color"])

    for i in range(SIZE + 1):
        lw = 1.0 if i % 3 else 2.5
        ax.plot([i / SIZE, i / SIZE], [0, 1], color="k", linewidth=lw)
        ax.plot([0, 1], [i / SIZE, i / SIZE], color="k", linewidth=lw)

    bbox = ax.get_position()
    size_in = min(bbox.width * ax.figure.get_figwidth(), bbox.height * ax.figure.get_figheight())
    fs = max(4, int(0.6 * size_in * 72 / SIZE))  # font size scaled to grid
    for index, value in enumerate(values):
        if value == EMPTY:
            continue
        row, col = cell_position(index)
        color = "k" if index in given_set else settings["solved_digit_color"]
        ax.text((col + 0.5) / SIZE, 1 - (row + 0.5) / SIZE, str(value), ha="center", va="center", fontsize=fs, color=color)

    if title:
        ax.set_title(title, fontsize=max(6, fs - 2))


def export_png(
    board: Board | Sequence[int],
    path: str | Path,
    *,
    given: Iterable[int] = (),
    cursor: Tuple[int, int] | None = None,
    dpi: int | None = None,
) -> Path:
    """Write a single board image and return its path."""

    settings = render_settings()
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    side = float(settings["cell_inches"]) * SIZE
    fig = plt.figure(figsize=(side, side))
    try:
        ax = fig.add_axes([0.02, 0.02, 0.96, 0.96])
        draw_board(ax, board, given=given, cursor=cursor)
        fig.savefig(out_path, dpi=dpi or int(settings["dpi"]))
    finally:
        plt.close(fig)
    return out_path


def storyboard_frames(
    initial: Sequence[int] | Board,
    steps: Iterable[StepLike],
    *,
    every: int | None = None,
) -> List[Frame]:
    """Replay ``steps`` and sample ``(step_number, cells, last_step)`` frames.

    The initial board is frame 0; the final board is always included.
    """

    interval = max(1, every or render_settings()["storyboard_every"])
    board = Board(list(initial))
    frames: List[Frame] = [(0, board.snapshot(), None)]
    number = 0
    last: Optional[SolveStep] = None
    for item in steps:
        last = ensure_step(item)
        last.apply(board)
        number += 1
        if number % interval == 0:
            frames.append((number, board.snapshot(), last))
    if number and frames[-1][0] != number:
        frames.append((number, board.snapshot(), last))
    return frames


def export_storyboard(
    initial: Sequence[int] | Board,
    steps: Iterable[StepLike],
    path: str | Path,
    *,
    given: Iterable[int] | None = None,
    every: int | None = None,
    rows: int | None = None,
    cols: int | None = None,
) -> Path:
    """Write a multi-page PDF with sampled frames of a solve run."""

    settings = render_settings()
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    start = list(initial)
    given_cells = set(given) if given is not None else {i for i, v in enumerate(start) if v != EMPTY}
    frames = storyboard_frames(start, steps, every=every)

    n_rows = rows or settings["storyboard_rows"]
    n_cols = cols or settings["storyboard_cols"]
    per_page = n_rows * n_cols
    pages = max(1, math.ceil(len(frames) / per_page))
    side = float(settings["cell_inches"]) * SIZE * 0.6

    with PdfPages(out_path) as pdf:
        for page in range(pages):
            fig, axes = plt.subplots(n_rows, n_cols, figsize=(side * n_cols, side * n_rows * 1.1), squeeze=False)
            page_frames = frames[page * per_page:(page + 1) * per_page]
            for slot, ax in enumerate(axes.flat):
                if slot >= len(page_frames):
                    ax.axis("off")
                    continue
                number, cells, last = page_frames[slot]
                label = "start" if last is None else f"step {number}: {last.op.value.lower()} {last.digit}"
                draw_board(
                    ax,
                    cells,
                    given=given_cells,
                    highlight=None if last is None else last.cell,
                    title=label,
                )
            pdf.savefig(fig)
            plt.close(fig)
    return out_path


__all__ = ["draw_board", "export_png", "export_storyboard", "render_settings", "storyboard_frames"]
