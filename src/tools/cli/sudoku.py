"""Command line front-end for the Sudoku solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, TextIO

from engine.board import Board, cell_position
from engine.solver import SolveRun
from engine.steps import SolveStep
from engine.trace import StepTrace
from presets import load_preset, parse_preset, preset_names
from render.plot import export_png, export_storyboard
from session import eventlog
from session.session import Session

_LOGGER = logging.getLogger(__name__)


def _board_from_args(args: argparse.Namespace) -> Board:
    if args.grid:
        return Board(parse_preset(args.grid))
    return Board(load_preset(args.preset))


def _format_step(step: SolveStep) -> str:
    row, col = cell_position(step.cell)
    return f"{step.op.value:<7} r{row + 1}c{col + 1} = {step.digit}"


def _print_steps(steps: List[SolveStep], out: TextIO) -> None:
    for step in steps:
        print(_format_step(step), file=out)


def cmd_solve(args: argparse.Namespace) -> int:
    session = Session(_board_from_args(args), visual=args.visual, profile=args.profile)
    trace = StepTrace()
    if args.trace:
        session.add_step_listener(trace)

    result = session.request_solve()
    while session.solving:
        _print_steps(session.tick(), sys.stdout)
        if args.delay:
            time.sleep(args.delay)
    if result is None:
        result = session.last_result

    if args.trace:
        Path(args.trace).write_text(trace.to_json(indent=2), encoding="utf-8")
    if args.png:
        export_png(session.board, args.png, given=session.given)

    print(session.board.format())
    print(json.dumps(result.to_payload() if result else {}, indent=2, sort_keys=True))
    return 0 if result is not None and result.solved else 1


def cmd_presets(args: argparse.Namespace) -> int:
    for name in preset_names():
        print(name)
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    board = _board_from_args(args)
    given = [index for index, value in enumerate(board) if value]
    if not args.storyboard:
        path = export_png(board, args.out, given=given)
        print(path)
        return 0

    initial = board.snapshot()
    trace = StepTrace()
    run = SolveRun(board, sink=trace)
    for _ in run:
        pass
    path = export_storyboard(initial, trace.steps(), args.out, given=given, every=args.every)
    print(path)
    return 0 if run.result is not None and run.result.solved else 1


def _add_board_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", default="classic", help="Name of a built-in preset (default: classic)")
    source.add_argument("--grid", default=None, help="81 cells in row-major order, 0 or . for empty")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive Sudoku solver tools")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve a puzzle and print the result")
    _add_board_source(solve)
    solve.add_argument(
        "--visual",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print every search step while solving (default: features.toml, SUDOKU_VISUAL)",
    )
    solve.add_argument("--profile", default=None, help="Feature profile used when --visual is not given")
    solve.add_argument("--delay", type=float, default=0.0, help="Pause between visual steps, seconds")
    solve.add_argument("--trace", default=None, help="Write the step trace as JSON to this path")
    solve.add_argument("--png", default=None, help="Write an image of the final board to this path")
    solve.set_defaults(func=cmd_solve)

    presets = sub.add_parser("presets", help="List built-in presets")
    presets.set_defaults(func=cmd_presets)

    render = sub.add_parser("render", help="Render a board image or a solve storyboard")
    _add_board_source(render)
    render.add_argument("--out", required=True, help="Output PNG (board) or PDF (storyboard) path")
    render.add_argument("--storyboard", action="store_true", help="Render sampled frames of the solve run")
    render.add_argument("--every", type=int, default=None, help="Steps between storyboard frames")
    render.set_defaults(func=cmd_render)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    eventlog.configure_from_config()
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
