from __future__ import annotations

import pytest

from engine.board import Board
from engine.errors import PresetFormatError
from engine.solver import solve
from presets import PRESETS, load_preset, parse_preset, preset_names

from sample_grids import CLASSIC


def test_named_presets_are_listed_sorted() -> None:
    names = preset_names()
    assert names == sorted(PRESETS)
    assert {"classic", "empty", "inkala", "nearly-complete"} <= set(names)


def test_classic_preset_values() -> None:
    assert "".join(map(str, load_preset("classic"))) == CLASSIC


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_every_preset_is_solvable(name: str) -> None:
    board = Board(load_preset(name))
    assert solve(board).solved
    assert board.is_solved()


def test_unknown_preset_names_available_ones() -> None:
    with pytest.raises(KeyError, match="classic"):
        load_preset("missing")


def test_parse_accepts_dots_and_whitespace() -> None:
    text = "\n".join(". " * 9 for _ in range(9))
    assert parse_preset(text) == [0] * 81


@pytest.mark.parametrize(
    "data",
    ["1" * 80, "x" * 81, "\u00b2" + "0" * 80, "\u0663" + "0" * 80, [0] * 82, [10] + [0] * 80, [True] + [0] * 80],
)
def test_parse_rejects_malformed_presets(data) -> None:
    with pytest.raises(PresetFormatError):
        parse_preset(data)


def test_contradictory_preset_is_accepted() -> None:
    values = parse_preset("55" + "0" * 79)
    assert values[:2] == [5, 5]
