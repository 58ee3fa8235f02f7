"""Built-in preset puzzles and the 81-value preset parser."""

from __future__ import annotations

from typing import Dict, List, Sequence, Union

from engine.errors import PresetFormatError

# Row-major, "0" marks an empty cell.
PRESETS: Dict[str, str] = {
    "classic": (
        "530070000"
        "600195000"
        "098000060"
        "800060003"
        "400803001"
        "700020006"
        "060000280"
        "000419005"
        "000080079"
    ),
    "nearly-complete": (
        "534678012"
        "672195348"
        "198342567"
        "859761423"
        "426850791"
        "713924856"
        "961537284"
        "287419635"
        "345286170"
    ),
    "inkala": (
        "800000000"
        "003600000"
        "070090000"
        "050007000"
        "000045700"
        "000100030"
        "001000068"
        "008500010"
        "090000400"
    ),
    "empty": "0" * 81,
}

PresetData = Union[str, Sequence[int]]


def parse_preset(data: PresetData) -> List[int]:
    """Return 81 cell values from a string or a sequence of ints.

    Strings may use ``0`` or ``.`` for empty cells and may contain
    whitespace.  Contradictory but well-formed presets are accepted; the
    solver reports them as unsolvable.
    """

    if isinstance(data, str):
        values: List[int] = []
        for ch in data:
            if ch.isspace():
                continue
            if ch == ".":
                values.append(0)
            elif ch in "0123456789":
                values.append(int(ch))
            else:
                raise PresetFormatError(f"unexpected character {ch!r} in preset")
    else:
        values = []
        for item in data:
            if isinstance(item, bool) or not isinstance(item, int):
                raise PresetFormatError(f"preset values must be ints, got {item!r}")
            if not 0 <= item <= 9:
                raise PresetFormatError(f"preset values must be in [0, 9], got {item!r}")
            values.append(item)

    if len(values) != 81:
        raise PresetFormatError(f"preset must contain 81 cells, got {len(values)}")
    return values


def preset_names() -> List[str]:
    return sorted(PRESETS)


def load_preset(name: str) -> List[int]:
    try:
        text = PRESETS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown preset {name!r}; available: {', '.join(preset_names())}") from exc
    return parse_preset(text)


__all__ = ["PRESETS", "PresetData", "load_preset", "parse_preset", "preset_names"]
