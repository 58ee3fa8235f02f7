"""Key name to session action mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ActionKind(str, Enum):
    WRITE = "WRITE"
    ERASE = "ERASE"
    MOVE = "MOVE"
    SOLVE = "SOLVE"
    TOGGLE_VISUAL = "TOGGLE_VISUAL"
    PRINT_BOARD = "PRINT_BOARD"
    LOAD_PRESET = "LOAD_PRESET"
    NOTHING = "NOTHING"


@dataclass(frozen=True)
class Action:
    """Request produced by the input adapter."""

    kind: ActionKind
    digit: int = 0
    d_row: int = 0
    d_col: int = 0


NOTHING = Action(ActionKind.NOTHING)

_MOVES: Dict[str, Action] = {
    "up": Action(ActionKind.MOVE, d_row=-1),
    "down": Action(ActionKind.MOVE, d_row=1),
    "left": Action(ActionKind.MOVE, d_col=-1),
    "right": Action(ActionKind.MOVE, d_col=1),
}

_COMMANDS: Dict[str, Action] = {
    "backspace": Action(ActionKind.ERASE),
    "delete": Action(ActionKind.ERASE),
    "0": Action(ActionKind.ERASE),
    "space": Action(ActionKind.SOLVE),
    "v": Action(ActionKind.TOGGLE_VISUAL),
    "p": Action(ActionKind.PRINT_BOARD),
    "t": Action(ActionKind.LOAD_PRESET),
}


def action_for_key(key: Optional[str], *, repeat: bool = False) -> Action:
    """Translate a key name into an :class:`Action`.

    Held (auto-repeated) keys only move the cursor.
    """

    if not key:
        return NOTHING
    name = "space" if key == " " else key.strip().lower()
    if name in _MOVES:
        return _MOVES[name]
    if repeat:
        return NOTHING
    if len(name) == 1 and name in "123456789":
        return Action(ActionKind.WRITE, digit=int(name))
    return _COMMANDS.get(name, NOTHING)


__all__ = ["Action", "ActionKind", "NOTHING", "action_for_key"]
