"""Interactive session layer: session state, key map and solve event log."""

from __future__ import annotations

from .keymap import NOTHING, Action, ActionKind, action_for_key
from .session import Session

__all__ = ["Action", "ActionKind", "NOTHING", "Session", "action_for_key"]
