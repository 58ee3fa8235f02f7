"""Board and solve-run rendering."""

from __future__ import annotations

from .plot import draw_board, export_png, export_storyboard, render_settings, storyboard_frames

__all__ = ["draw_board", "export_png", "export_storyboard", "render_settings", "storyboard_frames"]
