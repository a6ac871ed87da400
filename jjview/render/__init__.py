"""Thin ANSI renderer for the commit pane, overlays and static tree output."""

from .rows import format_row, format_static_tree
from .screen import body_height, frame_text, help_lines, render_frame

__all__ = [
    "body_height",
    "format_row",
    "format_static_tree",
    "frame_text",
    "help_lines",
    "render_frame",
]
