"""Row glyphs for the interactive pane and the static ``tree`` printout."""

from __future__ import annotations

from collections.abc import Sequence

from ..log_model import CommitRole
from ..ui_theme import UITheme
from ..view_model import RowMarker, TreeRow
from .ansi import pad_ansi_line, sanitize_terminal_text

INDENT = "  "
MARKER_TEXT: dict[RowMarker, str] = {
    RowMarker.SOURCE: "← src",
    RowMarker.DESTINATION: "← dest",
    RowMarker.MOVING: "↳",
}


def _glyph(row: TreeRow, theme: UITheme) -> str:
    if row.role is CommitRole.WORKING_COPY:
        return f"{theme.working_copy}@{theme.reset}"
    if row.conflicted or row.role is CommitRole.CONFLICTED:
        return f"{theme.conflicted}×{theme.reset}"
    return f"{theme.graph}○{theme.reset}"


def _marker_color(marker: RowMarker, theme: UITheme) -> str:
    if marker is RowMarker.SOURCE:
        return theme.marker_source
    if marker is RowMarker.DESTINATION:
        return theme.marker_destination
    return theme.marker_moving


def _bookmarks(row: TreeRow, theme: UITheme) -> str:
    if not row.bookmarks:
        return ""
    names = " ".join(sanitize_terminal_text(name) for name in row.bookmarks)
    return f" {theme.bookmark}{names}{theme.reset}"


def _description(row: TreeRow, theme: UITheme) -> str:
    text = sanitize_terminal_text(row.description)
    if text in {"(no description)", "(working copy)"}:
        return f"{theme.placeholder}{text}{theme.reset}"
    return text


def format_row(row: TreeRow, theme: UITheme, width: int) -> list[str]:
    """Return the screen line for ``row`` followed by any detail lines."""
    indent = f"{theme.graph}{INDENT * row.depth}{theme.reset}"
    if not row.is_commit:
        line = f"{indent}{theme.summary}┆ +{row.hidden_count} hidden{theme.reset}"
        return [_cursor(pad_ansi_line(line, width), row, theme)]

    select_mark = f"{theme.selected}▌{theme.reset}" if row.is_selected else " "
    parts = [
        f"{select_mark}{indent}{_glyph(row, theme)} ",
        f"{theme.change_id}{row.change_id_short}{theme.reset} ",
        f"{theme.commit_id}{row.commit_id_short}{theme.reset}",
        _bookmarks(row, theme),
    ]
    if row.hidden_count:
        parts.append(f" {theme.summary}+{row.hidden_count}{theme.reset}")
    parts.append(f"  {_description(row, theme)}")
    if row.is_zoom_root:
        parts.append(f" {theme.dim}[zoom]{theme.reset}")
    if row.marker is not None:
        parts.append(f"  {_marker_color(row.marker, theme)}{MARKER_TEXT[row.marker]}{theme.reset}")
    lines = [_cursor(pad_ansi_line("".join(parts), width), row, theme)]
    detail_indent = " " + INDENT * (row.depth + 2)
    for detail in row.details:
        lines.append(pad_ansi_line(f"{detail_indent}{theme.dim}{sanitize_terminal_text(detail)}{theme.reset}", width))
    return lines


def _cursor(line: str, row: TreeRow, theme: UITheme) -> str:
    if not row.is_cursor:
        return line
    if not theme.reverse:
        return ">" + line[1:] if line.startswith(" ") else line
    # Re-assert reverse video after every reset inside the line.
    return theme.reverse + line.replace(theme.reset, theme.reset + theme.reverse) + theme.reset


def format_static_tree(rows: Sequence[TreeRow], theme: UITheme) -> str:
    """Render rows as a box-drawing tree for non-interactive output."""
    out: list[str] = []
    continues: list[bool] = []
    for index, row in enumerate(rows):
        is_last = True
        for later in rows[index + 1 :]:
            if later.depth < row.depth:
                break
            if later.depth == row.depth:
                is_last = False
                break
        del continues[row.depth :]
        prefix = "".join("│   " if flag else "    " for flag in continues[1:])
        if row.depth > 0:
            prefix += "└── " if is_last else "├── "
        continues.append(not is_last)

        if not row.is_commit:
            out.append(f"{prefix}{theme.summary}+{row.hidden_count} hidden{theme.reset}")
            continue
        at_marker = "@ " if row.role is CommitRole.WORKING_COPY else ""
        name = f"{at_marker}({theme.change_id}{row.change_id_short}{theme.reset}){_bookmarks(row, theme)}"
        if row.hidden_count:
            name += f" {theme.summary}+{row.hidden_count}{theme.reset}"
        out.append(f"{prefix}{name}  {theme.dim}{sanitize_terminal_text(row.description)}{theme.reset}")
    return "\n".join(out) + ("\n" if out else "")
