"""Compose a full terminal frame from the session and its rows.

Layout is one header line, the body (tree, help or diff), and one status
line. Modal prompts (confirmations, pickers, the conflict list) are drawn over the body.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..diff import DiffLine, DiffLineKind
from ..engine.state import (
    BookmarkInput,
    BookmarkPicker,
    Confirming,
    ConflictList,
    Help,
    PickerAction,
    PushSelecting,
    Rebasing,
    Selecting,
    Session,
    Squashing,
    StatusKind,
    ViewingDiff,
)
from ..input.keymap import PREFIX_TITLES, KeyMapper
from ..rebase import RebaseKind
from ..ui_theme import UITheme
from ..view_model import TreeRow, cursor_index, short_id
from .ansi import display_width, pad_ansi_line, sanitize_terminal_text
from .highlight import highlight_code
from .rows import format_row

CHROME_LINES = 2


def body_height(lines: int) -> int:
    return max(1, lines - CHROME_LINES)


def _status_color(kind: StatusKind, theme: UITheme) -> str:
    return {
        StatusKind.INFO: theme.status_info,
        StatusKind.SUCCESS: theme.status_success,
        StatusKind.WARNING: theme.status_warning,
        StatusKind.ERROR: theme.status_error,
    }[kind]


def _header(session: Session, theme: UITheme) -> str:
    mode = session.mode
    view = "full" if session.full_mode else "compact"
    title = f"{theme.help_heading}jjview{theme.reset} {theme.dim}{view}"
    if session.collapse_depth:
        title += f" · depth {session.collapse_depth}"
    if session.zoom_root:
        title += f" · zoom {short_id(session.zoom_root)}"
    title += theme.reset
    if isinstance(mode, Rebasing):
        flag = "-r" if mode.kind is RebaseKind.SINGLE else "-s"
        destination = short_id(mode.destination) if mode.destination else "?"
        title += f"  {theme.marker_source}rebase {flag} {short_id(mode.source)} → {destination}{theme.reset}"
    elif isinstance(mode, Squashing):
        target = short_id(mode.target) if mode.target else "?"
        title += f"  {theme.marker_source}squash {short_id(mode.source)} → {target}{theme.reset}"
    elif isinstance(mode, Selecting):
        title += f"  {theme.selected}{len(mode.selected)} selected{theme.reset}"
    elif isinstance(mode, ViewingDiff):
        title += f"  diff {short_id(mode.rev)}"
    elif isinstance(mode, ConflictList):
        title += "  conflicts"
    return title


def _status(
    session: Session,
    mapper: KeyMapper,
    theme: UITheme,
    busy: str | None,
) -> str:
    mode = session.mode
    if busy:
        return f"{theme.status_warning}⧗ {busy}…{theme.reset}"
    if session.pending_prefix is not None:
        title = PREFIX_TITLES.get(session.pending_prefix, session.pending_prefix)
        hints = mapper.prefix_hints(mode.name, session.pending_prefix)
        joined = "  ".join(f"{theme.help_key}{key}{theme.reset} {label}" for key, label in hints)
        return f"{theme.help_heading}{session.pending_prefix}…{theme.reset} {title}: {joined}"
    if isinstance(mode, BookmarkInput):
        return f"Bookmark name at {short_id(mode.target)}: {sanitize_terminal_text(mode.text)}▏"
    if isinstance(mode, Rebasing) and mode.error is not None:
        return f"{theme.status_error}{mode.error}{theme.reset}"
    if session.status is not None:
        return f"{_status_color(session.status.kind, theme)}{sanitize_terminal_text(session.status.text)}{theme.reset}"
    hints = mapper.mode_hints(mode.name)
    if mode.name == "normal":
        hints = [("?", "help"), ("q", "quit")]
    return "  ".join(f"{theme.help_key}{key}{theme.reset} {theme.help_dim}{label}{theme.reset}" for key, label in hints)


def _tree_body(session: Session, rows: Sequence[TreeRow], theme: UITheme, width: int, height: int) -> list[str]:
    if not rows:
        return [f"{theme.placeholder}(no commits in revset){theme.reset}"]
    index = cursor_index(rows, session.cursor) or 0
    top = max(0, min(session.scroll, max(0, len(rows) - height)))
    if index < top:
        top = index
    elif index >= top + height:
        top = index - height + 1
    lines: list[str] = []
    for row in rows[top:]:
        lines.extend(format_row(row, theme, width))
        if len(lines) >= height:
            break
    return lines[:height]


def help_lines(mapper: KeyMapper, theme: UITheme) -> list[str]:
    lines: list[str] = []
    for section, entries in mapper.help_sections():
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{section}{theme.reset}")
        key_width = max(len(key) for key, _label in entries)
        for key, label in entries:
            lines.append(f"  {theme.help_key}{key.ljust(key_width)}{theme.reset}  {label}")
    return lines


def _help_body(mode: Help, mapper: KeyMapper, theme: UITheme, height: int) -> list[str]:
    lines = help_lines(mapper, theme)
    top = max(0, min(mode.scroll, max(0, len(lines) - height)))
    return lines[top : top + height]


def format_diff_line(line: DiffLine, theme: UITheme) -> str:
    text = sanitize_terminal_text(line.text)
    if line.kind is DiffLineKind.FILE_HEADER:
        return f"{theme.diff_header}{text}{theme.reset}"
    if line.kind is DiffLineKind.HUNK:
        return f"{theme.diff_hunk}{text}{theme.reset}"
    if line.kind is DiffLineKind.META:
        return f"{theme.dim}{text}{theme.reset}"
    sign, code = text[:1], text[1:]
    if theme.reset:
        code = highlight_code(code, line.path)
    if line.kind is DiffLineKind.ADDED:
        return f"{theme.diff_added}{sign}{theme.reset}{code}"
    if line.kind is DiffLineKind.REMOVED:
        return f"{theme.diff_removed}{sign}{theme.reset}{code}"
    return f"{sign}{code}"


def _diff_body(mode: ViewingDiff, theme: UITheme, height: int) -> list[str]:
    top = max(0, min(mode.scroll, max(0, len(mode.lines) - height)))
    return [format_diff_line(line, theme) for line in mode.lines[top : top + height]]


def _modal(body: list[str], title: str, content: list[str], theme: UITheme, width: int, height: int) -> list[str]:
    inner = min(max(20, width - 8), max([display_width(title) + 4, *(display_width(line) + 2 for line in content)]))
    box = [f"{theme.modal_border}┌{'─' * inner}┐{theme.reset}"]
    box.append(f"{theme.modal_border}│{theme.reset}{pad_ansi_line(' ' + title, inner)}{theme.modal_border}│{theme.reset}")
    for line in content:
        box.append(f"{theme.modal_border}│{theme.reset}{pad_ansi_line(' ' + line, inner)}{theme.modal_border}│{theme.reset}")
    box.append(f"{theme.modal_border}└{'─' * inner}┘{theme.reset}")
    box = box[:height]
    top = max(0, (height - len(box)) // 2)
    left = " " * max(0, (width - inner - 2) // 2)
    padded = body + [""] * max(0, height - len(body))
    for offset, line in enumerate(box):
        padded[top + offset] = left + line
    return padded


def _visible_window(index: int, height: int) -> tuple[int, int]:
    visible = max(1, height - 6)
    return max(0, index - visible + 1), visible


def _picker_content(mode: BookmarkPicker, theme: UITheme, height: int) -> list[str]:
    matches = mode.matches()
    content = [f"filter: {sanitize_terminal_text(mode.filter)}▏", ""]
    if not matches:
        content.append(f"{theme.placeholder}(no matching bookmarks){theme.reset}")
    start, visible = _visible_window(mode.index, height)
    for offset, name in enumerate(matches[start : start + visible]):
        index = start + offset
        label = sanitize_terminal_text(name)
        if index == mode.index:
            content.append(f"{theme.reverse}> {label}{theme.reset}")
        else:
            content.append(f"  {label}")
    return content


def _push_content(mode: PushSelecting, theme: UITheme, height: int) -> list[str]:
    matches = mode.matches()
    content = [f"filter: {sanitize_terminal_text(mode.filter)}▏", ""]
    if not matches:
        content.append(f"{theme.placeholder}(no matching bookmarks){theme.reset}")
    start, visible = _visible_window(mode.index, height)
    for offset, name in enumerate(matches[start : start + visible]):
        box = "[x]" if name in mode.selected else "[ ]"
        label = f"{box} {sanitize_terminal_text(name)}"
        if start + offset == mode.index:
            content.append(f"{theme.reverse}> {label}{theme.reset}")
        else:
            content.append(f"  {label}")
    content.extend(["", f"{len(mode.chosen())} of {len(mode.bookmarks)} selected"])
    return content


def _conflict_content(mode: ConflictList, theme: UITheme, height: int) -> list[str]:
    if mode.loading:
        return [f"{theme.placeholder}Loading…{theme.reset}"]
    content: list[str] = []
    start, visible = _visible_window(mode.index, height)
    for offset, path in enumerate(mode.files[start : start + visible]):
        label = sanitize_terminal_text(path)
        if start + offset == mode.index:
            content.append(f"{theme.reverse}> {label}{theme.reset}")
        else:
            content.append(f"  {label}")
    return content


def render_frame(
    session: Session,
    rows: Sequence[TreeRow],
    mapper: KeyMapper,
    theme: UITheme,
    columns: int,
    lines: int,
    busy: str | None = None,
) -> list[str]:
    """Return exactly ``lines`` screen lines, each padded to ``columns``."""
    height = body_height(lines)
    mode = session.mode
    if isinstance(mode, Help):
        body = _help_body(mode, mapper, theme, height)
    elif isinstance(mode, ViewingDiff):
        body = _diff_body(mode, theme, height)
    else:
        body = _tree_body(session, rows, theme, columns, height)

    if isinstance(mode, Confirming):
        body = _modal(body, mode.message, [*mode.details, "", "y / Enter: yes   n / Esc: no"], theme, columns, height)
    elif isinstance(mode, BookmarkPicker):
        verb = "Move bookmark to" if mode.action is PickerAction.MOVE else "Delete bookmark at"
        body = _modal(body, f"{verb} {short_id(mode.target)}", _picker_content(mode, theme, height), theme, columns, height)
    elif isinstance(mode, PushSelecting):
        body = _modal(body, "Push bookmarks", _push_content(mode, theme, height), theme, columns, height)
    elif isinstance(mode, ConflictList):
        body = _modal(body, "Conflicts in working copy", _conflict_content(mode, theme, height), theme, columns, height)

    body = body + [""] * max(0, height - len(body))
    frame = [_header(session, theme), *body[:height], _status(session, mapper, theme, busy)]
    return [pad_ansi_line(line, columns) for line in frame[:lines]]


def frame_text(frame: Sequence[str]) -> str:
    """Join frame lines into one terminal write (home cursor, overwrite in place)."""
    return "\x1b[H" + "\r\n".join(frame) + "\x1b[0m"
