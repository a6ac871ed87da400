"""Parse ``jj diff --git`` output into typed lines for the diff viewer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiffLineKind(str, Enum):
    FILE_HEADER = "file_header"
    META = "meta"
    HUNK = "hunk"
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True)
class DiffLine:
    kind: DiffLineKind
    text: str
    path: str | None = None


def _path_from_git_header(line: str) -> str | None:
    # "diff --git a/foo.py b/foo.py"
    parts = line.split(" b/", 1)
    if len(parts) != 2:
        return None
    return parts[1].strip() or None


def parse_diff(text: str) -> tuple[DiffLine, ...]:
    """Classify each line and tag content lines with the file they belong to."""
    lines: list[DiffLine] = []
    path: str | None = None
    in_hunk = False
    for raw in text.splitlines():
        line = raw.rstrip("\r")
        if line.startswith("diff --git "):
            path = _path_from_git_header(line)
            in_hunk = False
            lines.append(DiffLine(DiffLineKind.FILE_HEADER, line, path))
        elif line.startswith("@@"):
            in_hunk = True
            lines.append(DiffLine(DiffLineKind.HUNK, line, path))
        elif not in_hunk:
            lines.append(DiffLine(DiffLineKind.META, line, path))
        elif line.startswith("+"):
            lines.append(DiffLine(DiffLineKind.ADDED, line, path))
        elif line.startswith("-"):
            lines.append(DiffLine(DiffLineKind.REMOVED, line, path))
        else:
            lines.append(DiffLine(DiffLineKind.CONTEXT, line, path))
    return tuple(lines)
