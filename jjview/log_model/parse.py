"""Parse the fixed ``jj log`` template into a commit graph.

One record per line, TAB separated. Malformed lines are skipped with a
warning and parsing never raises for bad content.
"""

from __future__ import annotations

from dataclasses import dataclass

from .graph import CommitGraph
from .types import Commit, CommitRole, ParseWarning

FIELD_SEPARATOR = "\t"
LIST_SEPARATOR = ","
MIN_FIELDS = 6

# Field order is a contract with ``parse_log``: change id, commit id,
# parent change ids, first description line, local bookmarks, role flags.
LOG_TEMPLATE = (
    'change_id ++ "\\t" ++ commit_id ++ "\\t" ++ '
    'parents.map(|p| p.change_id()).join(",") ++ "\\t" ++ '
    'description.first_line() ++ "\\t" ++ '
    'local_bookmarks.join(",") ++ "\\t" ++ '
    'if(current_working_copy, "@") ++ if(conflict, "x") ++ if(hidden, "~") ++ "\\n"'
)


@dataclass(frozen=True)
class ParseResult:
    graph: CommitGraph
    warnings: tuple[ParseWarning, ...] = ()


def _split_list(field: str) -> list[str]:
    return [item.strip() for item in field.split(LIST_SEPARATOR) if item.strip()]


def _bookmark_names(field: str) -> tuple[str, ...]:
    """Strip conflict markers (``*`` / ``??``) and drop duplicates, keeping order."""
    names: list[str] = []
    for raw in _split_list(field):
        name = raw.rstrip("*?")
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _role_from_flags(flags: str) -> tuple[CommitRole, bool]:
    conflicted = "x" in flags
    if "~" in flags:
        return CommitRole.ELIDED, conflicted
    if "@" in flags:
        return CommitRole.WORKING_COPY, conflicted
    if conflicted:
        return CommitRole.CONFLICTED, True
    return CommitRole.NORMAL, False


def parse_log(text: str) -> ParseResult:
    """Parse raw log output; unknown parents become elided stub commits."""
    commits: dict[str, Commit] = {}
    warnings: list[ParseWarning] = []
    lines = text.splitlines()

    for index, raw_line in enumerate(lines):
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue
        line_number = index + 1
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) < MIN_FIELDS:
            warnings.append(ParseWarning(line_number, line, f"expected {MIN_FIELDS} fields, got {len(fields)}"))
            continue
        change_id = fields[0].strip()
        if not change_id:
            warnings.append(ParseWarning(line_number, line, "empty change id"))
            continue
        if change_id in commits:
            warnings.append(ParseWarning(line_number, line, f"duplicate change id {change_id}"))
            continue

        parents: list[str] = []
        for parent in _split_list(fields[2]):
            if parent not in parents:
                parents.append(parent)
        role, conflicted = _role_from_flags(fields[-1].strip())
        commits[change_id] = Commit(
            change_id=change_id,
            commit_id=fields[1].strip(),
            parents=tuple(parents),
            # Descriptions may themselves contain TABs.
            description=FIELD_SEPARATOR.join(fields[3:-2]).strip(),
            bookmarks=_bookmark_names(fields[-2]),
            role=role,
            conflicted=conflicted,
            order=index,
        )

    next_order = len(lines)
    for commit in list(commits.values()):
        for parent in commit.parents:
            if parent not in commits:
                commits[parent] = Commit(change_id=parent, role=CommitRole.ELIDED, order=next_order)
                next_order += 1

    return ParseResult(CommitGraph(commits.values()), tuple(warnings))
