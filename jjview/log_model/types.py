"""Commit record datatypes parsed from ``jj log`` output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CommitRole(str, Enum):
    """How a commit is exposed by the log snapshot."""

    NORMAL = "normal"
    WORKING_COPY = "working_copy"
    CONFLICTED = "conflicted"
    ELIDED = "elided"


@dataclass(frozen=True)
class Commit:
    """One immutable commit record from a log snapshot."""

    change_id: str
    commit_id: str = ""
    parents: tuple[str, ...] = ()
    description: str = ""
    bookmarks: tuple[str, ...] = ()
    role: CommitRole = CommitRole.NORMAL
    conflicted: bool = False
    order: int = 0

    @property
    def is_working_copy(self) -> bool:
        return self.role is CommitRole.WORKING_COPY

    @property
    def is_elided(self) -> bool:
        return self.role is CommitRole.ELIDED

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True)
class ParseWarning:
    """A log line that was skipped while parsing."""

    line_number: int
    text: str
    reason: str

    def describe(self) -> str:
        return f"line {self.line_number}: {self.reason}"
