"""Side effects requested by the reducer and carried out by the runner.

Each ``jj`` invocation has exactly one effect type. ``describe`` names the
operation for status text ("Rebase complete", "Rebase failed: ...").
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from ..rebase import RebaseKind
from .state import StatusKind


@dataclass(frozen=True)
class RefreshGraph:
    label: ClassVar[str] = "Refresh"


@dataclass(frozen=True)
class LoadDiff:
    label: ClassVar[str] = "Diff"
    rev: str


@dataclass(frozen=True)
class LoadConflicts:
    """List the working copy's conflicted files."""

    label: ClassVar[str] = "Conflicts"


@dataclass(frozen=True)
class SimulateRebase:
    label: ClassVar[str] = "Preview"
    source: str
    destination: str
    kind: RebaseKind


@dataclass(frozen=True)
class RunEdit:
    label: ClassVar[str] = "Edit"
    rev: str


@dataclass(frozen=True)
class RunDescribe:
    label: ClassVar[str] = "Describe"
    rev: str
    interactive: ClassVar[bool] = True


@dataclass(frozen=True)
class RunNew:
    label: ClassVar[str] = "New"
    rev: str


@dataclass(frozen=True)
class RunCommit:
    label: ClassVar[str] = "Commit"
    message: str


@dataclass(frozen=True)
class RunAbandon:
    label: ClassVar[str] = "Abandon"
    revs: tuple[str, ...]


@dataclass(frozen=True)
class RunUndo:
    label: ClassVar[str] = "Undo"


@dataclass(frozen=True)
class RunSquash:
    label: ClassVar[str] = "Squash"
    source: str
    target: str
    interactive: ClassVar[bool] = True


@dataclass(frozen=True)
class RunResolve:
    label: ClassVar[str] = "Resolve"
    path: str
    interactive: ClassVar[bool] = True


@dataclass(frozen=True)
class RunRebase:
    label: ClassVar[str] = "Rebase"
    source: str
    destination: str
    kind: RebaseKind


@dataclass(frozen=True)
class RunRebaseOntoTrunk:
    label: ClassVar[str] = "Rebase onto trunk"
    source: str
    kind: RebaseKind


@dataclass(frozen=True)
class RunBookmarkCreate:
    label: ClassVar[str] = "Bookmark create"
    name: str
    rev: str


@dataclass(frozen=True)
class RunBookmarkSet:
    label: ClassVar[str] = "Bookmark move"
    name: str
    rev: str
    allow_backwards: bool = False


@dataclass(frozen=True)
class RunBookmarkDelete:
    label: ClassVar[str] = "Bookmark delete"
    name: str


@dataclass(frozen=True)
class RunPush:
    label: ClassVar[str] = "Push"
    bookmarks: tuple[str, ...]


@dataclass(frozen=True)
class RunPushAll:
    label: ClassVar[str] = "Push all"


@dataclass(frozen=True)
class RunGitFetch:
    label: ClassVar[str] = "Fetch"


@dataclass(frozen=True)
class RunGitImport:
    label: ClassVar[str] = "Import"


@dataclass(frozen=True)
class RunGitExport:
    label: ClassVar[str] = "Export"


@dataclass(frozen=True)
class PersistPreference:
    label: ClassVar[str] = "Save preferences"
    key: str
    value: object


@dataclass(frozen=True)
class SetStatus:
    label: ClassVar[str] = "Status"
    text: str
    kind: StatusKind = StatusKind.INFO


Effect = Union[
    RefreshGraph,
    LoadDiff,
    LoadConflicts,
    SimulateRebase,
    RunEdit,
    RunDescribe,
    RunNew,
    RunCommit,
    RunAbandon,
    RunUndo,
    RunSquash,
    RunResolve,
    RunRebase,
    RunRebaseOntoTrunk,
    RunBookmarkCreate,
    RunBookmarkSet,
    RunBookmarkDelete,
    RunPush,
    RunPushAll,
    RunGitFetch,
    RunGitImport,
    RunGitExport,
    PersistPreference,
    SetStatus,
]
