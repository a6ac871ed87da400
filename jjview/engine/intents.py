"""User and feedback intents consumed by ``reduce``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..diff import DiffLine
from ..errors import RebaseValidationError
from ..log_model import CommitGraph, ParseWarning
from ..rebase import RebaseKind, RebasePreview
from .state import PickerAction, StatusKind

# Navigation and view.


@dataclass(frozen=True)
class MoveCursor:
    delta: int


@dataclass(frozen=True)
class PageCursor:
    direction: int


@dataclass(frozen=True)
class JumpTop:
    pass


@dataclass(frozen=True)
class JumpBottom:
    pass


@dataclass(frozen=True)
class JumpWorkingCopy:
    pass


@dataclass(frozen=True)
class CenterCursor:
    pass


@dataclass(frozen=True)
class ToggleExpanded:
    pass


@dataclass(frozen=True)
class ToggleFocus:
    pass


@dataclass(frozen=True)
class ToggleFullMode:
    pass


@dataclass(frozen=True)
class AdjustCollapse:
    """Change zoom level by ``delta``; ``reset`` opens everything."""

    delta: int = 0
    reset: bool = False


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class Scroll:
    """Scroll an overlay (help/diff); ``None`` means jump to the end."""

    delta: int | None


@dataclass(frozen=True)
class SetPrefix:
    prefix: str | None


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


# Commit actions.


@dataclass(frozen=True)
class EditCommit:
    pass


@dataclass(frozen=True)
class ShowDiff:
    pass


@dataclass(frozen=True)
class DescribeCommit:
    pass


@dataclass(frozen=True)
class NewCommit:
    pass


@dataclass(frozen=True)
class CommitWorkingCopy:
    pass


@dataclass(frozen=True)
class AbandonSelection:
    pass


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class ConfirmYes:
    pass


@dataclass(frozen=True)
class ConfirmNo:
    pass


# Selection.


@dataclass(frozen=True)
class ToggleSelection:
    pass


@dataclass(frozen=True)
class EnterSelecting:
    pass


# Rebase.


@dataclass(frozen=True)
class EnterRebaseMode:
    kind: RebaseKind


@dataclass(frozen=True)
class MoveDestination:
    delta: int


@dataclass(frozen=True)
class ChooseDestination:
    change_id: str


@dataclass(frozen=True)
class ExecuteRebase:
    pass


@dataclass(frozen=True)
class RebaseOntoTrunkRequested:
    kind: RebaseKind


# Squash.


@dataclass(frozen=True)
class EnterSquashMode:
    pass


@dataclass(frozen=True)
class MoveSquashTarget:
    delta: int


@dataclass(frozen=True)
class ExecuteSquash:
    pass


# Bookmarks and git.


@dataclass(frozen=True)
class StartBookmarkCreate:
    pass


@dataclass(frozen=True)
class OpenBookmarkPicker:
    action: PickerAction


@dataclass(frozen=True)
class TypeChar:
    char: str


@dataclass(frozen=True)
class DeleteChar:
    pass


@dataclass(frozen=True)
class ClearText:
    pass


@dataclass(frozen=True)
class MovePicker:
    delta: int


@dataclass(frozen=True)
class Submit:
    """Enter in a text-entry or picker mode."""


@dataclass(frozen=True)
class Push:
    pass


@dataclass(frozen=True)
class TogglePushBookmark:
    pass


@dataclass(frozen=True)
class SetPushSelection:
    """Select (or clear) every bookmark matching the push filter."""

    selected: bool


@dataclass(frozen=True)
class PushAll:
    pass


@dataclass(frozen=True)
class GitFetch:
    pass


@dataclass(frozen=True)
class ShowConflicts:
    pass


@dataclass(frozen=True)
class ResolveConflict:
    pass


@dataclass(frozen=True)
class GitImport:
    pass


@dataclass(frozen=True)
class GitExport:
    pass


# Feedback from the effect runner and the loop.


@dataclass(frozen=True)
class GraphLoaded:
    graph: CommitGraph
    warnings: tuple[ParseWarning, ...] = ()


@dataclass(frozen=True)
class RebasePreviewed:
    source: str
    destination: str
    preview: RebasePreview | None = None
    error: RebaseValidationError | None = None


@dataclass(frozen=True)
class DiffLoaded:
    rev: str
    lines: tuple[DiffLine, ...]


@dataclass(frozen=True)
class ConflictsLoaded:
    files: tuple[str, ...]
    error: str | None = None


@dataclass(frozen=True)
class StatusPosted:
    text: str
    kind: StatusKind = StatusKind.INFO


@dataclass(frozen=True)
class ExpireStatus:
    pass


@dataclass(frozen=True)
class Resize:
    rows: int


Intent = Union[
    MoveCursor,
    PageCursor,
    JumpTop,
    JumpBottom,
    JumpWorkingCopy,
    CenterCursor,
    ToggleExpanded,
    ToggleFocus,
    ToggleFullMode,
    AdjustCollapse,
    ShowHelp,
    Scroll,
    SetPrefix,
    Refresh,
    Quit,
    Cancel,
    EditCommit,
    ShowDiff,
    DescribeCommit,
    NewCommit,
    CommitWorkingCopy,
    AbandonSelection,
    Undo,
    ConfirmYes,
    ConfirmNo,
    ToggleSelection,
    EnterSelecting,
    EnterRebaseMode,
    MoveDestination,
    ChooseDestination,
    ExecuteRebase,
    RebaseOntoTrunkRequested,
    EnterSquashMode,
    MoveSquashTarget,
    ExecuteSquash,
    StartBookmarkCreate,
    OpenBookmarkPicker,
    TypeChar,
    DeleteChar,
    ClearText,
    MovePicker,
    Submit,
    Push,
    TogglePushBookmark,
    SetPushSelection,
    PushAll,
    GitFetch,
    ShowConflicts,
    ResolveConflict,
    GitImport,
    GitExport,
    GraphLoaded,
    RebasePreviewed,
    DiffLoaded,
    ConflictsLoaded,
    StatusPosted,
    ExpireStatus,
    Resize,
]
