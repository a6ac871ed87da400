"""Engine-owned session state.

``Session`` is a frozen snapshot; the reducer returns a new one for every
intent. Modes form a closed set of frozen dataclasses so that mode-local data
(rebase endpoints, picker filter, ...) only exists while that mode is active.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from ..diff import DiffLine
from ..errors import RebaseValidationError
from ..log_model import CommitGraph, ParseWarning
from ..rebase import RebaseKind, RebasePreview


class StatusKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    kind: StatusKind = StatusKind.INFO


class PickerAction(str, Enum):
    MOVE = "move"
    DELETE = "delete"


# Confirmable actions.


@dataclass(frozen=True)
class AbandonCommits:
    change_ids: tuple[str, ...]


@dataclass(frozen=True)
class RebaseOntoTrunk:
    source: str
    kind: RebaseKind


@dataclass(frozen=True)
class MoveBookmarkBackwards:
    name: str
    target: str


ConfirmAction = Union[AbandonCommits, RebaseOntoTrunk, MoveBookmarkBackwards]


# Interaction modes.


@dataclass(frozen=True)
class Normal:
    name: ClassVar[str] = "normal"


@dataclass(frozen=True)
class Help:
    name: ClassVar[str] = "help"
    scroll: int = 0


@dataclass(frozen=True)
class ViewingDiff:
    name: ClassVar[str] = "diff"
    rev: str
    lines: tuple[DiffLine, ...] = ()
    scroll: int = 0


@dataclass(frozen=True)
class Confirming:
    name: ClassVar[str] = "confirm"
    action: ConfirmAction
    message: str
    details: tuple[str, ...] = ()


@dataclass(frozen=True)
class Selecting:
    name: ClassVar[str] = "select"
    selected: frozenset[str] = frozenset()
    anchor: str | None = None


@dataclass(frozen=True)
class Rebasing:
    name: ClassVar[str] = "rebase"
    source: str
    kind: RebaseKind = RebaseKind.SINGLE
    destination: str | None = None
    preview: RebasePreview | None = None
    error: RebaseValidationError | None = None


@dataclass(frozen=True)
class Squashing:
    name: ClassVar[str] = "squash"
    source: str
    target: str | None = None


@dataclass(frozen=True)
class BookmarkInput:
    name: ClassVar[str] = "bookmark_input"
    target: str
    text: str = ""


@dataclass(frozen=True)
class BookmarkPicker:
    name: ClassVar[str] = "bookmark_picker"
    target: str
    action: PickerAction
    bookmarks: tuple[str, ...] = ()
    filter: str = ""
    index: int = 0

    def matches(self) -> tuple[str, ...]:
        """Bookmarks whose name contains the filter, case-insensitively."""
        needle = self.filter.lower()
        return tuple(name for name in self.bookmarks if needle in name.lower())


@dataclass(frozen=True)
class PushSelecting:
    """Choose which of a commit's bookmarks to push; all start selected."""

    name: ClassVar[str] = "push_select"
    bookmarks: tuple[str, ...]
    selected: frozenset[str] = frozenset()
    filter: str = ""
    index: int = 0

    def matches(self) -> tuple[str, ...]:
        needle = self.filter.lower()
        return tuple(name for name in self.bookmarks if needle in name.lower())

    def chosen(self) -> tuple[str, ...]:
        """Selected bookmarks in display order, including ones the filter hides."""
        return tuple(name for name in self.bookmarks if name in self.selected)


@dataclass(frozen=True)
class ConflictList:
    name: ClassVar[str] = "conflicts"
    files: tuple[str, ...] = ()
    index: int = 0
    loading: bool = True


InteractionState = Union[
    Normal,
    Help,
    ViewingDiff,
    Confirming,
    Selecting,
    Rebasing,
    Squashing,
    BookmarkInput,
    BookmarkPicker,
    PushSelecting,
    ConflictList,
]

MODE_NAMES: tuple[str, ...] = tuple(
    mode.name
    for mode in (
        Normal,
        Help,
        ViewingDiff,
        Confirming,
        Selecting,
        Rebasing,
        Squashing,
        BookmarkInput,
        BookmarkPicker,
        PushSelecting,
        ConflictList,
    )
)


@dataclass(frozen=True)
class Session:
    """Everything the view builder and renderer need, and nothing else."""

    graph: CommitGraph = field(default_factory=CommitGraph)
    mode: InteractionState = field(default_factory=Normal)
    cursor: str | None = None
    expanded: frozenset[str] = frozenset()
    focus: tuple[str, ...] = ()
    collapse_depth: int = 0
    full_mode: bool = False
    viewport_rows: int = 20
    scroll: int = 0
    status: StatusMessage | None = None
    warnings: tuple[ParseWarning, ...] = ()
    pending_prefix: str | None = None
    should_quit: bool = False

    @property
    def zoom_root(self) -> str | None:
        return self.focus[-1] if self.focus else None
