"""Display-only records produced by the view builder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..log_model import CommitRole


class RowMarker(str, Enum):
    SOURCE = "src"
    DESTINATION = "dest"
    MOVING = "moving"


@dataclass(frozen=True)
class TreeNode:
    """One placed commit in the DFS projection of the graph."""

    change_id: str
    depth: int
    children: tuple[str, ...] = ()
    expanded: bool = False


@dataclass(frozen=True)
class TreeRow:
    """Render facts for a single line in the tree pane."""

    key: str
    kind: str
    change_id: str
    depth: int
    role: CommitRole = CommitRole.NORMAL
    is_cursor: bool = False
    is_selected: bool = False
    is_expanded: bool = False
    is_zoom_root: bool = False
    marker: RowMarker | None = None
    change_id_short: str = ""
    commit_id_short: str = ""
    description: str = ""
    bookmarks: tuple[str, ...] = ()
    conflicted: bool = False
    hidden_count: int = 0
    details: tuple[str, ...] = ()

    @property
    def is_commit(self) -> bool:
        return self.kind == "commit"
