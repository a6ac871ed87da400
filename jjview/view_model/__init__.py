"""Tree projection and row view-model for the commit pane."""

from .build import (
    COMMIT_ROW,
    SUMMARY_ROW,
    build_rows,
    cursor_index,
    display_graph,
    project_tree,
    short_id,
    summary_key,
)
from .types import RowMarker, TreeNode, TreeRow

__all__ = [
    "COMMIT_ROW",
    "SUMMARY_ROW",
    "RowMarker",
    "TreeNode",
    "TreeRow",
    "build_rows",
    "cursor_index",
    "display_graph",
    "project_tree",
    "short_id",
    "summary_key",
]
