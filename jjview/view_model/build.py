"""Project a session into the ordered rows shown in the tree pane.

Everything here is a pure function of its arguments: identical sessions
always produce identical row tuples.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from ..engine.state import Rebasing, Selecting, Session, Squashing
from ..log_model import Commit, CommitGraph, CommitRole
from .types import RowMarker, TreeNode, TreeRow

SHORT_ID_LENGTH = 8
DEFAULT_DESCRIPTION_WIDTH = 72
COMMIT_ROW = "commit"
SUMMARY_ROW = "summary"
SUMMARY_KEY_PREFIX = "+"


def short_id(change_id: str) -> str:
    return change_id[:SHORT_ID_LENGTH]


def summary_key(parent_id: str) -> str:
    return SUMMARY_KEY_PREFIX + parent_id


def project_tree(
    graph: CommitGraph,
    root: str | None = None,
    expanded: frozenset[str] = frozenset(),
) -> tuple[TreeNode, ...]:
    """Return the DFS placement of visible commits.

    Merge commits are placed once, under the first parent that reaches them.
    Elided stubs never become nodes. Commits unreachable from any root (only
    possible on cyclic input) are appended as extra roots.
    """
    if root is not None:
        starts = [root] if graph.is_visible(root) else []
    else:
        starts = list(graph.roots())
        reachable: set[str] = set()
        for start in starts:
            reachable.add(start)
            reachable.update(graph.descendants(start))
        starts.extend(
            commit.change_id
            for commit in graph
            if not commit.is_elided and commit.change_id not in reachable
        )

    placed: list[tuple[str, int, str | None]] = []
    visited: set[str] = set()
    stack: list[tuple[str, int, str | None]] = [(start, 0, None) for start in reversed(starts)]
    while stack:
        change_id, depth, parent = stack.pop()
        if change_id in visited:
            continue
        visited.add(change_id)
        placed.append((change_id, depth, parent))
        for child in reversed(graph.children(change_id)):
            if graph.is_visible(child) and child not in visited:
                stack.append((child, depth + 1, change_id))

    placed_children: dict[str, list[str]] = {}
    for change_id, _depth, parent in placed:
        if parent is not None:
            placed_children.setdefault(parent, []).append(change_id)

    return tuple(
        TreeNode(
            change_id=change_id,
            depth=depth,
            children=tuple(placed_children.get(change_id, ())),
            expanded=change_id in expanded,
        )
        for change_id, depth, _parent in placed
    )


@dataclass(frozen=True)
class _Entry:
    """Intermediate row candidate before compact filtering."""

    node: TreeNode
    summary_for: str | None = None
    hidden: int = 0


def _collapse(nodes: tuple[TreeNode, ...], collapse_depth: int, expanded: frozenset[str]) -> list[_Entry]:
    if collapse_depth <= 0:
        return [_Entry(node) for node in nodes]

    parent_of: dict[str, str] = {}
    for node in nodes:
        for child in node.children:
            parent_of[child] = node.change_id

    entries: list[_Entry] = []
    index = 0
    while index < len(nodes):
        node = nodes[index]
        parent = parent_of.get(node.change_id)
        if node.depth < collapse_depth or parent is None or parent in expanded:
            entries.append(_Entry(node))
            index += 1
            continue
        # Hide every sibling subtree under this parent and emit one summary.
        hidden = 0
        while index < len(nodes) and (
            nodes[index].depth > node.depth
            or (nodes[index].depth == node.depth and parent_of.get(nodes[index].change_id) == parent)
        ):
            hidden += 1
            index += 1
        entries.append(_Entry(node, summary_for=parent, hidden=hidden))
    return entries


def _markers(session: Session, graph: CommitGraph) -> dict[str, RowMarker]:
    mode = session.mode
    markers: dict[str, RowMarker] = {}
    if isinstance(mode, Rebasing):
        if mode.preview is not None and mode.preview.matches(mode.source, mode.destination):
            for change_id in mode.preview.affected:
                markers[change_id] = RowMarker.MOVING
        markers[mode.source] = RowMarker.SOURCE
        if mode.destination is not None:
            markers[mode.destination] = RowMarker.DESTINATION
    elif isinstance(mode, Squashing):
        markers[mode.source] = RowMarker.SOURCE
        if mode.target is not None:
            markers[mode.target] = RowMarker.DESTINATION
    return {change_id: marker for change_id, marker in markers.items() if graph.is_visible(change_id)}


def display_graph(session: Session) -> CommitGraph:
    """Return the projected graph while a valid rebase preview is active."""
    mode = session.mode
    if (
        isinstance(mode, Rebasing)
        and mode.preview is not None
        and mode.error is None
        and mode.preview.matches(mode.source, mode.destination)
    ):
        return mode.preview.graph
    return session.graph


def _describe(commit: Commit, width: int) -> str:
    text = commit.description
    if not text:
        return "(working copy)" if commit.is_working_copy else "(no description)"
    if width > 1 and len(text) > width:
        return text[: width - 1] + "…"
    return text


def _details(commit: Commit) -> tuple[str, ...]:
    lines = [f"commit {commit.commit_id or '?'}"]
    if commit.parents:
        lines.append("parents " + ", ".join(short_id(parent) for parent in commit.parents))
    else:
        lines.append("parents (root)")
    if commit.bookmarks:
        lines.append("bookmarks " + ", ".join(commit.bookmarks))
    role = commit.role.value.replace("_", " ")
    if commit.conflicted and commit.role is not CommitRole.CONFLICTED:
        role += ", conflicted"
    lines.append(f"role {role}")
    return tuple(lines)


def _is_compact_visible(commit: Commit, zoom_root: str | None, pinned: dict[str, RowMarker]) -> bool:
    return (
        bool(commit.bookmarks)
        or commit.is_working_copy
        or commit.conflicted
        or commit.role is CommitRole.CONFLICTED
        or commit.change_id == zoom_root
        or commit.change_id in pinned
    )


def build_rows(session: Session, description_width: int = DEFAULT_DESCRIPTION_WIDTH) -> tuple[TreeRow, ...]:
    """Return the ordered rows for ``session``; the cursor flag is resolved here."""
    graph = display_graph(session)
    zoom_root = session.zoom_root if graph.is_visible(session.zoom_root) else None
    nodes = project_tree(graph, root=zoom_root, expanded=session.expanded)
    entries = _collapse(nodes, session.collapse_depth, session.expanded)
    markers = _markers(session, graph)
    selected = session.mode.selected if isinstance(session.mode, Selecting) else frozenset()

    rows: list[TreeRow] = []
    depth_stack: list[int] = []
    pending_hidden = 0
    for entry in entries:
        node = entry.node
        commit = graph.get(node.change_id)
        if commit is None:
            continue
        is_summary = entry.summary_for is not None
        if not session.full_mode and not is_summary and not _is_compact_visible(commit, zoom_root, markers):
            pending_hidden += 1
            continue

        while depth_stack and depth_stack[-1] >= node.depth:
            depth_stack.pop()
        depth = len(depth_stack) if not session.full_mode else node.depth

        if is_summary:
            parent_id = entry.summary_for or ""
            rows.append(
                TreeRow(
                    key=summary_key(parent_id),
                    kind=SUMMARY_ROW,
                    change_id=parent_id,
                    depth=depth,
                    description=f"{entry.hidden} hidden",
                    hidden_count=entry.hidden + pending_hidden,
                )
            )
            pending_hidden = 0
            continue

        depth_stack.append(node.depth)
        is_expanded = node.expanded
        rows.append(
            TreeRow(
                key=commit.change_id,
                kind=COMMIT_ROW,
                change_id=commit.change_id,
                depth=depth,
                role=commit.role,
                is_selected=commit.change_id in selected,
                is_expanded=is_expanded,
                is_zoom_root=commit.change_id == zoom_root,
                marker=markers.get(commit.change_id),
                change_id_short=short_id(commit.change_id),
                commit_id_short=short_id(commit.commit_id),
                description=_describe(commit, description_width),
                bookmarks=commit.bookmarks,
                conflicted=commit.conflicted,
                hidden_count=pending_hidden,
                details=_details(commit) if is_expanded else (),
            )
        )
        pending_hidden = 0

    index = cursor_index(rows, session.cursor)
    if index is not None:
        rows[index] = _with_cursor(rows[index])
    return tuple(rows)


def _with_cursor(row: TreeRow) -> TreeRow:
    return replace(row, is_cursor=True)


def cursor_index(rows: Sequence[TreeRow], cursor: str | None) -> int | None:
    """Resolve ``cursor`` to a row index.

    Falls back to the working-copy row, then to the first row, and returns
    ``None`` only when there are no rows at all.
    """
    if not rows:
        return None
    if cursor is not None:
        for index, row in enumerate(rows):
            if row.key == cursor:
                return index
    for index, row in enumerate(rows):
        if row.is_commit and row.role is CommitRole.WORKING_COPY:
            return index
    return 0
