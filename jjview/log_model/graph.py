"""Immutable commit graph keyed by change id.

Commits reference each other by id only; the child index is derived once at
construction. Traversals keep a visited set so malformed (cyclic) input from a
misbehaving log never loops.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .types import Commit, CommitRole


class CommitGraph:
    """Arena of commits plus a derived parent -> children index."""

    def __init__(self, commits: Iterable[Commit] = ()) -> None:
        self._commits: dict[str, Commit] = {}
        for commit in commits:
            self._commits[commit.change_id] = commit

        children: dict[str, list[str]] = {change_id: [] for change_id in self._commits}
        for commit in self._commits.values():
            for parent in commit.parents:
                siblings = children.get(parent)
                if siblings is not None and commit.change_id not in siblings:
                    siblings.append(commit.change_id)
        # Older commits (higher log order) first so stacks read trunk-first.
        self._children: dict[str, tuple[str, ...]] = {
            change_id: tuple(sorted(ids, key=self._display_key))
            for change_id, ids in children.items()
        }

    def _display_key(self, change_id: str) -> tuple[int, str]:
        commit = self._commits[change_id]
        return (-commit.order, change_id)

    def __contains__(self, change_id: object) -> bool:
        return change_id in self._commits

    def __len__(self) -> int:
        return len(self._commits)

    def __iter__(self) -> Iterator[Commit]:
        return iter(sorted(self._commits.values(), key=lambda commit: (commit.order, commit.change_id)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitGraph):
            return NotImplemented
        return self._commits == other._commits

    def __hash__(self) -> int:
        return hash(frozenset(self._commits.items()))

    def __repr__(self) -> str:
        return f"CommitGraph({len(self._commits)} commits)"

    def get(self, change_id: str | None) -> Commit | None:
        if change_id is None:
            return None
        return self._commits.get(change_id)

    def is_visible(self, change_id: str | None) -> bool:
        """Return whether ``change_id`` names a real (non-elided) commit."""
        commit = self.get(change_id)
        return commit is not None and not commit.is_elided

    def children(self, change_id: str) -> tuple[str, ...]:
        return self._children.get(change_id, ())

    def parents(self, change_id: str) -> tuple[str, ...]:
        commit = self._commits.get(change_id)
        return commit.parents if commit is not None else ()

    def roots(self) -> tuple[str, ...]:
        """Return visible commits with no visible parent, oldest first."""
        found = [
            commit.change_id
            for commit in self._commits.values()
            if not commit.is_elided and not any(self.is_visible(parent) for parent in commit.parents)
        ]
        return tuple(sorted(found, key=self._display_key))

    def descendants(self, change_id: str) -> frozenset[str]:
        """Return every commit reachable through the child index (excluding the start)."""
        return self._walk(change_id, self.children)

    def ancestors(self, change_id: str) -> frozenset[str]:
        """Return every commit reachable through parent links (excluding the start)."""
        return self._walk(change_id, self.parents)

    def _walk(self, start: str, step) -> frozenset[str]:
        seen: set[str] = set()
        stack = list(step(start))
        while stack:
            current = stack.pop()
            if current in seen or current == start:
                continue
            seen.add(current)
            stack.extend(step(current))
        return frozenset(seen)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return ancestor in self.ancestors(descendant)

    def working_copy(self) -> Commit | None:
        for commit in self._commits.values():
            if commit.role is CommitRole.WORKING_COPY:
                return commit
        return None

    def bookmarks(self) -> dict[str, str]:
        """Return ``bookmark -> change_id`` in log order."""
        mapping: dict[str, str] = {}
        for commit in self:
            for name in commit.bookmarks:
                mapping.setdefault(name, commit.change_id)
        return mapping

    def topological_order(self) -> tuple[str, ...]:
        """Return ids with parents before children.

        Commits caught in a cycle are appended in log order instead of
        being dropped, so callers always see every id exactly once.
        """
        pending = {
            change_id: sum(1 for parent in commit.parents if parent in self._commits)
            for change_id, commit in self._commits.items()
        }
        ready = [change_id for change_id, count in pending.items() if count == 0]
        ready.sort(key=self._display_key)
        ordered: list[str] = []
        emitted: set[str] = set()
        while ready:
            current = ready.pop(0)
            if current in emitted:
                continue
            emitted.add(current)
            ordered.append(current)
            for child in self.children(current):
                pending[child] -= 1
                if pending[child] == 0:
                    ready.append(child)
        for commit in self:
            if commit.change_id not in emitted:
                ordered.append(commit.change_id)
        return tuple(ordered)

    def with_parents(self, change_id: str, parents: tuple[str, ...]) -> CommitGraph:
        """Return a new graph where only ``change_id`` has different parents."""
        updated = []
        for commit in self._commits.values():
            if commit.change_id == change_id:
                commit = Commit(
                    change_id=commit.change_id,
                    commit_id=commit.commit_id,
                    parents=parents,
                    description=commit.description,
                    bookmarks=commit.bookmarks,
                    role=commit.role,
                    conflicted=commit.conflicted,
                    order=commit.order,
                )
            updated.append(commit)
        return CommitGraph(updated)
