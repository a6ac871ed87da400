"""Hypothetical rebase projection used for live previews.

Pure functions over ``CommitGraph``: nothing here runs commands or mutates the
input graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import CycleError, UnknownCommitError
from .log_model import CommitGraph


class RebaseKind(str, Enum):
    """Which commits move with the source."""

    SINGLE = "single"
    WITH_DESCENDANTS = "with_descendants"

    @property
    def flag(self) -> str:
        return "-r" if self is RebaseKind.SINGLE else "-s"

    @property
    def label(self) -> str:
        return "rebase" if self is RebaseKind.SINGLE else "rebase with descendants"


@dataclass(frozen=True)
class RebasePreview:
    source: str
    destination: str
    kind: RebaseKind
    affected: frozenset[str]
    graph: CommitGraph

    def matches(self, source: str | None, destination: str | None, kind: RebaseKind | None = None) -> bool:
        if source != self.source or destination != self.destination:
            return False
        return kind is None or kind is self.kind


def simulate_rebase(
    graph: CommitGraph,
    source: str,
    destination: str,
    kind: RebaseKind = RebaseKind.SINGLE,
) -> RebasePreview:
    """Project ``source`` onto ``destination``.

    Only the source's parent link changes in the projected graph. Raises
    ``UnknownCommitError`` for a missing or elided endpoint and
    ``CycleError`` when ``destination`` is the source or one of its
    descendants.
    """
    for change_id in (source, destination):
        if not graph.is_visible(change_id):
            raise UnknownCommitError(change_id)

    descendants = graph.descendants(source)
    if destination == source or destination in descendants:
        raise CycleError(source, destination)

    if kind is RebaseKind.SINGLE:
        affected = frozenset({source})
    else:
        affected = frozenset({source}) | descendants

    return RebasePreview(
        source=source,
        destination=destination,
        kind=kind,
        affected=affected,
        graph=graph.with_parents(source, (destination,)),
    )
