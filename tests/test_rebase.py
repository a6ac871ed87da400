"""Rebase simulation tests: projection correctness and cycle rejection."""

from __future__ import annotations

import unittest

from jjview.errors import CycleError, RebaseValidationError, UnknownCommitError
from jjview.log_model import Commit, CommitGraph, CommitRole
from jjview.rebase import RebaseKind, simulate_rebase


def _chain() -> CommitGraph:
    return CommitGraph(
        [
            Commit("c", parents=("b",), order=0, role=CommitRole.WORKING_COPY),
            Commit("b", parents=("a",), order=1, bookmarks=("main",)),
            Commit("a", order=2),
        ]
    )


class SimulateRebaseTests(unittest.TestCase):
    def test_single_rebase_only_changes_source_parent(self) -> None:
        graph = _chain()
        preview = simulate_rebase(graph, "c", "a")

        self.assertEqual(preview.graph.parents("c"), ("a",))
        for change_id in ("a", "b"):
            self.assertEqual(preview.graph.get(change_id), graph.get(change_id))
        self.assertEqual(preview.affected, frozenset({"c"}))
        self.assertEqual(graph.parents("c"), ("b",))

    def test_with_descendants_marks_subtree_as_affected(self) -> None:
        preview = simulate_rebase(_chain(), "b", "a", RebaseKind.WITH_DESCENDANTS)

        self.assertEqual(preview.affected, frozenset({"b", "c"}))
        self.assertEqual(preview.graph.parents("b"), ("a",))
        self.assertEqual(preview.graph.parents("c"), ("b",))

    def test_rebase_onto_descendant_is_a_cycle_for_both_kinds(self) -> None:
        for kind in RebaseKind:
            with self.subTest(kind=kind):
                with self.assertRaises(CycleError) as caught:
                    simulate_rebase(_chain(), "a", "c", kind)
                self.assertEqual(caught.exception.source, "a")
                self.assertEqual(caught.exception.destination, "c")

    def test_rebase_onto_self_is_a_cycle(self) -> None:
        with self.assertRaises(CycleError):
            simulate_rebase(_chain(), "b", "b")

    def test_unknown_or_elided_endpoint_is_rejected(self) -> None:
        graph = CommitGraph([Commit("b", parents=("stub",)), Commit("stub", role=CommitRole.ELIDED, order=1)])

        with self.assertRaises(UnknownCommitError):
            simulate_rebase(graph, "b", "missing")
        with self.assertRaises(RebaseValidationError):
            simulate_rebase(graph, "b", "stub")

    def test_preview_matches_endpoints_and_kind(self) -> None:
        preview = simulate_rebase(_chain(), "c", "a")

        self.assertTrue(preview.matches("c", "a"))
        self.assertTrue(preview.matches("c", "a", RebaseKind.SINGLE))
        self.assertFalse(preview.matches("c", "a", RebaseKind.WITH_DESCENDANTS))
        self.assertFalse(preview.matches("c", "b"))

    def test_kind_flags(self) -> None:
        self.assertEqual(RebaseKind.SINGLE.flag, "-r")
        self.assertEqual(RebaseKind.WITH_DESCENDANTS.flag, "-s")


if __name__ == "__main__":
    unittest.main()
