"""Tree projection and row building tests.

Covers compact/full filtering, collapse summaries, zoom, markers and
idempotence of ``build_rows``.
"""

from __future__ import annotations

import unittest

from jjview.engine.state import Rebasing, Selecting, Session
from jjview.log_model import Commit, CommitGraph, CommitRole
from jjview.rebase import simulate_rebase
from jjview.view_model import RowMarker, build_rows, cursor_index, project_tree


def _chain() -> CommitGraph:
    return CommitGraph(
        [
            Commit("ccccccccc1", parents=("bbbbbbbbb1",), order=0, role=CommitRole.WORKING_COPY, commit_id="0123456789"),
            Commit("bbbbbbbbb1", parents=("aaaaaaaaa1",), order=1, bookmarks=("main",), description="second"),
            Commit("aaaaaaaaa1", order=2, description="first"),
        ]
    )


A, B, C = "aaaaaaaaa1", "bbbbbbbbb1", "ccccccccc1"


class ProjectTreeTests(unittest.TestCase):
    def test_merge_is_placed_once(self) -> None:
        graph = CommitGraph(
            [
                Commit("m", parents=("x", "y"), order=0),
                Commit("y", parents=("r",), order=1),
                Commit("x", parents=("r",), order=2),
                Commit("r", order=3),
            ]
        )
        nodes = project_tree(graph)

        self.assertEqual([node.change_id for node in nodes].count("m"), 1)
        self.assertEqual([node.change_id for node in nodes][0], "r")

    def test_root_limits_projection_to_subtree(self) -> None:
        nodes = project_tree(_chain(), root=B)

        self.assertEqual([(node.change_id, node.depth) for node in nodes], [(B, 0), (C, 1)])


class BuildRowsTests(unittest.TestCase):
    def test_full_mode_lists_every_commit_with_depth(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True))

        self.assertEqual([(row.change_id, row.depth) for row in rows], [(A, 0), (B, 1), (C, 2)])
        self.assertEqual(rows[0].description, "first")
        self.assertEqual(rows[2].description, "(working copy)")
        self.assertEqual(rows[2].change_id_short, "cccccccc")
        self.assertEqual(rows[2].commit_id_short, "01234567")

    def test_compact_mode_hides_plain_commits_and_counts_them(self) -> None:
        rows = build_rows(Session(graph=_chain()))

        self.assertEqual([row.change_id for row in rows], [B, C])
        self.assertEqual(rows[0].hidden_count, 1)
        self.assertEqual([row.depth for row in rows], [0, 1])

    def test_build_rows_is_idempotent(self) -> None:
        session = Session(graph=_chain(), cursor=B, expanded=frozenset({B}))

        self.assertEqual(build_rows(session), build_rows(session))

    def test_cursor_falls_back_to_working_copy(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, cursor="gone"))

        self.assertEqual(cursor_index(rows, "gone"), 2)
        self.assertTrue(rows[2].is_cursor)
        self.assertEqual(sum(row.is_cursor for row in rows), 1)
        self.assertIsNone(cursor_index((), None))

    def test_expanded_row_carries_details(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, expanded=frozenset({B})))
        row = next(row for row in rows if row.change_id == B)

        self.assertTrue(row.is_expanded)
        self.assertIn("bookmarks main", row.details)
        self.assertIn("parents aaaaaaaa", row.details)

    def test_collapse_depth_replaces_deep_subtrees_with_summary(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, collapse_depth=1))

        self.assertEqual(len(rows), 2)
        summary = rows[1]
        self.assertFalse(summary.is_commit)
        self.assertEqual(summary.key, "+" + A)
        self.assertEqual(summary.hidden_count, 2)

    def test_expanding_parent_opens_collapsed_children(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, collapse_depth=1, expanded=frozenset({A})))

        self.assertIn(B, [row.key for row in rows])

    def test_zoom_shows_only_the_focused_subtree(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, focus=(B,)))

        self.assertEqual([row.change_id for row in rows], [B, C])
        self.assertTrue(rows[0].is_zoom_root)
        self.assertEqual(rows[0].depth, 0)

    def test_rebase_preview_is_displayed_with_markers(self) -> None:
        graph = _chain()
        preview = simulate_rebase(graph, C, A)
        session = Session(graph=graph, full_mode=True, mode=Rebasing(source=C, destination=A, preview=preview))
        rows = build_rows(session)
        by_id = {row.change_id: row for row in rows}

        self.assertEqual(by_id[C].depth, 1)
        self.assertEqual(by_id[C].marker, RowMarker.SOURCE)
        self.assertEqual(by_id[A].marker, RowMarker.DESTINATION)
        self.assertIsNone(by_id[B].marker)

    def test_selection_flags_rows(self) -> None:
        rows = build_rows(Session(graph=_chain(), full_mode=True, mode=Selecting(frozenset({A, C}))))

        self.assertEqual([row.is_selected for row in rows], [True, False, True])

    def test_long_description_is_truncated(self) -> None:
        graph = CommitGraph([Commit("a", description="x" * 100)])
        rows = build_rows(Session(graph=graph, full_mode=True), description_width=10)

        self.assertEqual(rows[0].description, "x" * 9 + "…")


if __name__ == "__main__":
    unittest.main()
