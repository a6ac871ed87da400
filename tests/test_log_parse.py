"""Parser tolerance tests for ``jj log`` template output.

Malformed lines must be skipped with a warning and never abort parsing.
"""

from __future__ import annotations

import unittest

from jjview.log_model import CommitRole, parse_log


def log_line(change_id: str, parents: str = "", description: str = "", bookmarks: str = "", flags: str = "", commit_id: str = "") -> str:
    return "\t".join([change_id, commit_id or change_id.upper(), parents, description, bookmarks, flags])


class ParseLogTests(unittest.TestCase):
    def test_parses_fields_and_roles(self) -> None:
        text = "\n".join(
            [
                log_line("ccc", "bbb", "third", flags="@"),
                log_line("bbb", "aaa", "second", bookmarks="main,feature*"),
                log_line("aaa", "", "root commit", flags="x"),
            ]
        )
        result = parse_log(text)

        self.assertEqual(result.warnings, ())
        self.assertEqual(len(result.graph), 3)
        head = result.graph.get("ccc")
        self.assertEqual(head.parents, ("bbb",))
        self.assertEqual(head.role, CommitRole.WORKING_COPY)
        self.assertEqual(head.commit_id, "CCC")
        self.assertEqual(result.graph.get("bbb").bookmarks, ("main", "feature"))
        root = result.graph.get("aaa")
        self.assertEqual(root.role, CommitRole.CONFLICTED)
        self.assertTrue(root.conflicted)
        self.assertEqual(root.parents, ())

    def test_malformed_line_is_skipped_with_one_warning(self) -> None:
        text = "\n".join(
            [
                log_line("ccc", "bbb"),
                "garbage without tabs",
                log_line("bbb", "aaa"),
                log_line("aaa"),
            ]
        )
        result = parse_log(text)

        self.assertEqual(sorted(commit.change_id for commit in result.graph), ["aaa", "bbb", "ccc"])
        self.assertEqual(len(result.warnings), 1)
        warning = result.warnings[0]
        self.assertEqual(warning.line_number, 2)
        self.assertEqual(warning.text, "garbage without tabs")
        self.assertIn("line 2", warning.describe())

    def test_duplicate_and_empty_ids_are_warnings(self) -> None:
        text = "\n".join([log_line("aaa"), log_line("aaa", description="again"), log_line("")])
        result = parse_log(text)

        self.assertEqual(len(result.graph), 1)
        self.assertEqual(result.graph.get("aaa").description, "")
        self.assertEqual(len(result.warnings), 2)

    def test_blank_lines_and_crlf_are_ignored(self) -> None:
        text = log_line("bbb", "aaa") + "\r\n\r\n" + log_line("aaa") + "\r\n"
        result = parse_log(text)

        self.assertEqual(result.warnings, ())
        self.assertEqual(result.graph.get("bbb").parents, ("aaa",))

    def test_missing_parent_becomes_elided_stub(self) -> None:
        result = parse_log(log_line("bbb", "outside"))

        stub = result.graph.get("outside")
        self.assertIsNotNone(stub)
        self.assertEqual(stub.role, CommitRole.ELIDED)
        self.assertFalse(result.graph.is_visible("outside"))
        self.assertEqual(result.graph.roots(), ("bbb",))

    def test_description_may_contain_tabs(self) -> None:
        result = parse_log(log_line("aaa", description="fix\tthing"))

        self.assertEqual(result.graph.get("aaa").description, "fix\tthing")
        self.assertEqual(result.warnings, ())

    def test_duplicate_parents_are_collapsed_and_merges_detected(self) -> None:
        text = "\n".join([log_line("mmm", "aaa,bbb,aaa"), log_line("bbb"), log_line("aaa")])
        merge = parse_log(text).graph.get("mmm")

        self.assertEqual(merge.parents, ("aaa", "bbb"))
        self.assertTrue(merge.is_merge)

    def test_hidden_flag_marks_commit_elided(self) -> None:
        result = parse_log(log_line("aaa", flags="~"))

        self.assertTrue(result.graph.get("aaa").is_elided)

    def test_empty_input_yields_empty_graph(self) -> None:
        result = parse_log("")

        self.assertEqual(len(result.graph), 0)
        self.assertEqual(result.warnings, ())


if __name__ == "__main__":
    unittest.main()
