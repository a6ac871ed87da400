"""Diff parsing and highlighting for the diff viewer."""

from __future__ import annotations

import re
import unittest

from pygments.lexers import TextLexer

from jjview.diff import DiffLineKind, parse_diff
from jjview.render.highlight import highlight_code, lexer_for_path

ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

SAMPLE = (
    "diff --git a/src/app.py b/src/app.py\n"
    "index 1234567..89abcde 100644\n"
    "--- a/src/app.py\n"
    "+++ b/src/app.py\n"
    "@@ -1,3 +1,3 @@\n"
    " import os\n"
    "-x = 1\n"
    "+x = 2\n"
    "diff --git a/README b/README\r\n"
    "new file mode 100644\n"
    "@@ -0,0 +1 @@\n"
    "+hello\n"
)


class ParseDiffTests(unittest.TestCase):
    def test_classifies_lines(self) -> None:
        kinds = [line.kind for line in parse_diff(SAMPLE)]
        self.assertEqual(
            kinds,
            [
                DiffLineKind.FILE_HEADER,
                DiffLineKind.META,
                DiffLineKind.META,
                DiffLineKind.META,
                DiffLineKind.HUNK,
                DiffLineKind.CONTEXT,
                DiffLineKind.REMOVED,
                DiffLineKind.ADDED,
                DiffLineKind.FILE_HEADER,
                DiffLineKind.META,
                DiffLineKind.HUNK,
                DiffLineKind.ADDED,
            ],
        )

    def test_header_lines_before_hunk_are_not_treated_as_changes(self) -> None:
        lines = parse_diff(SAMPLE)
        self.assertEqual(lines[2].text, "--- a/src/app.py")
        self.assertIs(lines[2].kind, DiffLineKind.META)

    def test_lines_carry_their_file_path(self) -> None:
        lines = parse_diff(SAMPLE)
        self.assertEqual(lines[6].path, "src/app.py")
        self.assertEqual(lines[8].text, "diff --git a/README b/README")
        self.assertEqual(lines[-1].path, "README")

    def test_empty_diff(self) -> None:
        self.assertEqual(parse_diff(""), ())


class HighlightTests(unittest.TestCase):
    def test_unknown_extension_falls_back_to_text(self) -> None:
        self.assertIsInstance(lexer_for_path("notes.unknown-ext"), TextLexer)
        self.assertIsInstance(lexer_for_path(None), TextLexer)

    def test_plain_text_is_returned_unchanged(self) -> None:
        self.assertEqual(highlight_code("Permission  is  granted", "LICENSE.unknown-ext"), "Permission  is  granted")

    def test_python_code_is_colored_without_changing_text(self) -> None:
        rendered = highlight_code("def run(x):", "app.py")
        self.assertNotIn("\n", rendered)
        self.assertEqual(ANSI_RE.sub("", rendered), "def run(x):")

    def test_blank_line_is_untouched(self) -> None:
        self.assertEqual(highlight_code("   ", "app.py"), "   ")


if __name__ == "__main__":
    unittest.main()
