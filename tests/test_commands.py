"""Argv construction and subprocess error mapping for ``JjClient``."""

from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from jjview.errors import JjCommandError, JjNotFoundError
from jjview.rebase import RebaseKind
from jjview.runtime.commands import DEFAULT_REVSET, JjClient, default_revset


def _completed(argv, returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(argv, returncode, stdout, stderr)


class JjClientTests(unittest.TestCase):
    def _client(self) -> JjClient:
        return JjClient("jj")

    def _argv(self, run_mock: mock.Mock) -> list[str]:
        return list(run_mock.call_args.args[0])

    def test_log_uses_no_graph_and_template(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([], stdout="out")) as run_mock:
            output = self._client().log("@", "change_id", limit=1, reverse=True)

        self.assertEqual(output, "out")
        self.assertEqual(
            self._argv(run_mock),
            ["jj", "log", "--no-graph", "--color", "never", "-r", "@", "-T", "change_id", "--reversed", "--limit", "1"],
        )
        self.assertFalse(run_mock.call_args.kwargs["check"])

    def test_rebase_flags_follow_kind(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([])) as run_mock:
            client = self._client()
            client.rebase("c", "a", RebaseKind.SINGLE)
            self.assertEqual(self._argv(run_mock), ["jj", "rebase", "-r", "c", "-d", "a"])
            client.rebase("c", "a", RebaseKind.WITH_DESCENDANTS)
            self.assertEqual(self._argv(run_mock), ["jj", "rebase", "-s", "c", "-d", "a"])
            client.rebase_onto_trunk("c", RebaseKind.SINGLE)
            self.assertEqual(self._argv(run_mock), ["jj", "rebase", "-r", "c", "-d", "trunk()", "--skip-emptied"])

    def test_bookmark_and_push_argv(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([])) as run_mock:
            client = self._client()
            client.bookmark_set("main", "b", allow_backwards=True)
            self.assertEqual(self._argv(run_mock), ["jj", "bookmark", "set", "main", "-r", "b", "--allow-backwards"])
            client.git_push(("one", "two"))
            self.assertEqual(self._argv(run_mock), ["jj", "git", "push", "-b", "one", "-b", "two"])
            client.abandon(("x", "y"))
            self.assertEqual(self._argv(run_mock), ["jj", "abandon", "x", "y"])
            client.commit("msg")
            self.assertEqual(self._argv(run_mock), ["jj", "commit", "-m", "msg"])

    def test_nonzero_exit_raises_command_error(self) -> None:
        failed = _completed([], returncode=1, stderr="Error: boom\n")
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=failed):
            with self.assertRaises(JjCommandError) as caught:
                self._client().edit("zzz")

        self.assertEqual(caught.exception.argv, ("jj", "edit", "zzz"))
        self.assertEqual(caught.exception.returncode, 1)
        self.assertEqual(caught.exception.summary(), "Error: boom")

    def test_missing_executable_raises_not_found(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", side_effect=FileNotFoundError()):
            with self.assertRaises(JjNotFoundError):
                self._client().log()

    def test_timeout_is_a_command_error(self) -> None:
        with mock.patch(
            "jjview.runtime.commands.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["jj"], 1),
        ):
            with self.assertRaises(JjCommandError) as caught:
                self._client().git_fetch()
        self.assertEqual(caught.exception.returncode, -1)

    def test_ensure_repo_maps_failure_to_not_found(self) -> None:
        failed = _completed([], returncode=1, stderr="Error: There is no jj repo in \".\"\n")
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=failed):
            with self.assertRaises(JjNotFoundError):
                self._client().ensure_repo()

    def test_describe_runs_attached_to_terminal(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([])) as run_mock:
            self._client().describe("b")

        self.assertEqual(self._argv(run_mock), ["jj", "describe", "-r", "b"])
        self.assertNotIn("stdout", run_mock.call_args.kwargs)

    def test_conflicted_files_takes_path_column(self) -> None:
        listing = "src/a b.py    2-sided conflict\ndocs/index.md    3-sided conflict including 1 deletion\n"
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([], stdout=listing)) as run_mock:
            paths = self._client().conflicted_files()

        self.assertEqual(self._argv(run_mock), ["jj", "resolve", "--list", "-r", "@"])
        self.assertEqual(paths, ["src/a b.py", "docs/index.md"])

    def test_conflicted_files_empty_when_jj_reports_none(self) -> None:
        failed = _completed([], returncode=2, stderr="Error: No conflicts found at this revision\n")
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=failed):
            self.assertEqual(self._client().conflicted_files(), [])

        other = _completed([], returncode=1, stderr="Error: Revision \"zzz\" doesn't exist\n")
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=other):
            with self.assertRaises(JjCommandError):
                self._client().conflicted_files("zzz")

    def test_resolve_runs_attached_to_terminal(self) -> None:
        with mock.patch("jjview.runtime.commands.subprocess.run", return_value=_completed([])) as run_mock:
            self._client().resolve("src/a.py")

        self.assertEqual(self._argv(run_mock), ["jj", "resolve", "src/a.py"])
        self.assertNotIn("stdout", run_mock.call_args.kwargs)

    def test_default_revset(self) -> None:
        self.assertEqual(default_revset("main"), "main | descendants(roots(main..@)) | @::")
        self.assertIn("trunk()", DEFAULT_REVSET)


if __name__ == "__main__":
    unittest.main()
