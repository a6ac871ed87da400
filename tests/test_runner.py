"""Effect runner tests against a mocked ``JjClient``.

Verifies command dispatch, feedback intents and that command failures turn
into status lines instead of escaping.
"""

from __future__ import annotations

import contextlib
import unittest
from unittest import mock

from jjview.engine import effects as fx
from jjview.engine import intents as it
from jjview.engine.state import Session, StatusKind
from jjview.errors import CycleError, JjCommandError
from jjview.log_model import Commit, CommitGraph, CommitRole
from jjview.rebase import RebaseKind
from jjview.runtime.commands import JjClient
from jjview.runtime.runner import EffectRunner, success_text

LOG_TEXT = "c\tC1\tb\twip\t\t@\nb\tB1\ta\tsecond\tmain\t\na\tA1\t\tfirst\t\t\n"


def _graph() -> CommitGraph:
    return CommitGraph(
        [
            Commit("c", parents=("b",), order=0, role=CommitRole.WORKING_COPY),
            Commit("b", parents=("a",), order=1),
            Commit("a", order=2),
        ]
    )


class EffectRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = mock.create_autospec(JjClient, instance=True)
        self.session = Session(graph=_graph())

    def test_refresh_parses_log_into_graph_loaded(self) -> None:
        self.client.log.return_value = LOG_TEXT
        runner = EffectRunner(self.client, "all()")

        [intent] = runner.run(fx.RefreshGraph(), self.session)

        self.client.log.assert_called_once_with("all()")
        self.assertIsInstance(intent, it.GraphLoaded)
        self.assertEqual(intent.graph.parents("c"), ("b",))
        self.assertEqual(intent.warnings, ())

    def test_refresh_failure_posts_error_status(self) -> None:
        self.client.log.side_effect = JjCommandError(("jj", "log"), 1, "Error: no such revset\n")
        runner = EffectRunner(self.client)

        [intent] = runner.run(fx.RefreshGraph(), self.session)

        self.assertEqual(intent, it.StatusPosted("Refresh failed: Error: no such revset", StatusKind.ERROR))

    def test_mutation_reports_success(self) -> None:
        busy: list[str] = []
        runner = EffectRunner(self.client, on_busy=busy.append)

        feedback = runner.run(fx.RunEdit("b"), self.session)

        self.client.edit.assert_called_once_with("b")
        self.assertEqual(busy, ["Edit"])
        self.assertEqual(feedback, [it.StatusPosted("Now editing b", StatusKind.SUCCESS)])

    def test_mutation_failure_is_reported_not_raised(self) -> None:
        self.client.abandon.side_effect = JjCommandError(("jj", "abandon", "b"), 1, "\nError: immutable\nhint")
        runner = EffectRunner(self.client)

        feedback = runner.run(fx.RunAbandon(("b",)), self.session)

        self.assertEqual(feedback, [it.StatusPosted("Abandon failed: Error: immutable", StatusKind.ERROR)])

    def test_rebase_runs_with_kind_flag_and_checks_conflicts(self) -> None:
        self.client.log.return_value = ""
        runner = EffectRunner(self.client)

        feedback = runner.run(fx.RunRebase("c", "a", RebaseKind.SINGLE), self.session)

        self.client.rebase.assert_called_once_with("c", "a", RebaseKind.SINGLE)
        self.assertEqual(feedback, [it.StatusPosted("Rebase complete", StatusKind.SUCCESS)])

    def test_rebase_with_conflicts_suggests_undo(self) -> None:
        self.client.log.return_value = "c\n"
        runner = EffectRunner(self.client)

        [intent] = runner.run(fx.RunRebase("c", "a", RebaseKind.SINGLE), self.session)

        self.assertEqual(intent.kind, StatusKind.WARNING)
        self.assertIn("undo", intent.text)

    def test_interactive_commands_suspend_terminal(self) -> None:
        events: list[str] = []

        @contextlib.contextmanager
        def suspend():
            events.append("suspend")
            yield
            events.append("resume")

        self.client.describe.side_effect = lambda rev: events.append(f"describe {rev}")
        runner = EffectRunner(self.client, suspend=suspend)

        runner.run(fx.RunDescribe("b"), self.session)

        self.assertEqual(events, ["suspend", "describe b", "resume"])

    def test_load_conflicts_lists_files(self) -> None:
        self.client.conflicted_files.return_value = ["a.txt", "src/b.py"]
        busy: list[str] = []
        runner = EffectRunner(self.client, on_busy=busy.append)

        feedback = runner.run(fx.LoadConflicts(), self.session)

        self.assertEqual(feedback, [it.ConflictsLoaded(("a.txt", "src/b.py"))])
        self.assertEqual(busy, ["Conflicts"])

    def test_load_conflicts_failure_carries_error(self) -> None:
        self.client.conflicted_files.side_effect = JjCommandError(("jj", "resolve"), 1, "Error: no working copy\n")
        runner = EffectRunner(self.client)

        feedback = runner.run(fx.LoadConflicts(), self.session)

        self.assertEqual(feedback, [it.ConflictsLoaded((), error="Conflicts failed: Error: no working copy")])

    def test_resolve_suspends_and_reports_remaining_conflicts(self) -> None:
        events: list[str] = []

        @contextlib.contextmanager
        def suspend():
            events.append("suspend")
            yield
            events.append("resume")

        self.client.resolve.side_effect = lambda path: events.append(f"resolve {path}")
        self.client.conflicted_files.return_value = ["b.txt"]
        runner = EffectRunner(self.client, suspend=suspend)

        feedback = runner.run(fx.RunResolve("a.txt"), self.session)

        self.assertEqual(events, ["suspend", "resolve a.txt", "resume"])
        self.assertEqual(feedback, [it.StatusPosted("Resolved a.txt. More conflicts remain", StatusKind.WARNING)])

        self.client.conflicted_files.return_value = []
        feedback = runner.run(fx.RunResolve("b.txt"), self.session)
        self.assertEqual(feedback, [it.StatusPosted("All conflicts resolved", StatusKind.SUCCESS)])

    def test_simulate_returns_preview_or_error(self) -> None:
        runner = EffectRunner(self.client)

        [ok] = runner.run(fx.SimulateRebase("c", "a", RebaseKind.SINGLE), self.session)
        self.assertEqual(ok.preview.graph.parents("c"), ("a",))
        self.assertIsNone(ok.error)

        [bad] = runner.run(fx.SimulateRebase("a", "c", RebaseKind.SINGLE), self.session)
        self.assertIsInstance(bad.error, CycleError)
        self.assertIsNone(bad.preview)

    def test_load_diff(self) -> None:
        self.client.diff.return_value = "diff --git a/x.py b/x.py\n@@ -1 +1 @@\n-old\n+new\n"
        runner = EffectRunner(self.client)

        [intent] = runner.run(fx.LoadDiff("b"), self.session)

        self.assertIsInstance(intent, it.DiffLoaded)
        self.assertEqual(len(intent.lines), 4)
        self.assertEqual(intent.lines[-1].path, "x.py")

    def test_persist_and_status_effects(self) -> None:
        saved: list[tuple[str, object]] = []
        runner = EffectRunner(self.client, persist=lambda key, value: saved.append((key, value)))

        self.assertEqual(runner.run(fx.PersistPreference("full_mode", True), self.session), [])
        self.assertEqual(saved, [("full_mode", True)])
        self.assertEqual(
            runner.run(fx.SetStatus("hello", StatusKind.WARNING), self.session),
            [it.StatusPosted("hello", StatusKind.WARNING)],
        )

    def test_success_text_for_push(self) -> None:
        self.assertEqual(success_text(fx.RunPush(("main",))), "Pushed bookmark 'main'")
        self.assertEqual(success_text(fx.RunPush(("a", "b"))), "Pushed 2 bookmarks")


if __name__ == "__main__":
    unittest.main()
