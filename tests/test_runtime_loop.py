"""Runtime loop wiring tests with fake terminal, runner and key source."""

from __future__ import annotations

import unittest
from unittest import mock

from jjview.engine import effects as fx
from jjview.engine import intents as it
from jjview.engine.state import Normal, Session, StatusKind
from jjview.input import KeyMapper
from jjview.log_model import Commit, CommitGraph, CommitRole
from jjview.runtime.loop import RuntimeLoopTiming, SessionDriver, run_main_loop
from jjview.ui_theme import PLAIN_THEME

A, B, C = "aaaaaaaa", "bbbbbbbb", "cccccccc"


def _graph() -> CommitGraph:
    return CommitGraph(
        [
            Commit(C, parents=(B,), order=0, role=CommitRole.WORKING_COPY),
            Commit(B, parents=(A,), order=1, bookmarks=("main",)),
            Commit(A, order=2),
        ]
    )


class _FakeRunner:
    def __init__(self) -> None:
        self.effects: list[fx.Effect] = []

    def run(self, effect: fx.Effect, session: Session) -> list[it.Intent]:
        self.effects.append(effect)
        if isinstance(effect, fx.RefreshGraph):
            return [it.GraphLoaded(_graph())]
        if isinstance(effect, fx.SetStatus):
            return [it.StatusPosted(effect.text, effect.kind)]
        if isinstance(effect, fx.RunEdit):
            return [it.StatusPosted(f"Now editing {effect.rev}", StatusKind.SUCCESS)]
        return []


class _FakeTerminal:
    def __init__(self) -> None:
        self.writes: list[str] = []

    def size(self) -> tuple[int, int]:
        return 60, 10

    def write(self, text: str) -> None:
        self.writes.append(text)


class SessionDriverTests(unittest.TestCase):
    def test_effects_feed_back_until_queue_is_empty(self) -> None:
        runner = _FakeRunner()
        driver = SessionDriver(Session(full_mode=True), runner)

        driver.dispatch(it.Refresh())
        self.assertEqual(driver.session.graph, _graph())
        self.assertEqual(driver.session.cursor, C)

        driver.dispatch(it.MoveCursor(-1))
        driver.dispatch(it.EditCommit())
        self.assertEqual(runner.effects[-2:], [fx.RunEdit(B), fx.RefreshGraph()])
        self.assertEqual(driver.session.status.text, f"Now editing {B}")
        self.assertIsInstance(driver.session.mode, Normal)

    def test_status_expiry_uses_clock(self) -> None:
        now = [100.0]
        driver = SessionDriver(Session(graph=_graph()), _FakeRunner(), clock=lambda: now[0])

        driver.dispatch(it.StatusPosted("hello"))
        self.assertFalse(driver.status_expired(4.0))
        now[0] = 105.0
        self.assertTrue(driver.status_expired(4.0))
        driver.dispatch(it.ExpireStatus())
        self.assertIsNone(driver.session.status)
        self.assertFalse(driver.status_expired(4.0))


class RunMainLoopTests(unittest.TestCase):
    def test_keys_drive_session_until_quit(self) -> None:
        runner = _FakeRunner()
        driver = SessionDriver(Session(graph=_graph(), cursor=C, full_mode=True), runner)
        terminal = _FakeTerminal()
        keys = iter(["k", "", "g", "f", "q"])

        with mock.patch("jjview.runtime.loop.read_key", side_effect=lambda fd, timeout_ms: next(keys)):
            run_main_loop(driver, terminal, KeyMapper(), PLAIN_THEME, 0, RuntimeLoopTiming(key_timeout_ms=1))

        self.assertTrue(driver.session.should_quit)
        self.assertEqual(driver.session.cursor, B)
        self.assertEqual(driver.session.viewport_rows, 8)
        self.assertIn(fx.RunGitFetch(), runner.effects)
        self.assertTrue(terminal.writes)
        self.assertTrue(all(text.startswith("\x1b[H") for text in terminal.writes))

    def test_unbound_prefix_completion_clears_hint_without_effects(self) -> None:
        runner = _FakeRunner()
        driver = SessionDriver(Session(graph=_graph(), cursor=C, full_mode=True), runner)
        keys = iter(["g", "%", "b", "ESC", "q"])
        prefixes: list[str | None] = []

        def read(fd, timeout_ms):
            prefixes.append(driver.session.pending_prefix)
            return next(keys)

        with mock.patch("jjview.runtime.loop.read_key", side_effect=read):
            run_main_loop(driver, _FakeTerminal(), KeyMapper(), PLAIN_THEME, 0, RuntimeLoopTiming(key_timeout_ms=1))

        self.assertEqual(prefixes, [None, "g", None, "b", None])
        self.assertEqual(runner.effects, [])
        self.assertTrue(driver.session.should_quit)
        self.assertIsInstance(driver.session.mode, Normal)


if __name__ == "__main__":
    unittest.main()
