"""Main interactive event loop for the terminal UI.

Reads keys, maps them to intents, reduces, runs effects, and redraws.
Feature logic lives in the reducer and the effect runner.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from ..engine import Session, reduce
from ..engine import intents as it
from ..input import KeyMapper, read_key
from ..render import body_height, frame_text, render_frame
from ..ui_theme import UITheme
from ..view_model import build_rows
from .runner import EffectRunner
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 250
    status_ttl_seconds: float = 4.0


class SessionDriver:
    """Own the current session and feed intents through reducer and runner.

    Effects of one step run in order and the intents they return are
    queued, so a ``RefreshGraph`` after a mutation observes the mutation.
    """

    def __init__(
        self,
        session: Session,
        runner: EffectRunner,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.runner = runner
        self._clock = clock
        self.status_posted_at: float | None = None

    def dispatch(self, intent: it.Intent) -> Session:
        queue: deque[it.Intent] = deque([intent])
        while queue:
            previous_status = self.session.status
            self.session, effects = reduce(self.session, queue.popleft())
            if self.session.status is not previous_status:
                self.status_posted_at = self._clock() if self.session.status is not None else None
            for effect in effects:
                queue.extend(self.runner.run(effect, self.session))
        return self.session

    def status_expired(self, ttl_seconds: float) -> bool:
        if self.session.status is None or self.status_posted_at is None:
            return False
        return self._clock() - self.status_posted_at >= ttl_seconds


def run_main_loop(
    driver: SessionDriver,
    terminal: TerminalController,
    mapper: KeyMapper,
    theme: UITheme,
    stdin_fd: int,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
    description_width: int | None = None,
) -> None:
    """Run the interactive loop until the session asks to quit."""
    last_size: tuple[int, int] | None = None
    last_drawn: tuple[Session, tuple[int, int]] | None = None

    def draw() -> None:
        nonlocal last_drawn
        columns, lines = terminal.size()
        session = driver.session
        rows = build_rows(session) if description_width is None else build_rows(session, description_width)
        terminal.write(frame_text(render_frame(session, rows, mapper, theme, columns, lines)))
        last_drawn = (session, (columns, lines))

    while not driver.session.should_quit:
        size = terminal.size()
        if size != last_size:
            last_size = size
            driver.dispatch(it.Resize(body_height(size[1])))
        if last_drawn is None or last_drawn[0] is not driver.session or last_drawn[1] != size:
            draw()

        key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
        if not key:
            if driver.status_expired(timing.status_ttl_seconds):
                driver.dispatch(it.ExpireStatus())
            continue

        intent = mapper.map_key(driver.session.mode, key)
        if intent is None:
            if mapper.pending is None and driver.session.pending_prefix is not None:
                # The prefix ended without a binding; drop its hint line.
                driver.dispatch(it.SetPrefix(None))
            continue
        logger.debug("key %r -> %r", key, intent)
        driver.dispatch(intent)
        if driver.session.pending_prefix is None:
            mapper.reset()
