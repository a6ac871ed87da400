"""Runtime composition layer for jjview.

Loads preferences, wires the jj client, effect runner, terminal and key
mapper together, and starts the loop.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from platformdirs import user_log_dir

from ..engine import Session
from ..engine import intents as it
from ..input import KeyMapper
from ..render import body_height, frame_text, render_frame
from ..ui_theme import resolve_theme
from ..view_model import build_rows
from .commands import JjClient
from .config import APP_NAME, load_preferences, save_preference
from .loop import RuntimeLoopTiming, SessionDriver, run_main_loop
from .runner import EffectRunner
from .terminal import TerminalController

logger = logging.getLogger(__name__)

LOG_FILENAME = "jjview.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> Path | None:
    """Send log records to a file; the terminal belongs to the UI.

    Returns the log file path, or ``None`` when the log directory cannot be
    created (records are then dropped).
    """
    root = logging.getLogger(APP_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False
    log_path = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return log_path


def run_tui(
    theme_name: str | None = None,
    no_color: bool = False,
    full: bool = False,
    revset: str | None = None,
) -> None:
    """Start the interactive commit tree.

    Raises ``JjNotFoundError`` before touching the terminal when ``jj`` is
    missing or the current directory is not a repository.
    """
    prefs = load_preferences()
    client = JjClient(prefs.jj_command)
    root = client.ensure_repo()
    logger.info("starting in %s", root)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd):
        raise SystemExit("jjview needs an interactive terminal; use `jjview tree` for static output.")

    theme = resolve_theme(theme_name or prefs.theme, no_color=no_color)
    terminal = TerminalController(stdin_fd, stdout_fd)
    mapper = KeyMapper()
    driver: SessionDriver

    def draw_busy(label: str) -> None:
        columns, lines = terminal.size()
        session = driver.session
        rows = build_rows(session, prefs.description_width)
        terminal.write(frame_text(render_frame(session, rows, mapper, theme, columns, lines, busy=label)))

    runner = EffectRunner(
        client,
        revset or prefs.revset,
        persist=save_preference,
        on_busy=draw_busy,
        suspend=terminal.suspended,
    )
    _columns, lines = terminal.size()
    session = Session(
        full_mode=full or prefs.full_mode,
        collapse_depth=prefs.collapse_depth,
        viewport_rows=body_height(lines),
    )
    driver = SessionDriver(session, runner)

    with terminal.raw_mode():
        driver.dispatch(it.Refresh())
        run_main_loop(
            driver,
            terminal,
            mapper,
            theme,
            stdin_fd,
            RuntimeLoopTiming(),
            description_width=prefs.description_width,
        )
