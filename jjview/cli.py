"""Command-line front door for jjview.

Without a subcommand the interactive commit tree starts. ``tree`` prints the
same tree statically and ``stack-sync`` rebases the current stack onto trunk.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from .engine import Session
from .errors import JjCommandError, JjNotFoundError
from .log_model import parse_log
from .render import format_static_tree
from .runtime import run_tui
from .runtime.app import configure_logging
from .runtime.commands import TRUNK_REVSET, JjClient, default_revset
from .runtime.config import load_preferences
from .stack_sync import stack_sync
from .ui_theme import available_theme_names, resolve_theme
from .view_model import build_rows

logger = logging.getLogger(__name__)


def render_static_tree(client: JjClient, full: bool, base: str | None, no_color: bool, theme_name: str | None) -> str:
    """Return the ``tree`` subcommand output for the stack rooted at ``base``."""
    prefs = load_preferences()
    result = parse_log(client.log(default_revset(base or TRUNK_REVSET)))
    for warning in result.warnings:
        logger.warning("skipped log %s: %r", warning.describe(), warning.text)
    rows = build_rows(Session(graph=result.graph, full_mode=full), prefs.description_width)
    return format_static_tree(rows, resolve_theme(theme_name or prefs.theme, no_color=no_color))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jjview",
        description="Browse, rebase and edit a jj commit stack in the terminal.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--full", action="store_true", help="Start in full mode (show every commit).")
    parser.add_argument("--revset", default=None, help="Revset to display (default: the current stacks).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Write debug logs.")
    subparsers = parser.add_subparsers(dest="command")

    tree = subparsers.add_parser("tree", aliases=["t"], help="Print the current stack as a tree.")
    tree.add_argument("-f", "--full", action="store_true", help="Show all commits, including those without bookmarks.")
    tree.add_argument("--from", dest="base", default=None, help="Base revision to start from (default: trunk()).")

    sync = subparsers.add_parser("stack-sync", aliases=["ss"], help="Sync the current stack with remote trunk.")
    sync.add_argument("-p", "--push", action="store_true", help="Push the first bookmark after syncing.")
    sync.add_argument("-f", "--force", action="store_true", help="Skip the confirmation prompt.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the TUI or a subcommand.

    Missing ``jj`` or a non-repository directory exits with status 1.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command in {"tree", "t"}:
            client = JjClient(load_preferences().jj_command)
            client.ensure_repo()
            no_color = args.no_color or not os.isatty(sys.stdout.fileno())
            sys.stdout.write(render_static_tree(client, args.full, args.base, no_color, args.theme))
            return
        if args.command in {"stack-sync", "ss"}:
            client = JjClient(load_preferences().jj_command)
            client.ensure_repo()
            stack_sync(client, push=args.push, force=args.force)
            return
        run_tui(args.theme, args.no_color, args.full, args.revset)
    except JjNotFoundError as exc:
        print(f"jjview: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except JjCommandError as exc:
        logger.error("%s failed: %s", " ".join(exc.argv), exc.stderr.strip())
        print(f"jjview: {' '.join(exc.argv[1:3])} failed: {exc.summary()}", file=sys.stderr)
        raise SystemExit(exc.returncode if exc.returncode > 0 else 1) from exc


if __name__ == "__main__":
    main()
