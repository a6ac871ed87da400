"""Thin wrapper around the ``jj`` executable.

Builds argv for every operation the UI can request and runs it with
``subprocess``. Captured commands raise ``JjCommandError`` on a non-zero exit;
a missing executable raises ``JjNotFoundError``.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..errors import JjCommandError, JjNotFoundError
from ..log_model import LOG_TEMPLATE
from ..rebase import RebaseKind

logger = logging.getLogger(__name__)

TRUNK_REVSET = "trunk()"
DEFAULT_TIMEOUT_SECONDS = 120.0
_CONFLICT_COLUMNS = re.compile(r"\s{2,}")


def default_revset(base: str = TRUNK_REVSET) -> str:
    """Return the stack revset rooted at ``base``: base, its open stacks, and ``@``'s descendants."""
    return f"{base} | descendants(roots({base}..@)) | @::"


DEFAULT_REVSET = default_revset()


class JjClient:
    """Run ``jj`` subcommands in ``cwd`` (the current directory by default)."""

    def __init__(
        self,
        jj_command: str = "jj",
        cwd: Path | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.jj_command = jj_command
        self.cwd = cwd
        self.timeout_seconds = timeout_seconds

    def argv(self, args: Sequence[str]) -> tuple[str, ...]:
        return (self.jj_command, *args)

    def run(self, *args: str) -> str:
        """Run a captured command and return its stdout."""
        argv = self.argv(args)
        logger.debug("running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise JjNotFoundError(f"cannot run {self.jj_command!r}: executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise JjCommandError(argv, -1, f"timed out after {self.timeout_seconds:g}s") from exc
        if proc.returncode != 0:
            logger.warning("%s exited %d: %s", " ".join(argv), proc.returncode, proc.stderr.strip())
            raise JjCommandError(argv, proc.returncode, proc.stderr)
        return proc.stdout

    def run_interactive(self, *args: str) -> None:
        """Run a command attached to the user's terminal (editor sessions)."""
        argv = self.argv(args)
        logger.debug("running interactively %s", " ".join(argv))
        try:
            proc = subprocess.run(argv, cwd=self.cwd, check=False)
        except FileNotFoundError as exc:
            raise JjNotFoundError(f"cannot run {self.jj_command!r}: executable not found") from exc
        if proc.returncode != 0:
            raise JjCommandError(argv, proc.returncode, "")

    # Queries

    def ensure_repo(self) -> Path:
        """Return the workspace root or raise ``JjNotFoundError``."""
        try:
            return Path(self.run("root").strip())
        except JjCommandError as exc:
            raise JjNotFoundError(f"not a jj repository: {exc.summary()}") from exc

    def log(
        self,
        revset: str = DEFAULT_REVSET,
        template: str = LOG_TEMPLATE,
        limit: int | None = None,
        reverse: bool = False,
    ) -> str:
        args = ["log", "--no-graph", "--color", "never", "-r", revset, "-T", template]
        if reverse:
            args.append("--reversed")
        if limit is not None:
            args.extend(("--limit", str(limit)))
        return self.run(*args)

    def diff(self, rev: str) -> str:
        return self.run("diff", "--git", "--color", "never", "-r", rev)

    def conflicted_files(self, rev: str = "@") -> list[str]:
        """Paths with unresolved conflicts at ``rev``, from ``jj resolve --list``."""
        try:
            output = self.run("resolve", "--list", "-r", rev)
        except JjCommandError as exc:
            # jj exits non-zero when there is nothing to list.
            if "no conflicts" in exc.stderr.lower():
                return []
            raise
        paths: list[str] = []
        for line in output.splitlines():
            # "path    2-sided conflict"
            path = _CONFLICT_COLUMNS.split(line.strip(), maxsplit=1)[0]
            if path:
                paths.append(path)
        return paths

    # Mutations

    def edit(self, rev: str) -> None:
        self.run("edit", rev)

    def new(self, rev: str) -> None:
        self.run("new", rev)

    def describe(self, rev: str) -> None:
        self.run_interactive("describe", "-r", rev)

    def commit(self, message: str) -> None:
        self.run("commit", "-m", message)

    def abandon(self, revs: Sequence[str]) -> None:
        self.run("abandon", *revs)

    def undo(self) -> None:
        self.run("undo")

    def squash(self, source: str, target: str) -> None:
        self.run_interactive("squash", "--from", source, "--into", target)

    def resolve(self, path: str) -> None:
        self.run_interactive("resolve", path)

    def rebase(self, source: str, destination: str, kind: RebaseKind) -> None:
        self.run("rebase", kind.flag, source, "-d", destination)

    def rebase_onto_trunk(self, source: str, kind: RebaseKind) -> None:
        self.run("rebase", kind.flag, source, "-d", TRUNK_REVSET, "--skip-emptied")

    def rebase_stack(self, root: str, onto: str) -> None:
        self.run("rebase", "--source", root, "--onto", onto, "--skip-emptied")

    def bookmark_create(self, name: str, rev: str) -> None:
        self.run("bookmark", "create", name, "-r", rev)

    def bookmark_set(self, name: str, rev: str, allow_backwards: bool = False) -> None:
        args = ["bookmark", "set", name, "-r", rev]
        if allow_backwards:
            args.append("--allow-backwards")
        self.run(*args)

    def bookmark_delete(self, name: str) -> None:
        self.run("bookmark", "delete", name)

    def bookmark_list_tracked(self) -> str:
        return self.run("bookmark", "list", "--tracked")

    def git_push(self, bookmarks: Sequence[str]) -> None:
        args = ["git", "push"]
        for name in bookmarks:
            args.extend(("-b", name))
        self.run(*args)

    def git_push_all(self) -> None:
        self.run("git", "push", "--all")

    def git_fetch(self) -> None:
        self.run("git", "fetch")

    def git_import(self) -> None:
        self.run("git", "import")

    def git_export(self) -> None:
        self.run("git", "export")
