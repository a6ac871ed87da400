"""Error taxonomy shared by the parser, simulator, and effect runner.

Only ``JjNotFoundError`` is fatal; every other class is recovered locally
and surfaced to the user as status text.
"""

from __future__ import annotations


class JjviewError(Exception):
    """Base class for all errors raised by jjview."""


class RebaseValidationError(JjviewError):
    """A hypothetical rebase cannot be applied to the current graph."""


class CycleError(RebaseValidationError):
    """Destination is the source or one of its descendants."""

    def __init__(self, source: str, destination: str) -> None:
        super().__init__(f"cannot rebase {source} onto {destination}: it would create a cycle")
        self.source = source
        self.destination = destination


class UnknownCommitError(RebaseValidationError):
    """An endpoint is not present (or only elided) in the current graph."""

    def __init__(self, change_id: str) -> None:
        super().__init__(f"unknown revision {change_id}")
        self.change_id = change_id


class JjCommandError(JjviewError):
    """The wrapped ``jj`` command exited non-zero."""

    def __init__(self, argv: tuple[str, ...], returncode: int, stderr: str) -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self.summary())

    def summary(self) -> str:
        """Return the first non-empty stderr line, clipped for the status bar."""
        for line in self.stderr.splitlines():
            stripped = line.strip()
            if stripped:
                return stripped if len(stripped) <= 80 else stripped[:77] + "..."
        return f"exit status {self.returncode}"


class JjNotFoundError(JjviewError):
    """The ``jj`` executable cannot be started at all."""


__all__ = [
    "JjviewError",
    "RebaseValidationError",
    "CycleError",
    "UnknownCommitError",
    "JjCommandError",
    "JjNotFoundError",
]
