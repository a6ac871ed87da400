"""Carry out reducer effects and translate outcomes into feedback intents.

This is the only module that invokes ``jj`` on behalf of the TUI. Command
failures are logged with full stderr and reported as one status line; they
never escape ``EffectRunner.run``.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from typing import ContextManager

from ..diff import parse_diff
from ..engine import effects as fx
from ..engine import intents as it
from ..engine.state import Session, StatusKind
from ..errors import JjCommandError, RebaseValidationError
from ..log_model import parse_log
from ..rebase import simulate_rebase
from ..view_model import short_id
from .commands import DEFAULT_REVSET, JjClient

logger = logging.getLogger(__name__)

CONFLICT_TEMPLATE = 'change_id ++ "\\n"'


def _pushed_text(bookmarks: tuple[str, ...]) -> str:
    if len(bookmarks) == 1:
        return f"Pushed bookmark '{bookmarks[0]}'"
    return f"Pushed {len(bookmarks)} bookmarks"


def success_text(effect: fx.Effect) -> str:
    """Status line shown after ``effect`` completed."""
    if isinstance(effect, fx.RunEdit):
        return f"Now editing {short_id(effect.rev)}"
    if isinstance(effect, fx.RunNew):
        return "Created new commit"
    if isinstance(effect, fx.RunCommit):
        return "Changes committed"
    if isinstance(effect, fx.RunDescribe):
        return f"Described {short_id(effect.rev)}"
    if isinstance(effect, fx.RunAbandon):
        return "Revision abandoned" if len(effect.revs) == 1 else f"Abandoned {len(effect.revs)} revisions"
    if isinstance(effect, fx.RunUndo):
        return "Operation undone"
    if isinstance(effect, fx.RunSquash):
        return f"Squashed {short_id(effect.source)} into {short_id(effect.target)}"
    if isinstance(effect, fx.RunResolve):
        return "All conflicts resolved"
    if isinstance(effect, fx.RunRebase):
        return "Rebase complete"
    if isinstance(effect, fx.RunRebaseOntoTrunk):
        return "Rebased onto trunk"
    if isinstance(effect, fx.RunBookmarkCreate):
        return f"Created bookmark '{effect.name}' at {short_id(effect.rev)}"
    if isinstance(effect, fx.RunBookmarkSet):
        return f"Moved bookmark '{effect.name}' to {short_id(effect.rev)}"
    if isinstance(effect, fx.RunBookmarkDelete):
        return f"Deleted bookmark '{effect.name}'"
    if isinstance(effect, fx.RunPush):
        return _pushed_text(effect.bookmarks)
    if isinstance(effect, fx.RunPushAll):
        return "Pushed all bookmarks"
    if isinstance(effect, fx.RunGitFetch):
        return "Git fetch complete"
    if isinstance(effect, fx.RunGitImport):
        return "Git import complete"
    if isinstance(effect, fx.RunGitExport):
        return "Git export complete"
    return f"{effect.label} complete"


class EffectRunner:
    """Execute effects against a ``JjClient``.

    ``on_busy`` is called with a label before every ``jj`` invocation so the
    UI can draw an indicator. ``suspend`` returns a context manager that hands
    the terminal to editor-driven commands (describe, squash, resolve).
    """

    def __init__(
        self,
        client: JjClient,
        revset: str = DEFAULT_REVSET,
        *,
        persist: Callable[[str, object], None] | None = None,
        on_busy: Callable[[str], None] | None = None,
        suspend: Callable[[], ContextManager[object]] | None = None,
    ) -> None:
        self.client = client
        self.revset = revset
        self._persist = persist
        self._on_busy = on_busy
        self._suspend = suspend if suspend is not None else contextlib.nullcontext
        self._mutations: dict[type, Callable[[object], None]] = {
            fx.RunEdit: lambda e: client.edit(e.rev),
            fx.RunNew: lambda e: client.new(e.rev),
            fx.RunCommit: lambda e: client.commit(e.message),
            fx.RunAbandon: lambda e: client.abandon(e.revs),
            fx.RunUndo: lambda e: client.undo(),
            fx.RunRebase: lambda e: client.rebase(e.source, e.destination, e.kind),
            fx.RunRebaseOntoTrunk: lambda e: client.rebase_onto_trunk(e.source, e.kind),
            fx.RunBookmarkCreate: lambda e: client.bookmark_create(e.name, e.rev),
            fx.RunBookmarkSet: lambda e: client.bookmark_set(e.name, e.rev, e.allow_backwards),
            fx.RunBookmarkDelete: lambda e: client.bookmark_delete(e.name),
            fx.RunPush: lambda e: client.git_push(e.bookmarks),
            fx.RunPushAll: lambda e: client.git_push_all(),
            fx.RunGitFetch: lambda e: client.git_fetch(),
            fx.RunGitImport: lambda e: client.git_import(),
            fx.RunGitExport: lambda e: client.git_export(),
        }
        self._interactive: dict[type, Callable[[object], None]] = {
            fx.RunDescribe: lambda e: client.describe(e.rev),
            fx.RunSquash: lambda e: client.squash(e.source, e.target),
            fx.RunResolve: lambda e: client.resolve(e.path),
        }

    def _busy(self, label: str) -> None:
        if self._on_busy is not None:
            self._on_busy(label)

    def load_graph(self) -> it.GraphLoaded:
        """Read and parse the log; raises ``JjCommandError`` on failure."""
        result = parse_log(self.client.log(self.revset))
        for warning in result.warnings:
            logger.warning("skipped log %s: %r", warning.describe(), warning.text)
        return it.GraphLoaded(result.graph, result.warnings)

    def run(self, effect: fx.Effect, session: Session) -> list[it.Intent]:
        """Execute one effect and return the intents to feed back to the reducer."""
        if isinstance(effect, fx.SetStatus):
            return [it.StatusPosted(effect.text, effect.kind)]
        if isinstance(effect, fx.PersistPreference):
            if self._persist is not None:
                self._persist(effect.key, effect.value)
            return []
        if isinstance(effect, fx.SimulateRebase):
            return [self._simulate(effect, session)]
        if isinstance(effect, fx.RefreshGraph):
            return self._refresh()
        if isinstance(effect, fx.LoadDiff):
            return self._load_diff(effect)
        if isinstance(effect, fx.LoadConflicts):
            return self._load_conflicts(effect)

        mutation = self._mutations.get(type(effect))
        interactive = self._interactive.get(type(effect))
        if mutation is None and interactive is None:
            logger.error("no handler for effect %r", effect)
            return []

        self._busy(effect.label)
        try:
            if interactive is not None:
                with self._suspend():
                    interactive(effect)
            else:
                mutation(effect)
        except JjCommandError as exc:
            logger.error("%s failed: %s", effect.label, exc.stderr.strip() or exc.summary())
            return [it.StatusPosted(f"{effect.label} failed: {exc.summary()}", StatusKind.ERROR)]

        if isinstance(effect, (fx.RunRebase, fx.RunRebaseOntoTrunk)) and self._has_conflicts(effect.source):
            return [it.StatusPosted("Rebase created conflicts. Press u to undo", StatusKind.WARNING)]
        if isinstance(effect, fx.RunResolve) and self._conflicts_remain():
            return [it.StatusPosted(f"Resolved {effect.path}. More conflicts remain", StatusKind.WARNING)]
        return [it.StatusPosted(success_text(effect), StatusKind.SUCCESS)]

    def _simulate(self, effect: fx.SimulateRebase, session: Session) -> it.RebasePreviewed:
        try:
            preview = simulate_rebase(session.graph, effect.source, effect.destination, effect.kind)
        except RebaseValidationError as exc:
            return it.RebasePreviewed(effect.source, effect.destination, error=exc)
        return it.RebasePreviewed(effect.source, effect.destination, preview=preview)

    def _refresh(self) -> list[it.Intent]:
        self._busy("Refresh")
        try:
            return [self.load_graph()]
        except JjCommandError as exc:
            logger.error("refresh failed: %s", exc.stderr.strip() or exc.summary())
            return [it.StatusPosted(f"Refresh failed: {exc.summary()}", StatusKind.ERROR)]

    def _load_diff(self, effect: fx.LoadDiff) -> list[it.Intent]:
        self._busy(effect.label)
        try:
            text = self.client.diff(effect.rev)
        except JjCommandError as exc:
            logger.error("diff failed: %s", exc.stderr.strip() or exc.summary())
            return [it.StatusPosted(f"Diff failed: {exc.summary()}", StatusKind.ERROR)]
        return [it.DiffLoaded(effect.rev, parse_diff(text))]

    def _load_conflicts(self, effect: fx.LoadConflicts) -> list[it.Intent]:
        self._busy(effect.label)
        try:
            files = self.client.conflicted_files()
        except JjCommandError as exc:
            logger.error("conflict listing failed: %s", exc.stderr.strip() or exc.summary())
            return [it.ConflictsLoaded((), error=f"Conflicts failed: {exc.summary()}")]
        return [it.ConflictsLoaded(tuple(files))]

    def _conflicts_remain(self) -> bool:
        try:
            return bool(self.client.conflicted_files())
        except JjCommandError:
            logger.debug("conflict listing after resolve failed", exc_info=True)
            return False

    def _has_conflicts(self, source: str) -> bool:
        try:
            output = self.client.log(f"({source}):: & conflicts()", CONFLICT_TEMPLATE)
        except JjCommandError:
            logger.debug("conflict check after rebase of %s failed", source, exc_info=True)
            return False
        return bool(output.strip())
