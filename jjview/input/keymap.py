"""Key binding table and the mode-aware key mapper.

``KEY_BINDINGS`` is the single source of truth: the mapper, the help overlay
and the prefix hint line are all derived from it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..engine import intents as it
from ..engine.state import PickerAction
from ..rebase import RebaseKind

NORMAL = "normal"
HELP = "help"
DIFF = "diff"
CONFIRM = "confirm"
SELECT = "select"
REBASE = "rebase"
SQUASH = "squash"
BOOKMARK_INPUT = "bookmark_input"
BOOKMARK_PICKER = "bookmark_picker"
PUSH_SELECT = "push_select"
CONFLICTS = "conflicts"

TEXT_ENTRY_MODES = frozenset({BOOKMARK_INPUT, BOOKMARK_PICKER, PUSH_SELECT})

ENTER = ("ENTER_CR", "ENTER_LF")

PREFIX_TITLES: dict[str, str] = {
    "g": "git",
    "z": "view",
    "b": "bookmarks",
}

KEY_LABELS: dict[str, str] = {
    "UP": "↑",
    "DOWN": "↓",
    "LEFT": "←",
    "RIGHT": "→",
    "ENTER_CR": "Enter",
    "ENTER_LF": "Enter",
    "ESC": "Esc",
    "TAB": "Tab",
    " ": "Space",
    "BACKSPACE": "Backspace",
    "CTRL_C": "Ctrl-C",
    "CTRL_D": "Ctrl-D",
    "CTRL_U": "Ctrl-U",
    "PAGE_UP": "PgUp",
    "PAGE_DOWN": "PgDn",
}


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single intent."""

    mode: str
    keys: tuple[str, ...]
    intent: it.Intent
    label: str
    section: str | None = None
    prefix: str | None = None

    def display_keys(self) -> str:
        shown: list[str] = []
        for key in self.keys:
            label = KEY_LABELS.get(key, key)
            if label not in shown:
                shown.append(label)
        text = "/".join(shown)
        return f"{self.prefix}{text}" if self.prefix else text


def _b(mode: str, keys: str | tuple[str, ...], intent: it.Intent, label: str, section: str | None = None, prefix: str | None = None) -> KeyBinding:
    return KeyBinding(mode, (keys,) if isinstance(keys, str) else keys, intent, label, section, prefix)


KEY_BINDINGS: tuple[KeyBinding, ...] = (
    # Normal: navigation
    _b(NORMAL, ("j", "DOWN"), it.MoveCursor(1), "down", "Navigation"),
    _b(NORMAL, ("k", "UP"), it.MoveCursor(-1), "up", "Navigation"),
    _b(NORMAL, ("CTRL_D", "PAGE_DOWN"), it.PageCursor(1), "page down", "Navigation"),
    _b(NORMAL, ("CTRL_U", "PAGE_UP"), it.PageCursor(-1), "page up", "Navigation"),
    _b(NORMAL, "@", it.JumpWorkingCopy(), "jump to working copy", "Navigation"),
    _b(NORMAL, "t", it.JumpTop(), "top", "Navigation", prefix="z"),
    _b(NORMAL, "b", it.JumpBottom(), "bottom", "Navigation", prefix="z"),
    _b(NORMAL, "z", it.CenterCursor(), "center cursor", "Navigation", prefix="z"),
    # Normal: view
    _b(NORMAL, ("TAB", " "), it.ToggleExpanded(), "expand / collapse details", "View"),
    _b(NORMAL, ENTER, it.ToggleFocus(), "zoom in / out of subtree", "View"),
    _b(NORMAL, "f", it.ToggleFullMode(), "toggle full / compact", "View"),
    _b(NORMAL, "m", it.AdjustCollapse(delta=1), "collapse one more level", "View", prefix="z"),
    _b(NORMAL, "r", it.AdjustCollapse(delta=-1), "collapse one less level", "View", prefix="z"),
    _b(NORMAL, "R", it.AdjustCollapse(reset=True), "open all levels", "View", prefix="z"),
    _b(NORMAL, "?", it.ShowHelp(), "help", "View"),
    _b(NORMAL, "R", it.Refresh(), "refresh", "View"),
    _b(NORMAL, ("q", "CTRL_C"), it.Quit(), "quit", "View"),
    _b(NORMAL, "ESC", it.Cancel(), "zoom out / cancel", "View"),
    # Normal: commits
    _b(NORMAL, "d", it.ShowDiff(), "show diff", "Commits"),
    _b(NORMAL, "e", it.EditCommit(), "edit (check out)", "Commits"),
    _b(NORMAL, "D", it.DescribeCommit(), "describe", "Commits"),
    _b(NORMAL, "n", it.NewCommit(), "new child commit", "Commits"),
    _b(NORMAL, "c", it.CommitWorkingCopy(), "commit working copy", "Commits"),
    _b(NORMAL, "a", it.AbandonSelection(), "abandon", "Commits"),
    _b(NORMAL, "Q", it.EnterSquashMode(), "squash into…", "Commits"),
    _b(NORMAL, "u", it.Undo(), "undo last operation", "Commits"),
    _b(NORMAL, "x", it.ToggleSelection(), "toggle selection", "Commits"),
    _b(NORMAL, "v", it.EnterSelecting(), "select range", "Commits"),
    _b(NORMAL, "C", it.ShowConflicts(), "conflicts in working copy", "Commits"),
    # Normal: rebase
    _b(NORMAL, "r", it.EnterRebaseMode(RebaseKind.SINGLE), "rebase (-r)", "Rebase"),
    _b(NORMAL, "s", it.EnterRebaseMode(RebaseKind.WITH_DESCENDANTS), "rebase with descendants (-s)", "Rebase"),
    _b(NORMAL, "t", it.RebaseOntoTrunkRequested(RebaseKind.SINGLE), "rebase onto trunk", "Rebase"),
    _b(NORMAL, "T", it.RebaseOntoTrunkRequested(RebaseKind.WITH_DESCENDANTS), "rebase tree onto trunk", "Rebase"),
    # Normal: bookmarks and git
    _b(NORMAL, "c", it.StartBookmarkCreate(), "create bookmark", "Bookmarks & Git", prefix="b"),
    _b(NORMAL, "m", it.OpenBookmarkPicker(PickerAction.MOVE), "move bookmark here", "Bookmarks & Git", prefix="b"),
    _b(NORMAL, "d", it.OpenBookmarkPicker(PickerAction.DELETE), "delete bookmark", "Bookmarks & Git", prefix="b"),
    _b(NORMAL, "p", it.Push(), "push bookmarks on commit", "Bookmarks & Git"),
    _b(NORMAL, "P", it.PushAll(), "push all bookmarks", "Bookmarks & Git"),
    _b(NORMAL, "f", it.GitFetch(), "git fetch", "Bookmarks & Git", prefix="g"),
    _b(NORMAL, "i", it.GitImport(), "git import", "Bookmarks & Git", prefix="g"),
    _b(NORMAL, "e", it.GitExport(), "git export", "Bookmarks & Git", prefix="g"),
    # Help overlay
    _b(HELP, ("j", "DOWN"), it.Scroll(1), "scroll down"),
    _b(HELP, ("k", "UP"), it.Scroll(-1), "scroll up"),
    _b(HELP, ("CTRL_D", "PAGE_DOWN"), it.PageCursor(1), "page down"),
    _b(HELP, ("CTRL_U", "PAGE_UP"), it.PageCursor(-1), "page up"),
    _b(HELP, "?", it.ShowHelp(), "close"),
    _b(HELP, ("q", "ESC"), it.Cancel(), "close"),
    # Diff viewer
    _b(DIFF, ("j", "DOWN"), it.Scroll(1), "scroll down"),
    _b(DIFF, ("k", "UP"), it.Scroll(-1), "scroll up"),
    _b(DIFF, ("d", "CTRL_D", "PAGE_DOWN"), it.PageCursor(1), "page down"),
    _b(DIFF, ("u", "CTRL_U", "PAGE_UP"), it.PageCursor(-1), "page up"),
    _b(DIFF, "t", it.JumpTop(), "top", prefix="z"),
    _b(DIFF, "b", it.JumpBottom(), "bottom", prefix="z"),
    _b(DIFF, ("q", "ESC"), it.Cancel(), "close"),
    # Confirmation
    _b(CONFIRM, ("y", *ENTER), it.ConfirmYes(), "yes"),
    _b(CONFIRM, ("n", "ESC"), it.ConfirmNo(), "no"),
    # Selection
    _b(SELECT, ("j", "DOWN"), it.MoveCursor(1), "down"),
    _b(SELECT, ("k", "UP"), it.MoveCursor(-1), "up"),
    _b(SELECT, "x", it.ToggleSelection(), "toggle"),
    _b(SELECT, "v", it.EnterSelecting(), "range from here"),
    _b(SELECT, "a", it.AbandonSelection(), "abandon"),
    _b(SELECT, "r", it.EnterRebaseMode(RebaseKind.SINGLE), "rebase"),
    _b(SELECT, "s", it.EnterRebaseMode(RebaseKind.WITH_DESCENDANTS), "rebase -s"),
    _b(SELECT, "ESC", it.Cancel(), "exit"),
    # Rebase
    _b(REBASE, ("j", "DOWN"), it.MoveDestination(1), "destination down"),
    _b(REBASE, ("k", "UP"), it.MoveDestination(-1), "destination up"),
    _b(REBASE, ENTER, it.ExecuteRebase(), "run"),
    _b(REBASE, "ESC", it.Cancel(), "cancel"),
    # Squash
    _b(SQUASH, ("j", "DOWN"), it.MoveSquashTarget(1), "target down"),
    _b(SQUASH, ("k", "UP"), it.MoveSquashTarget(-1), "target up"),
    _b(SQUASH, ENTER, it.ExecuteSquash(), "run"),
    _b(SQUASH, "ESC", it.Cancel(), "cancel"),
    # Bookmark name entry
    _b(BOOKMARK_INPUT, ENTER, it.Submit(), "create"),
    _b(BOOKMARK_INPUT, "ESC", it.Cancel(), "cancel"),
    _b(BOOKMARK_INPUT, "BACKSPACE", it.DeleteChar(), "delete char"),
    _b(BOOKMARK_INPUT, "CTRL_U", it.ClearText(), "clear"),
    # Bookmark picker
    _b(BOOKMARK_PICKER, ENTER, it.Submit(), "choose"),
    _b(BOOKMARK_PICKER, "ESC", it.Cancel(), "cancel"),
    _b(BOOKMARK_PICKER, ("DOWN", "TAB"), it.MovePicker(1), "next"),
    _b(BOOKMARK_PICKER, "UP", it.MovePicker(-1), "previous"),
    _b(BOOKMARK_PICKER, "BACKSPACE", it.DeleteChar(), "delete char"),
    _b(BOOKMARK_PICKER, "CTRL_U", it.ClearText(), "clear filter"),
    # Push selection
    _b(PUSH_SELECT, ENTER, it.Submit(), "push"),
    _b(PUSH_SELECT, "ESC", it.Cancel(), "cancel"),
    _b(PUSH_SELECT, ("DOWN", "TAB"), it.MovePicker(1), "down"),
    _b(PUSH_SELECT, "UP", it.MovePicker(-1), "up"),
    _b(PUSH_SELECT, " ", it.TogglePushBookmark(), "toggle"),
    _b(PUSH_SELECT, "a", it.SetPushSelection(True), "all"),
    _b(PUSH_SELECT, "n", it.SetPushSelection(False), "none"),
    _b(PUSH_SELECT, "BACKSPACE", it.DeleteChar(), "delete char"),
    _b(PUSH_SELECT, "CTRL_U", it.ClearText(), "clear filter"),
    # Conflicts panel
    _b(CONFLICTS, ("j", "DOWN"), it.MovePicker(1), "down"),
    _b(CONFLICTS, ("k", "UP"), it.MovePicker(-1), "up"),
    _b(CONFLICTS, "R", it.ResolveConflict(), "resolve"),
    _b(CONFLICTS, ("q", "ESC"), it.Cancel(), "close"),
)


def _is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class KeyMapper:
    """Translate ``(mode, key)`` into an intent.

    The only state kept here is the pending prefix key. The mapper never looks
    at the graph and never produces effects.
    """

    def __init__(self, bindings: Iterable[KeyBinding] = KEY_BINDINGS) -> None:
        self.bindings = tuple(bindings)
        self._table: dict[tuple[str, str | None, str], KeyBinding] = {}
        self._prefixes: set[tuple[str, str]] = set()
        for binding in self.bindings:
            for key in binding.keys:
                self._table[(binding.mode, binding.prefix, key)] = binding
            if binding.prefix is not None:
                self._prefixes.add((binding.mode, binding.prefix))
        self.pending: str | None = None

    def map_key(self, mode: object, key: str) -> it.Intent | None:
        """Return the intent bound to ``key`` in ``mode``, if any.

        ``mode`` is either an interaction-state value or a mode name.
        """
        mode_name = mode if isinstance(mode, str) else getattr(mode, "name", NORMAL)
        if not key:
            return None

        if self.pending is not None:
            prefix = self.pending
            self.pending = None
            binding = self._table.get((mode_name, prefix, key))
            return binding.intent if binding is not None else None

        if mode_name not in TEXT_ENTRY_MODES and (mode_name, key) in self._prefixes:
            self.pending = key
            return it.SetPrefix(key)

        binding = self._table.get((mode_name, None, key))
        if binding is not None:
            return binding.intent
        if mode_name in TEXT_ENTRY_MODES and _is_printable(key):
            return it.TypeChar(key)
        return None

    def reset(self) -> None:
        self.pending = None

    def prefix_hints(self, mode_name: str, prefix: str) -> list[tuple[str, str]]:
        """Return ``(key, label)`` pairs completing ``prefix`` in ``mode_name``."""
        return [
            (binding.keys[0], binding.label)
            for binding in self.bindings
            if binding.mode == mode_name and binding.prefix == prefix
        ]

    def mode_hints(self, mode_name: str) -> list[tuple[str, str]]:
        """Return the un-prefixed bindings of ``mode_name`` for the status bar."""
        return [
            (binding.display_keys(), binding.label)
            for binding in self.bindings
            if binding.mode == mode_name and binding.prefix is None
        ]

    def help_sections(self) -> list[tuple[str, list[tuple[str, str]]]]:
        """Group Normal-mode bindings by help section, in table order."""
        sections: dict[str, list[tuple[str, str]]] = {}
        for binding in self.bindings:
            if binding.mode != NORMAL or binding.section is None:
                continue
            sections.setdefault(binding.section, []).append((binding.display_keys(), binding.label))
        return list(sections.items())
