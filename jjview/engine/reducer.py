"""Pure state transitions for the interactive session.

``reduce(session, intent)`` returns the next session and the effects the
runner must carry out. It never performs I/O and never raises: an intent that
does not apply to the current mode leaves the session unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from ..log_model import Commit
from ..rebase import RebaseKind
from ..view_model import TreeRow, build_rows, cursor_index, short_id
from . import effects as fx
from . import intents as it
from .state import (
    AbandonCommits,
    BookmarkInput,
    BookmarkPicker,
    Confirming,
    ConflictList,
    Help,
    MoveBookmarkBackwards,
    Normal,
    PickerAction,
    PushSelecting,
    Rebasing,
    RebaseOntoTrunk,
    Selecting,
    Session,
    Squashing,
    StatusKind,
    StatusMessage,
    ViewingDiff,
)

Step = tuple[Session, tuple[fx.Effect, ...]]


def _unchanged(session: Session) -> Step:
    return session, ()


def _status(session: Session, text: str, kind: StatusKind = StatusKind.ERROR) -> Step:
    return session, (fx.SetStatus(text, kind),)


def _run(session: Session, *effects: fx.Effect) -> Step:
    """Return to Normal and run ``effects`` followed by a graph refresh."""
    return replace(session, mode=Normal()), (*effects, fx.RefreshGraph())


# ---------------------------------------------------------------------------
# Row helpers


def _rows(session: Session) -> tuple[TreeRow, ...]:
    return build_rows(session)


def _cursor_row(session: Session, rows: tuple[TreeRow, ...] | None = None) -> TreeRow | None:
    rows = _rows(session) if rows is None else rows
    index = cursor_index(rows, session.cursor)
    return rows[index] if index is not None else None


def _cursor_commit(session: Session) -> Commit | None:
    row = _cursor_row(session)
    if row is None or not row.is_commit:
        return None
    commit = session.graph.get(row.change_id)
    if commit is None or commit.is_elided:
        return None
    return commit


def _follow(session: Session, rows: tuple[TreeRow, ...], index: int) -> Session:
    """Move the cursor to ``rows[index]`` and keep it inside the viewport."""
    index = max(0, min(index, len(rows) - 1))
    scroll = session.scroll
    height = max(1, session.viewport_rows)
    if index < scroll:
        scroll = index
    elif index >= scroll + height:
        scroll = index - height + 1
    return replace(session, cursor=rows[index].key, scroll=max(0, scroll))


def _move_to(session: Session, target: Callable[[int, tuple[TreeRow, ...]], int]) -> Step:
    rows = _rows(session)
    current = cursor_index(rows, session.cursor)
    if current is None:
        return _unchanged(session)
    moved = _follow(session, rows, target(current, rows))
    if isinstance(moved.mode, Selecting) and moved.mode.anchor is not None:
        moved = _extend_selection(moved, moved.mode, rows)
    return moved, ()


def _extend_selection(session: Session, mode: Selecting, rows: tuple[TreeRow, ...]) -> Session:
    keys = [row.key for row in rows]
    if mode.anchor not in keys or session.cursor not in keys:
        return session
    lo, hi = sorted((keys.index(mode.anchor), keys.index(session.cursor)))
    span = {row.change_id for row in rows[lo : hi + 1] if row.is_commit}
    return replace(session, mode=replace(mode, selected=mode.selected | frozenset(span)))


def _destination_candidates(session: Session, source: str) -> list[str]:
    """Commit rows of the real graph, excluding ``source``."""
    plain = replace(session, mode=Normal())
    return [row.change_id for row in build_rows(plain) if row.is_commit and row.change_id != source]


def _step_destination(session: Session, source: str, current: str | None, delta: int) -> str | None:
    candidates = _destination_candidates(session, source)
    if not candidates:
        return None
    if current in candidates:
        index = candidates.index(current) + delta
        return candidates[max(0, min(index, len(candidates) - 1))]
    # First move starts next to the source row.
    keys = [row.change_id for row in build_rows(replace(session, mode=Normal())) if row.is_commit]
    if source in keys:
        position = keys.index(source)
        before = keys[:position]
        after = keys[position + 1 :]
        if delta > 0 and after:
            return after[min(delta, len(after)) - 1]
        if delta < 0 and before:
            return before[max(-len(before), delta)]
    return candidates[0] if delta > 0 else candidates[-1]


def _with_cursor_on(session: Session, change_id: str | None) -> Session:
    if change_id is None:
        return session
    rows = _rows(session)
    keys = [row.key for row in rows]
    if change_id not in keys:
        return replace(session, cursor=change_id)
    return _follow(session, rows, keys.index(change_id))


# ---------------------------------------------------------------------------
# Navigation and view


def _on_move_cursor(session: Session, intent: it.MoveCursor) -> Step:
    if isinstance(session.mode, Rebasing):
        return _on_move_destination(session, it.MoveDestination(intent.delta))
    if isinstance(session.mode, Squashing):
        return _on_move_squash_target(session, it.MoveSquashTarget(intent.delta))
    if isinstance(session.mode, (Help, ViewingDiff)):
        return _on_scroll(session, it.Scroll(intent.delta))
    if isinstance(session.mode, (BookmarkPicker, PushSelecting, ConflictList)):
        return _on_move_picker(session, it.MovePicker(intent.delta))
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    return _move_to(session, lambda index, _rows: index + intent.delta)


def _on_page(session: Session, intent: it.PageCursor) -> Step:
    amount = max(1, session.viewport_rows // 2) * (1 if intent.direction >= 0 else -1)
    if isinstance(session.mode, (Help, ViewingDiff)):
        return _on_scroll(session, it.Scroll(amount))
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    return _move_to(session, lambda index, _rows: index + amount)


def _on_jump_top(session: Session, intent: it.JumpTop) -> Step:
    if isinstance(session.mode, (Help, ViewingDiff)):
        return replace(session, mode=replace(session.mode, scroll=0)), ()
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    return _move_to(session, lambda _index, _rows: 0)


def _on_jump_bottom(session: Session, intent: it.JumpBottom) -> Step:
    if isinstance(session.mode, (Help, ViewingDiff)):
        return _on_scroll(session, it.Scroll(None))
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    return _move_to(session, lambda _index, rows: len(rows) - 1)


def _on_jump_working_copy(session: Session, intent: it.JumpWorkingCopy) -> Step:
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    working_copy = session.graph.working_copy()
    if working_copy is None:
        return _status(session, "No working-copy commit in view", StatusKind.WARNING)

    def target(index: int, rows: tuple[TreeRow, ...]) -> int:
        for row_index, row in enumerate(rows):
            if row.key == working_copy.change_id:
                return row_index
        return index

    return _move_to(session, target)


def _on_center(session: Session, intent: it.CenterCursor) -> Step:
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    rows = _rows(session)
    index = cursor_index(rows, session.cursor)
    if index is None:
        return _unchanged(session)
    return replace(session, scroll=max(0, index - session.viewport_rows // 2)), ()


def _on_toggle_expanded(session: Session, intent: it.ToggleExpanded) -> Step:
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    row = _cursor_row(session)
    if row is None:
        return _unchanged(session)
    expanded = session.expanded ^ {row.change_id}
    return replace(session, expanded=frozenset(expanded)), ()


def _on_toggle_focus(session: Session, intent: it.ToggleFocus) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    commit = _cursor_commit(session)
    if commit is None:
        return _unchanged(session)
    if session.zoom_root == commit.change_id:
        return replace(session, focus=session.focus[:-1], scroll=0), ()
    return replace(session, focus=(*session.focus, commit.change_id), cursor=commit.change_id, scroll=0), ()


def _on_toggle_full_mode(session: Session, intent: it.ToggleFullMode) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    full_mode = not session.full_mode
    return replace(session, full_mode=full_mode), (fx.PersistPreference("full_mode", full_mode),)


def _max_depth(session: Session) -> int:
    expanded_all = replace(session, collapse_depth=0, full_mode=True, mode=Normal())
    return max((row.depth for row in build_rows(expanded_all)), default=0)


def _on_adjust_collapse(session: Session, intent: it.AdjustCollapse) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    if intent.reset:
        depth = 0
    else:
        deepest = _max_depth(session)
        current = session.collapse_depth if session.collapse_depth > 0 else deepest + 1
        depth = max(1, current - intent.delta)
        if depth > deepest:
            depth = 0
    if depth == session.collapse_depth:
        return _unchanged(session)
    return replace(session, collapse_depth=depth), (fx.PersistPreference("collapse_depth", depth),)


def _on_show_help(session: Session, intent: it.ShowHelp) -> Step:
    if isinstance(session.mode, Help):
        return replace(session, mode=Normal()), ()
    if isinstance(session.mode, Normal):
        return replace(session, mode=Help()), ()
    return _unchanged(session)


def _on_scroll(session: Session, intent: it.Scroll) -> Step:
    mode = session.mode
    if isinstance(mode, ViewingDiff):
        bottom = max(0, len(mode.lines) - session.viewport_rows)
        scroll = bottom if intent.delta is None else max(0, min(bottom, mode.scroll + intent.delta))
        return replace(session, mode=replace(mode, scroll=scroll)), ()
    if isinstance(mode, Help):
        # Upper bound is applied by the renderer, which knows the help length.
        scroll = 1 << 16 if intent.delta is None else max(0, mode.scroll + intent.delta)
        return replace(session, mode=replace(mode, scroll=scroll)), ()
    return _unchanged(session)


def _on_set_prefix(session: Session, intent: it.SetPrefix) -> Step:
    return replace(session, pending_prefix=intent.prefix), ()


def _on_refresh(session: Session, intent: it.Refresh) -> Step:
    return session, (fx.RefreshGraph(),)


def _on_quit(session: Session, intent: it.Quit) -> Step:
    return replace(session, should_quit=True), ()


def _on_cancel(session: Session, intent: it.Cancel) -> Step:
    mode = session.mode
    if isinstance(mode, Normal):
        if session.focus:
            return replace(session, focus=session.focus[:-1], scroll=0), ()
        return _unchanged(session)
    if isinstance(mode, (Rebasing, Squashing)):
        return _with_cursor_on(replace(session, mode=Normal()), mode.source), ()
    return replace(session, mode=Normal()), ()


# ---------------------------------------------------------------------------
# Commit actions


def _require_commit(session: Session) -> Commit | Step:
    """The commit under the cursor, or the step to return instead.

    Commit actions only apply in Normal; elsewhere the session is unchanged.
    """
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    commit = _cursor_commit(session)
    if commit is None:
        return _status(session, "No revision selected")
    return commit


def _on_edit(session: Session, intent: it.EditCommit) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    if commit.is_working_copy:
        return _status(session, "Already editing this revision", StatusKind.WARNING)
    return _run(session, fx.RunEdit(commit.change_id))


def _on_show_diff(session: Session, intent: it.ShowDiff) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    return session, (fx.LoadDiff(commit.change_id),)


def _on_diff_loaded(session: Session, intent: it.DiffLoaded) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    if not intent.lines:
        return replace(session, status=StatusMessage(f"{short_id(intent.rev)} has no changes")), ()
    return replace(session, mode=ViewingDiff(rev=intent.rev, lines=intent.lines)), ()


def _on_describe(session: Session, intent: it.DescribeCommit) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    return _run(session, fx.RunDescribe(commit.change_id))


def _on_new(session: Session, intent: it.NewCommit) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    return _run(session, fx.RunNew(commit.change_id))


def _on_commit(session: Session, intent: it.CommitWorkingCopy) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    if not commit.is_working_copy:
        return _status(session, "Can only commit from working copy (@)", StatusKind.WARNING)
    return _run(session, fx.RunCommit(commit.description or "(no description)"))


def _selected_in_row_order(session: Session) -> tuple[str, ...]:
    if not isinstance(session.mode, Selecting) or not session.mode.selected:
        return ()
    selected = session.mode.selected
    ordered = [row.change_id for row in _rows(session) if row.is_commit and row.change_id in selected]
    # Selected commits hidden by the current view still count.
    ordered.extend(sorted(change_id for change_id in selected if change_id not in ordered))
    return tuple(ordered)


def _on_abandon(session: Session, intent: it.AbandonSelection) -> Step:
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    revs = _selected_in_row_order(session)
    if not revs:
        commit = _cursor_commit(session)
        if commit is None:
            return _status(session, "No revision selected")
        revs = (commit.change_id,)
    for rev in revs:
        commit = session.graph.get(rev)
        if commit is not None and commit.is_working_copy:
            return _status(session, "Cannot abandon working copy")
    if len(revs) == 1:
        message = f"Abandon revision {short_id(revs[0])}?"
    else:
        message = f"Abandon {len(revs)} revisions?"
    details = tuple(
        f"{short_id(rev)}  {(session.graph.get(rev) or Commit(rev)).description or '(no description)'}"
        for rev in revs
    )
    return replace(session, mode=Confirming(AbandonCommits(revs), message, details)), ()


def _on_undo(session: Session, intent: it.Undo) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    return _run(session, fx.RunUndo())


def _on_confirm_yes(session: Session, intent: it.ConfirmYes) -> Step:
    mode = session.mode
    if not isinstance(mode, Confirming):
        return _unchanged(session)
    action = mode.action
    if isinstance(action, AbandonCommits):
        return _run(session, fx.RunAbandon(action.change_ids))
    if isinstance(action, RebaseOntoTrunk):
        return _run(session, fx.RunRebaseOntoTrunk(action.source, action.kind))
    if isinstance(action, MoveBookmarkBackwards):
        return _run(session, fx.RunBookmarkSet(action.name, action.target, allow_backwards=True))
    return replace(session, mode=Normal()), ()


def _on_confirm_no(session: Session, intent: it.ConfirmNo) -> Step:
    if not isinstance(session.mode, Confirming):
        return _unchanged(session)
    return replace(session, mode=Normal()), ()


# ---------------------------------------------------------------------------
# Selection


def _on_toggle_selection(session: Session, intent: it.ToggleSelection) -> Step:
    commit = _cursor_commit(session)
    if commit is None:
        return _unchanged(session)
    if isinstance(session.mode, Normal):
        return replace(session, mode=Selecting(selected=frozenset({commit.change_id}))), ()
    if isinstance(session.mode, Selecting):
        selected = session.mode.selected ^ {commit.change_id}
        if not selected:
            return replace(session, mode=Normal()), ()
        return replace(session, mode=replace(session.mode, selected=frozenset(selected))), ()
    return _unchanged(session)


def _on_enter_selecting(session: Session, intent: it.EnterSelecting) -> Step:
    commit = _cursor_commit(session)
    if commit is None:
        return _unchanged(session)
    if isinstance(session.mode, Normal):
        return replace(session, mode=Selecting(frozenset({commit.change_id}), anchor=commit.change_id)), ()
    if isinstance(session.mode, Selecting):
        mode = session.mode
        selected = mode.selected | {commit.change_id}
        return replace(session, mode=Selecting(frozenset(selected), anchor=commit.change_id)), ()
    return _unchanged(session)


# ---------------------------------------------------------------------------
# Rebase


def _on_enter_rebase(session: Session, intent: it.EnterRebaseMode) -> Step:
    if not isinstance(session.mode, (Normal, Selecting)):
        return _unchanged(session)
    selected = _selected_in_row_order(session)
    if selected:
        source = selected[0]
    else:
        commit = _cursor_commit(session)
        if commit is None:
            return _status(session, "No revision selected")
        source = commit.change_id
    if not session.graph.is_visible(source):
        return _status(session, "No revision selected")
    return replace(session, mode=Rebasing(source=source, kind=intent.kind)), ()


def _set_destination(session: Session, mode: Rebasing, destination: str) -> Step:
    updated = replace(mode, destination=destination, preview=None, error=None)
    moved = _with_cursor_on(replace(session, mode=updated), destination)
    return moved, (fx.SimulateRebase(mode.source, destination, mode.kind),)


def _on_move_destination(session: Session, intent: it.MoveDestination) -> Step:
    mode = session.mode
    if not isinstance(mode, Rebasing):
        return _unchanged(session)
    destination = _step_destination(session, mode.source, mode.destination, intent.delta)
    if destination is None or destination == mode.destination:
        return _unchanged(session)
    return _set_destination(session, mode, destination)


def _on_choose_destination(session: Session, intent: it.ChooseDestination) -> Step:
    mode = session.mode
    if not isinstance(mode, Rebasing):
        return _unchanged(session)
    return _set_destination(session, mode, intent.change_id)


def _on_rebase_previewed(session: Session, intent: it.RebasePreviewed) -> Step:
    mode = session.mode
    if not isinstance(mode, Rebasing):
        return _unchanged(session)
    if mode.source != intent.source or mode.destination != intent.destination:
        return _unchanged(session)
    return replace(session, mode=replace(mode, preview=intent.preview, error=intent.error)), ()


def _on_execute_rebase(session: Session, intent: it.ExecuteRebase) -> Step:
    mode = session.mode
    if not isinstance(mode, Rebasing) or mode.destination is None or mode.error is not None:
        return _unchanged(session)
    if mode.preview is None or not mode.preview.matches(mode.source, mode.destination, mode.kind):
        return _unchanged(session)
    next_session = replace(session, mode=Normal(), cursor=mode.source)
    return next_session, (fx.RunRebase(mode.source, mode.destination, mode.kind), fx.RefreshGraph())


def _on_rebase_onto_trunk(session: Session, intent: it.RebaseOntoTrunkRequested) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    short = short_id(commit.change_id)
    if intent.kind is RebaseKind.SINGLE:
        message = f"Rebase {short} onto trunk?"
    else:
        message = f"Rebase {short} and descendants onto trunk?"
    action = RebaseOntoTrunk(commit.change_id, intent.kind)
    return replace(session, mode=Confirming(action, message, ("Emptied commits are abandoned.",))), ()


# ---------------------------------------------------------------------------
# Squash


def _on_enter_squash(session: Session, intent: it.EnterSquashMode) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    return replace(session, mode=Squashing(source=commit.change_id)), ()


def _on_move_squash_target(session: Session, intent: it.MoveSquashTarget) -> Step:
    mode = session.mode
    if not isinstance(mode, Squashing):
        return _unchanged(session)
    target = _step_destination(session, mode.source, mode.target, intent.delta)
    if target is None or target == mode.target:
        return _unchanged(session)
    return _with_cursor_on(replace(session, mode=replace(mode, target=target)), target), ()


def _on_execute_squash(session: Session, intent: it.ExecuteSquash) -> Step:
    mode = session.mode
    if not isinstance(mode, Squashing):
        return _unchanged(session)
    if mode.target is None or not session.graph.is_visible(mode.target):
        return _status(session, "Invalid target")
    if mode.target == mode.source:
        return _status(session, "Cannot squash into self")
    return _run(replace(session, cursor=mode.target), fx.RunSquash(mode.source, mode.target))


# ---------------------------------------------------------------------------
# Bookmarks


def _on_start_bookmark_create(session: Session, intent: it.StartBookmarkCreate) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    return replace(session, mode=BookmarkInput(target=commit.change_id)), ()


def _on_open_picker(session: Session, intent: it.OpenBookmarkPicker) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    names = list(session.graph.bookmarks())
    if not names:
        return _status(session, "No bookmarks in repository", StatusKind.WARNING)
    pinned = [name for name in commit.bookmarks if name in names]
    ordered = pinned + [name for name in names if name not in pinned]
    return replace(session, mode=BookmarkPicker(target=commit.change_id, action=intent.action, bookmarks=tuple(ordered))), ()


def _on_type_char(session: Session, intent: it.TypeChar) -> Step:
    mode = session.mode
    if isinstance(mode, BookmarkInput):
        if intent.char.isspace():
            return _unchanged(session)
        return replace(session, mode=replace(mode, text=mode.text + intent.char)), ()
    if isinstance(mode, (BookmarkPicker, PushSelecting)):
        return replace(session, mode=replace(mode, filter=mode.filter + intent.char, index=0)), ()
    return _unchanged(session)


def _on_delete_char(session: Session, intent: it.DeleteChar) -> Step:
    mode = session.mode
    if isinstance(mode, BookmarkInput):
        return replace(session, mode=replace(mode, text=mode.text[:-1])), ()
    if isinstance(mode, (BookmarkPicker, PushSelecting)):
        return replace(session, mode=replace(mode, filter=mode.filter[:-1], index=0)), ()
    return _unchanged(session)


def _on_clear_text(session: Session, intent: it.ClearText) -> Step:
    mode = session.mode
    if isinstance(mode, BookmarkInput):
        return replace(session, mode=replace(mode, text="")), ()
    if isinstance(mode, (BookmarkPicker, PushSelecting)):
        return replace(session, mode=replace(mode, filter="", index=0)), ()
    return _unchanged(session)


def _on_move_picker(session: Session, intent: it.MovePicker) -> Step:
    mode = session.mode
    if isinstance(mode, (BookmarkPicker, PushSelecting)):
        count = len(mode.matches())
    elif isinstance(mode, ConflictList):
        count = len(mode.files)
    else:
        return _unchanged(session)
    if count == 0:
        return _unchanged(session)
    index = max(0, min(count - 1, mode.index + intent.delta))
    return replace(session, mode=replace(mode, index=index)), ()


def _submit_bookmark_input(session: Session, mode: BookmarkInput) -> Step:
    name = mode.text.strip()
    if not name:
        return replace(session, mode=Normal()), (fx.SetStatus("Bookmark name cannot be empty", StatusKind.ERROR),)
    return _run(session, fx.RunBookmarkCreate(name, mode.target))


def _submit_bookmark_picker(session: Session, mode: BookmarkPicker) -> Step:
    matches = mode.matches()
    if not matches:
        return _status(session, "No bookmark selected", StatusKind.WARNING)
    name = matches[max(0, min(mode.index, len(matches) - 1))]
    if mode.action is PickerAction.DELETE:
        return _run(session, fx.RunBookmarkDelete(name))

    current = session.graph.bookmarks().get(name)
    if current == mode.target:
        return replace(session, mode=Normal()), (fx.SetStatus(f"Bookmark {name} is already here", StatusKind.WARNING),)
    if current is not None and session.graph.is_ancestor(mode.target, current):
        message = f"Move bookmark {name} backwards to {short_id(mode.target)}?"
        details = (f"{name} currently points at {short_id(current)}.",)
        return replace(session, mode=Confirming(MoveBookmarkBackwards(name, mode.target), message, details)), ()
    return _run(session, fx.RunBookmarkSet(name, mode.target))


def _on_submit(session: Session, intent: it.Submit) -> Step:
    mode = session.mode
    if isinstance(mode, BookmarkInput):
        return _submit_bookmark_input(session, mode)
    if isinstance(mode, BookmarkPicker):
        return _submit_bookmark_picker(session, mode)
    if isinstance(mode, PushSelecting):
        return _submit_push_selection(session, mode)
    if isinstance(mode, Rebasing):
        return _on_execute_rebase(session, it.ExecuteRebase())
    if isinstance(mode, Squashing):
        return _on_execute_squash(session, it.ExecuteSquash())
    if isinstance(mode, Confirming):
        return _on_confirm_yes(session, it.ConfirmYes())
    return _unchanged(session)


# ---------------------------------------------------------------------------
# Git


def _on_push(session: Session, intent: it.Push) -> Step:
    commit = _require_commit(session)
    if not isinstance(commit, Commit):
        return commit
    if not commit.bookmarks:
        return _status(session, "No bookmark on this revision to push", StatusKind.WARNING)
    if len(commit.bookmarks) == 1:
        return _run(session, fx.RunPush(commit.bookmarks))
    bookmarks = tuple(commit.bookmarks)
    return replace(session, mode=PushSelecting(bookmarks, selected=frozenset(bookmarks))), ()


def _highlighted(mode: PushSelecting) -> str | None:
    matches = mode.matches()
    if not matches:
        return None
    return matches[max(0, min(mode.index, len(matches) - 1))]


def _on_toggle_push_bookmark(session: Session, intent: it.TogglePushBookmark) -> Step:
    mode = session.mode
    if not isinstance(mode, PushSelecting):
        return _unchanged(session)
    name = _highlighted(mode)
    if name is None:
        return _unchanged(session)
    return replace(session, mode=replace(mode, selected=mode.selected ^ {name})), ()


def _on_set_push_selection(session: Session, intent: it.SetPushSelection) -> Step:
    mode = session.mode
    if not isinstance(mode, PushSelecting):
        return _unchanged(session)
    visible = frozenset(mode.matches())
    selected = mode.selected | visible if intent.selected else mode.selected - visible
    return replace(session, mode=replace(mode, selected=selected)), ()


def _submit_push_selection(session: Session, mode: PushSelecting) -> Step:
    chosen = mode.chosen()
    if not chosen:
        return replace(session, mode=Normal()), (fx.SetStatus("No bookmarks selected", StatusKind.WARNING),)
    return _run(session, fx.RunPush(chosen))


def _git(effect_type: type) -> Callable[[Session, object], Step]:
    def handler(session: Session, intent: object) -> Step:
        if not isinstance(session.mode, Normal):
            return _unchanged(session)
        return _run(session, effect_type())

    return handler


# ---------------------------------------------------------------------------
# Conflicts


def _on_show_conflicts(session: Session, intent: it.ShowConflicts) -> Step:
    if not isinstance(session.mode, Normal):
        return _unchanged(session)
    return replace(session, mode=ConflictList()), (fx.LoadConflicts(),)


def _on_conflicts_loaded(session: Session, intent: it.ConflictsLoaded) -> Step:
    if not isinstance(session.mode, ConflictList):
        return _unchanged(session)
    if intent.error is not None:
        return replace(session, mode=Normal(), status=StatusMessage(intent.error, StatusKind.ERROR)), ()
    if not intent.files:
        status = StatusMessage("No conflicts in working copy", StatusKind.SUCCESS)
        return replace(session, mode=Normal(), status=status), ()
    return replace(session, mode=ConflictList(files=intent.files, loading=False)), ()


def _on_resolve_conflict(session: Session, intent: it.ResolveConflict) -> Step:
    mode = session.mode
    if not isinstance(mode, ConflictList) or not mode.files:
        return _unchanged(session)
    path = mode.files[max(0, min(mode.index, len(mode.files) - 1))]
    return _run(session, fx.RunResolve(path))


# ---------------------------------------------------------------------------
# Feedback


def _on_graph_loaded(session: Session, intent: it.GraphLoaded) -> Step:
    graph = intent.graph
    status = session.status
    if intent.warnings:
        count = len(intent.warnings)
        noun = "line" if count == 1 else "lines"
        status = StatusMessage(f"Skipped {count} malformed log {noun}", StatusKind.WARNING)

    next_session = replace(
        session,
        graph=graph,
        warnings=intent.warnings,
        status=status,
        expanded=frozenset(change_id for change_id in session.expanded if change_id in graph),
        focus=tuple(change_id for change_id in session.focus if graph.is_visible(change_id)),
    )
    effects: tuple[fx.Effect, ...] = ()
    mode = session.mode
    if isinstance(mode, Selecting):
        selected = frozenset(change_id for change_id in mode.selected if graph.is_visible(change_id))
        anchor = mode.anchor if graph.is_visible(mode.anchor) else None
        next_mode = Selecting(selected, anchor) if selected else Normal()
        next_session = replace(next_session, mode=next_mode)
    elif isinstance(mode, Rebasing):
        if not graph.is_visible(mode.source):
            next_session = replace(next_session, mode=Normal())
            effects = (fx.SetStatus("Rebase source no longer exists", StatusKind.WARNING),)
        else:
            next_session = replace(next_session, mode=replace(mode, preview=None, error=None))
            if mode.destination is not None:
                effects = (fx.SimulateRebase(mode.source, mode.destination, mode.kind),)
    elif isinstance(mode, Squashing):
        if not graph.is_visible(mode.source):
            next_session = replace(next_session, mode=Normal())
    elif isinstance(mode, (BookmarkInput, BookmarkPicker)):
        if not graph.is_visible(mode.target):
            next_session = replace(next_session, mode=Normal())

    rows = _rows(next_session)
    index = cursor_index(rows, next_session.cursor)
    if index is not None and rows[index].key != next_session.cursor:
        next_session = _follow(next_session, rows, index)
    return next_session, effects


def _on_status_posted(session: Session, intent: it.StatusPosted) -> Step:
    return replace(session, status=StatusMessage(intent.text, intent.kind)), ()


def _on_expire_status(session: Session, intent: it.ExpireStatus) -> Step:
    if session.status is None:
        return _unchanged(session)
    return replace(session, status=None), ()


def _on_resize(session: Session, intent: it.Resize) -> Step:
    resized = replace(session, viewport_rows=max(1, intent.rows))
    rows = _rows(resized)
    index = cursor_index(rows, resized.cursor)
    if index is None:
        return resized, ()
    return _follow(resized, rows, index), ()


_HANDLERS: dict[type, Callable[[Session, object], Step]] = {
    it.MoveCursor: _on_move_cursor,
    it.PageCursor: _on_page,
    it.JumpTop: _on_jump_top,
    it.JumpBottom: _on_jump_bottom,
    it.JumpWorkingCopy: _on_jump_working_copy,
    it.CenterCursor: _on_center,
    it.ToggleExpanded: _on_toggle_expanded,
    it.ToggleFocus: _on_toggle_focus,
    it.ToggleFullMode: _on_toggle_full_mode,
    it.AdjustCollapse: _on_adjust_collapse,
    it.ShowHelp: _on_show_help,
    it.Scroll: _on_scroll,
    it.SetPrefix: _on_set_prefix,
    it.Refresh: _on_refresh,
    it.Quit: _on_quit,
    it.Cancel: _on_cancel,
    it.EditCommit: _on_edit,
    it.ShowDiff: _on_show_diff,
    it.DescribeCommit: _on_describe,
    it.NewCommit: _on_new,
    it.CommitWorkingCopy: _on_commit,
    it.AbandonSelection: _on_abandon,
    it.Undo: _on_undo,
    it.ConfirmYes: _on_confirm_yes,
    it.ConfirmNo: _on_confirm_no,
    it.ToggleSelection: _on_toggle_selection,
    it.EnterSelecting: _on_enter_selecting,
    it.EnterRebaseMode: _on_enter_rebase,
    it.MoveDestination: _on_move_destination,
    it.ChooseDestination: _on_choose_destination,
    it.ExecuteRebase: _on_execute_rebase,
    it.RebaseOntoTrunkRequested: _on_rebase_onto_trunk,
    it.EnterSquashMode: _on_enter_squash,
    it.MoveSquashTarget: _on_move_squash_target,
    it.ExecuteSquash: _on_execute_squash,
    it.StartBookmarkCreate: _on_start_bookmark_create,
    it.OpenBookmarkPicker: _on_open_picker,
    it.TypeChar: _on_type_char,
    it.DeleteChar: _on_delete_char,
    it.ClearText: _on_clear_text,
    it.MovePicker: _on_move_picker,
    it.Submit: _on_submit,
    it.Push: _on_push,
    it.TogglePushBookmark: _on_toggle_push_bookmark,
    it.SetPushSelection: _on_set_push_selection,
    it.PushAll: _git(fx.RunPushAll),
    it.GitFetch: _git(fx.RunGitFetch),
    it.GitImport: _git(fx.RunGitImport),
    it.GitExport: _git(fx.RunGitExport),
    it.ShowConflicts: _on_show_conflicts,
    it.ResolveConflict: _on_resolve_conflict,
    it.GraphLoaded: _on_graph_loaded,
    it.RebasePreviewed: _on_rebase_previewed,
    it.DiffLoaded: _on_diff_loaded,
    it.ConflictsLoaded: _on_conflicts_loaded,
    it.StatusPosted: _on_status_posted,
    it.ExpireStatus: _on_expire_status,
    it.Resize: _on_resize,
}

# Intents that arrive from the runner or the loop, not from a key press.
_FEEDBACK = (
    it.GraphLoaded,
    it.RebasePreviewed,
    it.DiffLoaded,
    it.ConflictsLoaded,
    it.StatusPosted,
    it.ExpireStatus,
    it.Resize,
)


def reduce(session: Session, intent: it.Intent) -> Step:
    """Apply ``intent`` to ``session`` and return ``(session, effects)``."""
    handler = _HANDLERS.get(type(intent))
    if handler is None:
        return _unchanged(session)
    if session.pending_prefix is not None and not isinstance(intent, (it.SetPrefix, *_FEEDBACK)):
        session = replace(session, pending_prefix=None)
    return handler(session, intent)
