"""``jjview stack-sync``: bring the current stack up to date with trunk.

Fetches, moves the local trunk bookmark to its remote position, rebases every
stack root onto it (dropping commits that became empty), deletes bookmarks
removed on the remote and optionally pushes the bottom bookmark.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import JjCommandError
from .runtime.commands import TRUNK_REVSET, JjClient

logger = logging.getLogger(__name__)

DEFAULT_TRUNK = "master"
SHORT_CHANGE_ID_TEMPLATE = 'change_id.short() ++ "\\n"'
BOOKMARKS_TEMPLATE = 'bookmarks ++ "\\n"'


def detect_trunk(client: JjClient) -> str:
    """Return the local bookmark name on ``trunk()`` (``master`` if none)."""
    output = client.log(TRUNK_REVSET, "local_bookmarks", limit=1)
    words = output.split()
    return words[0].rstrip("*") if words else DEFAULT_TRUNK


def stack_roots(client: JjClient, trunk: str) -> list[str]:
    output = client.log(f"roots({trunk}..@)", SHORT_CHANGE_ID_TEMPLATE)
    return [line.strip() for line in output.splitlines() if line.strip()]


def deleted_bookmarks(tracked_listing: str) -> list[str]:
    """Names from ``jj bookmark list --tracked`` output marked ``[deleted]``."""
    names: list[str] = []
    for line in tracked_listing.splitlines():
        if "[deleted]" not in line:
            continue
        words = line.split()
        if words:
            names.append(words[0].rstrip(":"))
    return names


def first_stack_bookmark(client: JjClient, trunk: str) -> str | None:
    output = client.log(f"({trunk}..@) & bookmarks()", BOOKMARKS_TEMPLATE, limit=1, reverse=True)
    for line in output.splitlines():
        words = line.split()
        if words:
            return words[0].rstrip("*")
    return None


def stack_sync(
    client: JjClient,
    *,
    push: bool = False,
    force: bool = False,
    confirm: Callable[[str], str] = input,
    echo: Callable[[str], None] = print,
) -> bool:
    """Run the sync; return ``False`` when nothing was rebased or the user aborted.

    ``JjCommandError`` from any step propagates to the caller.
    """
    echo("Fetching from remote...")
    client.git_fetch()

    trunk = detect_trunk(client)
    echo(f"Syncing {trunk}")
    client.bookmark_set(trunk, f"{trunk}@origin")

    roots = stack_roots(client, trunk)
    logger.debug("stack roots: %s", roots)
    if not roots:
        echo(f"No commits after {trunk}, nothing to rebase")
        return False

    if not force:
        echo(f"Will rebase the following commits on top of {trunk}:")
        for root in roots:
            try:
                description = client.log(root, "description.first_line()").strip()
            except JjCommandError:
                description = ""
            echo(f"  {root}  {description}")
            echo(f"  jj rebase --source {root} --onto {trunk} --skip-emptied")
        answer = confirm("Continue? [y/N] ")
        if answer.strip().lower() != "y":
            echo("Aborted")
            return False

    for root in roots:
        echo(f"Rebasing stack from {root}...")
        client.rebase_stack(root, trunk)

    # After the rebase so --skip-emptied can abandon merged commits first.
    for name in deleted_bookmarks(client.bookmark_list_tracked()):
        echo(f"Deleting merged bookmark: {name}")
        client.bookmark_delete(name)

    if push:
        bookmark = first_stack_bookmark(client, trunk)
        if bookmark is None:
            echo("No bookmarks found to push")
        else:
            echo(f"Pushing {bookmark}...")
            client.git_push((bookmark,))

    echo("Stack sync complete")
    return True
