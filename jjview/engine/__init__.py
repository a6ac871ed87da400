"""Interaction engine: session state, intents, effects and the reducer.

The reducer depends on the view builder, which in turn reads session state,
so ``reduce`` is imported lazily to keep package imports acyclic.
"""

from __future__ import annotations

from .state import InteractionState, Normal, Session, StatusKind, StatusMessage


def reduce(*args, **kwargs):
    """Lazily import the reducer to avoid a package-import cycle."""
    from .reducer import reduce as _reduce

    return _reduce(*args, **kwargs)


__all__ = [
    "InteractionState",
    "Normal",
    "Session",
    "StatusKind",
    "StatusMessage",
    "reduce",
]
