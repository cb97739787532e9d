"""
solutions.py — Solution ranking and bookkeeping for sokocore.

A history is ranked by its number of moves, then by its number of
pushes; fewer is better for both.  SolutionTracker decides when a
finished game deserves to replace the stored best solution and hands
the history to a SolutionStore.
"""

from __future__ import annotations

import logging

from sokocore.constants import EXT_LEGACY, EXT_SNAPSHOT, EXT_SOLUTION
from sokocore.errors import CorruptSolution

logger = logging.getLogger(__name__)


def count_moves(history) -> int:
    return len(history) if history else 0


def count_pushes(history) -> int:
    if not history:
        return 0
    return sum(1 for ch in history if ch.isupper())


def is_better(new_history, old_history) -> bool:
    """
    True if *new_history* should replace *old_history*.

    No old solution always loses.  Otherwise fewer moves wins, and on
    equal moves fewer pushes wins.
    """
    if not old_history:
        return True
    new_len, old_len = count_moves(new_history), count_moves(old_history)
    if new_len != old_len:
        return new_len < old_len
    return count_pushes(new_history) < count_pushes(old_history)


def _load_quietly(store, key, ext, level):
    try:
        return store.load(key, ext)
    except CorruptSolution as exc:
        logger.warning("ignoring corrupt %s solution for %r: %s",
                       ext, level, exc)
        return None


def load_solutions(levels, store) -> int:
    """
    Attach the best stored solution to every level in *levels*.

    The identity key is tried first, then the legacy key.  A corrupt
    file counts as no solution.  Returns how many levels got one.
    """
    found = 0
    for level in levels:
        solution = _load_quietly(store, level.identity_hash, EXT_SOLUTION, level)
        if solution is None:
            solution = _load_quietly(store, level.legacy_hash, EXT_LEGACY, level)
        level.best_solution = solution
        if solution is not None:
            found += 1
    logger.debug("found solutions for %d of %d level(s)", found, len(levels))
    return found


class SolutionTracker:
    """
    Persist improved solutions through *store*.

    *store* is anything with ``load(key, ext)`` and ``save(key, history,
    ext)``, normally a SolutionStore.
    """

    def __init__(self, store):
        self.store = store

    def record(self, level, state) -> bool:
        """
        Call once a move has reported SOLVED.

        Saves the state's history if it beats ``level.best_solution``
        and returns whether it did.
        """
        history = state.moves
        if not is_better(history, level.best_solution):
            return False
        self.store.save(level.identity_hash, history, EXT_SOLUTION)
        level.best_solution = history
        logger.info("new best solution for %r: %d moves, %d pushes",
                    level, count_moves(history), count_pushes(history))
        return True

    def save_snapshot(self, level, state) -> None:
        """Store the current, possibly unfinished, history on request."""
        self.store.save(level.identity_hash, state.moves, EXT_SNAPSHOT)

    def load_snapshot(self, level):
        """Return the last snapshot for *level*, or None."""
        return _load_quietly(self.store, level.identity_hash, EXT_SNAPSHOT, level)
