"""
entities.py — Game entity classes for sokocore.
"""

from __future__ import annotations

import enum

import numpy as np

from sokocore.constants import FIELD_GOAL, GRID_SIZE
from sokocore.hashing import format_key, format_legacy_key


def new_grid() -> np.ndarray:
    """A zeroed GRID_SIZE × GRID_SIZE playfield, indexed ``[y, x]``."""
    return np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.uint8)


class MoveFlag(enum.IntFlag):
    """What an accepted move did.  A plain walk is ``MoveFlag(0)``."""

    PUSHED  = 1
    ON_GOAL = 2
    SOLVED  = 4


class Level:
    """
    A parsed level.  Read-only once built, except for *best_solution*.

    Attributes
    ----------
    field         : ndarray – GRID_SIZE² uint8 cell flags, ``field[y, x]``.
                              Cells outside width × height are always 0.
    width, height : int     – extent of the used cells (1 … 61).
    player_start  : tuple   – (x, y) where the player begins.
    precomment    : str     – comment found before the grid data.
    postcomment   : str     – comment that ended the level block.
    level_index   : int     – 1-based position in the source file.
    identity_hash : int     – 64-bit solution key.
    legacy_hash   : int     – 32-bit key used by old save files.
    best_solution : str     – best known history, or None.
    """

    def __init__(self, field: np.ndarray, width: int, height: int,
                 player_start: tuple, identity_hash: int, legacy_hash: int,
                 precomment: str = "", postcomment: str = "",
                 level_index: int = 1):
        field = np.array(field, dtype=np.uint8)
        field.flags.writeable = False
        self.field         = field
        self.width         = width
        self.height        = height
        self.player_start  = tuple(player_start)
        self.identity_hash = identity_hash
        self.legacy_hash   = legacy_hash
        self.precomment    = precomment
        self.postcomment   = postcomment
        self.level_index   = level_index
        self.best_solution = None

    @property
    def comment(self) -> str:
        """The level's own comment: the trailing one, else the leading one."""
        return self.postcomment or self.precomment

    @property
    def key(self) -> str:
        return format_key(self.identity_hash)

    @property
    def legacy_key(self) -> str:
        return format_legacy_key(self.legacy_hash)

    def goal_count(self) -> int:
        return int(np.count_nonzero(self.field & FIELD_GOAL))

    def __repr__(self):
        return (f"Level(#{self.level_index}, {self.width}x{self.height}, "
                f"key={self.key})")


class GameState:
    """
    The mutable side of a play session.

    Attributes
    ----------
    field        : ndarray – private copy of the level's grid; atoms move here.
    position     : tuple   – current (x, y) of the player.
    history      : list    – move characters, lowercase = walk,
                             uppercase = push.
    facing_angle : int     – 0 / 90 / 180 / 270, presentation only.
    """

    def __init__(self, field: np.ndarray, position: tuple):
        self.field        = np.array(field, dtype=np.uint8)
        self.position     = tuple(position)
        self.history      = []
        self.facing_angle = 0

    @classmethod
    def for_level(cls, level: Level) -> "GameState":
        """Fresh state positioned at *level*'s start."""
        return cls(level.field, level.player_start)

    @property
    def moves(self) -> str:
        """The history as a string, e.g. ``"rrUUl"``."""
        return "".join(self.history)
