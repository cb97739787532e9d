"""
engine.py — Core game logic for sokocore.

Contains move validation, pushing, solved detection and undo.  No I/O
happens here; the Level is only read and every change goes to the
GameState passed in.
"""

from __future__ import annotations

import numpy as np

from sokocore.constants import (
    CHAR_DIR, DIR_ANGLE, DIR_CHAR, DIR_DELTA, FIELD_ATOM, FIELD_GOAL,
    FIELD_WALL,
)
from sokocore.entities import GameState, Level, MoveFlag
from sokocore.errors import MemoryAllocationFailed


def _inside(level: Level, x: int, y: int) -> bool:
    return 0 <= x < level.width and 0 <= y < level.height


def is_solved(level: Level, state: GameState) -> bool:
    """
    True when every goal holds an atom *and* at least one push was made.

    A layout that starts out with all goals filled is not solved until
    the player has pushed something.
    """
    field = state.field[:level.height, :level.width]
    goals = (field & FIELD_GOAL) != 0
    atoms = (field & FIELD_ATOM) != 0
    if np.any(goals & ~atoms):
        return False
    return any(ch.isupper() for ch in state.history)


def try_move(level: Level, state: GameState, direction: str,
             dry_run: bool = False):
    """
    Attempt to move the player one cell in *direction*.

    Parameters
    ----------
    direction : str  – 'up' | 'right' | 'down' | 'left'.
    dry_run   : bool – only report what the move would do; the state is
                       left untouched and SOLVED is never reported.

    Returns
    -------
    MoveFlag or None
        None when the move is refused (wall, off the playfield, blocked
        push, or a push after the level is solved).  Otherwise the
        PUSHED / ON_GOAL / SOLVED bits that apply; a plain walk is
        ``MoveFlag(0)``.

    Raises
    ------
    MemoryAllocationFailed – the history could not grow.  The state is
                             unchanged.
    """
    dx, dy = DIR_DELTA[direction]
    x, y   = state.position
    tx, ty = x + dx, y + dy
    field  = state.field

    if not dry_run:
        state.facing_angle = DIR_ANGLE[direction]

    if not _inside(level, tx, ty):
        return None
    if field[ty, tx] & FIELD_WALL:
        return None

    result = MoveFlag(0)
    was_solved = is_solved(level, state)

    # ── Is there an atom on our way? ──
    if field[ty, tx] & FIELD_ATOM:
        bx, by = tx + dx, ty + dy
        if was_solved:
            return None
        if not _inside(level, bx, by):
            return None
        if field[by, bx] & (FIELD_WALL | FIELD_ATOM):
            return None
        result |= MoveFlag.PUSHED
        if field[by, bx] & FIELD_GOAL:
            result |= MoveFlag.ON_GOAL

    if dry_run:
        return result

    move_char = DIR_CHAR[direction]
    if result & MoveFlag.PUSHED:
        move_char = move_char.upper()
    try:
        state.history.append(move_char)
    except MemoryError as exc:
        raise MemoryAllocationFailed(
            f"history of {len(state.history)} moves") from exc

    if result & MoveFlag.PUSHED:
        field[ty, tx] &= ~FIELD_ATOM & 0xFF
        field[ty + dy, tx + dx] |= FIELD_ATOM
    state.position = (tx, ty)

    if not was_solved and is_solved(level, state):
        result |= MoveFlag.SOLVED
    return result


def undo(level: Level, state: GameState) -> None:
    """
    Take back the last move.  Does nothing when the history is empty.

    The history is trusted as the exact record of past moves; it is not
    checked against the grid.
    """
    if not state.history:
        return
    move_char = state.history[-1]
    direction = CHAR_DIR[move_char.lower()]
    dx, dy    = DIR_DELTA[direction]
    x, y      = state.position

    # A push: pull the atom back from the cell in front of the player.
    if move_char.isupper():
        state.field[y + dy, x + dx] &= ~FIELD_ATOM & 0xFF
        state.field[y, x] |= FIELD_ATOM

    state.position     = (x - dx, y - dy)
    state.facing_angle = DIR_ANGLE[direction]
    state.history.pop()


def reset_state(level: Level, state: GameState) -> None:
    """Put *state* back to the start of *level* (restart)."""
    state.field        = np.array(level.field, dtype=np.uint8)
    state.position     = level.player_start
    state.history      = []
    state.facing_angle = 0


def play(level: Level, state: GameState, moves: str) -> MoveFlag:
    """
    Replay a string of moves, e.g. a stored solution.

    Letter case is ignored: pushes are decided by the board, not by the
    string.  Refused moves are skipped.

    Returns
    -------
    MoveFlag – union of every accepted move's flags.

    Raises
    ------
    ValueError – *moves* contains something other than ``udlrUDLR``.
                 Nothing is applied in that case.
    """
    directions = []
    for ch in moves:
        direction = CHAR_DIR.get(ch.lower())
        if direction is None:
            raise ValueError(f"not a move: {ch!r}")
        directions.append(direction)

    total = MoveFlag(0)
    for direction in directions:
        result = try_move(level, state, direction)
        if result is not None:
            total |= result
    return total
