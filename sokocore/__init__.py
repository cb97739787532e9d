"""
sokocore — Rules engine for Sokoban-style puzzles.

This package exposes the modules needed to load levels, play them and
keep track of solutions, without any rendering or input handling:

  constants      – grid size, cell flags, directions, move alphabet.
  errors         – typed error taxonomy.
  entities       – Level, GameState, MoveFlag.
  hashing        – identity_hash(), legacy_hash() solution keys.
  history_codec  – encode_history(), decode_history().
  level_manager  – parse_next(), load_levels() XSB parser.
  engine         – try_move(), undo(), is_solved(), play().
  solutions      – is_better(), SolutionTracker, load_solutions().
  storage        – SolutionStore, one file per solved level.
  levels         – Built-in level sets.
"""

from sokocore.engine import is_solved, play, reset_state, try_move, undo
from sokocore.entities import GameState, Level, MoveFlag
from sokocore.hashing import identity_hash, legacy_hash
from sokocore.history_codec import decode_history, encode_history
from sokocore.level_manager import load_levels, parse, parse_next
from sokocore.solutions import SolutionTracker, is_better, load_solutions
from sokocore.storage import SolutionStore

__all__ = [
    "GameState",
    "Level",
    "MoveFlag",
    "SolutionStore",
    "SolutionTracker",
    "decode_history",
    "encode_history",
    "identity_hash",
    "is_better",
    "is_solved",
    "legacy_hash",
    "load_levels",
    "load_solutions",
    "parse",
    "parse_next",
    "play",
    "reset_state",
    "try_move",
    "undo",
]
