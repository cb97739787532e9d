#!/usr/bin/env python3
"""
main.py — Command-line front end for sokocore.

Run from the repository root:
    python main.py                          # list the built-in levels
    python main.py levels.xsb               # list the levels of a file
    python main.py levels.xsb -l 3 -m rrUUl # replay moves on level 3
    python main.py levels.xsb -l 3 --dump   # print level 3 as XSB text

Solutions are read from and written to ``--save-dir`` (or the
SOKOCORE_SAVE_DIR environment variable).  Without either, nothing is
loaded or saved.  Level files may be gzip-compressed.
"""

import argparse
import gzip
import logging
import os
import sys

from sokocore.engine import play
from sokocore.entities import GameState, MoveFlag
from sokocore.errors import ParseError
from sokocore.history_codec import expand_rle
from sokocore.level_manager import dump_level, load_levels
from sokocore.levels import LEVELS
from sokocore.solutions import (
    SolutionTracker, count_moves, count_pushes, load_solutions,
)
from sokocore.storage import SolutionStore

GZIP_MAGIC = b"\x1f\x8b"


def read_level_file(path: str) -> bytes:
    """Return the raw bytes of *path*, gunzipped if needed."""
    with open(path, "rb") as f:
        data = f.read()
    if data[:2] == GZIP_MAGIC:
        data = gzip.decompress(data)
    return data


def list_levels(level_set):
    if level_set.comment:
        print(f"  {level_set.comment}")
    print(f"  {len(level_set)} level(s)")
    print()
    for level in level_set:
        best = level.best_solution
        status = (f"best {count_moves(best)}/{count_pushes(best)}"
                  if best else "unsolved")
        print(f"  {level.level_index:4d}  {level.width:2d}x{level.height:<2d}"
              f"  {level.key}  {status:14s}  {level.comment}")
    if level_set.error is not None:
        print(f"\n  Loading stopped early: {level_set.error}")


def replay(level, moves: str, tracker):
    state  = GameState.for_level(level)
    result = play(level, state, expand_rle(moves))
    print(f"  Level {level.level_index}: {len(state.history)} move(s), "
          f"{count_pushes(state.moves)} push(es)")
    print(f"  History: {state.moves}")
    if not result & MoveFlag.SOLVED:
        print("  Not solved.")
        return 1
    print("  Solved!")
    if tracker is not None and tracker.record(level, state):
        print("  Saved as the new best solution.")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("file", nargs="?",
                        help="XSB level file (default: built-in levels)")
    parser.add_argument("-l", "--level", type=int,
                        help="1-based level number to work on")
    parser.add_argument("-m", "--moves",
                        help="moves to replay, e.g. 'rrUUl' or '2r2Ul'")
    parser.add_argument("--dump", action="store_true",
                        help="print the selected level as XSB text")
    parser.add_argument("--save-dir", default=os.environ.get("SOKOCORE_SAVE_DIR"),
                        help="directory holding solution files")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        data = read_level_file(args.file) if args.file else "".join(LEVELS)
        level_set = load_levels(data)
    except OSError as exc:
        print(f"Failed to open file: {exc}", file=sys.stderr)
        return 1
    except ParseError as exc:
        print(f"Failed to load the level file: {exc}", file=sys.stderr)
        return 1

    tracker = None
    if args.save_dir:
        store = SolutionStore(args.save_dir)
        load_solutions(level_set, store)
        tracker = SolutionTracker(store)

    if args.level is None:
        list_levels(level_set)
        return 0

    if not (1 <= args.level <= len(level_set)):
        print(f"Level {args.level} not found.  Available: 1-{len(level_set)}",
              file=sys.stderr)
        return 1
    level = level_set[args.level - 1]

    if args.dump:
        print(dump_level(level, level.best_solution), end="")
        return 0
    if args.moves:
        try:
            return replay(level, args.moves, tracker)
        except ValueError as exc:
            print(f"Invalid moves: {exc}", file=sys.stderr)
            return 1

    print(repr(level))
    return 0


if __name__ == "__main__":
    sys.exit(main())
