"""
level_manager.py — XSB level loader for sokocore.

parse_next() reads one level block from a byte buffer and returns a
Level; load_levels() drives it over a whole file.  The format is the
plain-text Sokoban notation most level collections use, with two
common extensions: run-length prefixes and ``|`` as a row separator.

Token table
-----------
    symbol      │ meaning
    ────────────┼──────────────────────────────────────────
    ' ' - _     │ floor
    #           │ wall
    @           │ player on floor
    +           │ player on goal
    $           │ atom
    *           │ atom on goal
    .           │ goal
    \\n  |       │ end of row
    \\r          │ ignored
    digits      │ repeat count for the single symbol that follows
    anything    │ comment marker: the rest of the line is a comment
    else        │

Parsing algorithm
-----------------
1) Start from a 64 × 64 grid entirely set to FLOOR and write every
   token at (x + 1, y + 1), so a free border always surrounds the level.

2) A comment before any grid data fills the block's leading comment;
   a comment after grid data fills the trailing comment and ends the
   block.  In both slots the first comment wins.

3) Flood-fill from the corner (63, 63), clearing every cell that is
   exactly FLOOR.  This wipes the floor left around the outside of the
   walls while keeping the interior, goals and atoms intact.

4) Shift the grid by (-1, -1) to drop the border, then hash it.
"""

from __future__ import annotations

import logging

import numpy as np

from sokocore.constants import (
    FIELD_ATOM, FIELD_FLOOR, FIELD_GOAL, FIELD_WALL, GRID_SIZE,
    MAX_COMMENT_LEN, MAX_LEVEL_SIDE, MAX_LEVELS,
)
from sokocore.entities import Level, new_grid
from sokocore.errors import (
    LevelTooSmall, LevelTooTall, LevelTooWide, NoLevelDataFound, ParseError,
    PlayerPositionUndefined, TooManyLevelsInSet,
)
from sokocore.hashing import identity_hash, legacy_hash

logger = logging.getLogger(__name__)

# Flags written by each grid symbol.
_CELL_FLAGS = {
    " ": FIELD_FLOOR,
    "-": FIELD_FLOOR,
    "_": FIELD_FLOOR,
    "@": FIELD_FLOOR,
    "#": FIELD_WALL,
    "$": FIELD_ATOM,
    "*": FIELD_ATOM | FIELD_GOAL,
    ".": FIELD_GOAL,
    "+": FIELD_GOAL,
}

_PLAYER_SYMBOLS = ("@", "+")
_ROW_END        = ("\n", "|")
_MAX_RUN        = GRID_SIZE * GRID_SIZE


# ═══════════════════════════════════════════════════════════════════════════
#  INTERNAL HELPERS
# ═══════════════════════════════════════════════════════════════════════════

class _Reader:
    """Byte cursor over the source buffer.  A NUL byte counts as EOF."""

    def __init__(self, buffer: bytes, pos: int):
        self.buffer = buffer
        self.pos    = pos

    def read(self) -> int:
        if self.pos >= len(self.buffer):
            return -1
        byte = self.buffer[self.pos]
        self.pos += 1
        return byte if byte else -1

    def read_rle(self) -> tuple[int, int]:
        """
        Read one RLE chunk.

        Returns (repeat_count, byte), or (-1, -1) at end of buffer.
        The count is capped at one full grid.
        """
        count = None
        while True:
            byte = self.read()
            if byte < 0:
                return -1, -1
            if not 0x30 <= byte <= 0x39:
                break
            count = min((count or 0) * 10 + (byte - 0x30), _MAX_RUN)
        return (1 if count is None else count), byte

    def read_comment(self) -> tuple[str, bool]:
        """
        Read the rest of the current line.

        Returns (trimmed_text, hit_eof).  Text is UTF-8; a character cut
        in half by the length limit is dropped.
        """
        raw = bytearray()
        truncated = False
        while True:
            byte = self.read()
            if byte < 0:
                hit_eof = True
                break
            if byte == 0x0A:
                hit_eof = False
                break
            if byte == 0x0D:
                continue
            if len(raw) < MAX_COMMENT_LEN:
                raw.append(byte)
            else:
                truncated = True
        text = raw.decode("utf-8", "replace")
        if truncated and text.endswith("\ufffd"):
            text = text[:-1]
        return text.strip(" "), hit_eof


def _flood_fill(field: np.ndarray, x: int, y: int) -> None:
    """Clear every cell exactly equal to FLOOR that is 4-connected to (x, y)."""
    stack = [(x, y)]
    while stack:
        x, y = stack.pop()
        if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
            continue
        if field[y, x] != FIELD_FLOOR:
            continue
        field[y, x] = 0
        stack.extend(((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)))


def _to_bytes(buffer) -> bytes:
    if isinstance(buffer, str):
        return buffer.encode("utf-8")
    return bytes(buffer)


# ═══════════════════════════════════════════════════════════════════════════
#  PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════

def parse_next(buffer, cursor: int = 0, level_index: int = 1):
    """
    Parse the level block starting at *cursor*.

    Parameters
    ----------
    buffer      : bytes | str – one or more concatenated level blocks.
    cursor      : int         – offset where the block starts.
    level_index : int         – 1-based ordinal stored in the Level and
                                in any error raised.

    Returns
    -------
    (level: Level | None, cursor: int)
        *level* is None when the buffer ran out before any grid data,
        which is the normal end-of-buffer signal.  *cursor* points just
        past the consumed block.

    Raises
    ------
    LevelTooWide, LevelTooTall, PlayerPositionUndefined, LevelTooSmall,
    NoLevelDataFound
    """
    reader = _Reader(_to_bytes(buffer), cursor)
    field  = np.full((GRID_SIZE, GRID_SIZE), FIELD_FLOOR, dtype=np.uint8)

    x = y = 0
    width = height = 0
    player = None
    precomment = postcomment = ""
    # 0 = no grid data yet, 1 = inside grid data, -1 = ended by a comment
    started = 0
    eof     = False

    def fail(error_cls, detail):
        return error_cls(detail, level_index=level_index, cursor=reader.pos)

    while True:
        count, byte = reader.read_rle()
        if count < 0:
            eof = True
            break
        ch = chr(byte)
        for _ in range(count):
            if ch in _CELL_FLAGS:
                field[y + 1, x + 1] |= _CELL_FLAGS[ch]
                if ch in _PLAYER_SYMBOLS:
                    player = (x, y)
                x += 1
            elif ch in _ROW_END:
                if started:
                    y += 1
                x = 0
            elif ch == "\r":
                pass
            else:
                text, eof = reader.read_comment()
                if started:
                    started = -1
                    postcomment = postcomment or text
                else:
                    precomment = precomment or text

            if started < 0 or eof:
                break
            if x > 0:
                started = 1
            if x >= MAX_LEVEL_SIDE:
                raise fail(LevelTooWide, f"level {level_index} row {y + 1}")
            if y >= MAX_LEVEL_SIDE:
                raise fail(LevelTooTall, f"level {level_index}")
            width = max(width, x)
            if y >= height and x > 0:
                height = y + 1
        if started < 0 or eof:
            break

    if not started:
        return None, reader.pos

    if player is None:
        raise fail(PlayerPositionUndefined, f"level {level_index}")
    if width < 1 or height < 1:
        raise fail(LevelTooSmall, f"level {level_index}")

    _flood_fill(field, GRID_SIZE - 1, GRID_SIZE - 1)

    grid = new_grid()
    grid[:height, :width] = field[1:height + 1, 1:width + 1]

    level = Level(
        grid, width, height, player,
        identity_hash=identity_hash(grid, width, height, player),
        legacy_hash=legacy_hash(grid, width, height),
        precomment=precomment,
        postcomment=postcomment,
        level_index=level_index,
    )
    logger.debug("loaded %r (legacy key %s)", level, level.legacy_key)
    return level, reader.pos


class LevelSet:
    """
    Levels loaded from one buffer.

    Attributes
    ----------
    levels  : list[Level]       – in file order.
    comment : str               – leading comment of the first block,
                                  usually the set's title.
    error   : ParseError | None – what stopped loading early, if anything.
    """

    def __init__(self, levels: list, comment: str = "", error=None):
        self.levels  = levels
        self.comment = comment
        self.error   = error

    def __len__(self):
        return len(self.levels)

    def __iter__(self):
        return iter(self.levels)

    def __getitem__(self, idx):
        return self.levels[idx]


def load_levels(buffer, max_levels: int = MAX_LEVELS) -> LevelSet:
    """
    Parse every level block in *buffer*.

    An error in the first block is raised.  An error in a later block
    stops loading; the levels parsed so far are kept and the error is
    stored on the returned set.  Going past *max_levels* does the same
    with TooManyLevelsInSet.

    Raises
    ------
    ParseError – the first block is invalid, or the buffer holds no level
                 at all (NoLevelDataFound).
    """
    data   = _to_bytes(buffer)
    levels = []
    cursor = 0
    error  = None

    while True:
        index = len(levels) + 1
        try:
            level, cursor = parse_next(data, cursor, level_index=index)
        except ParseError as exc:
            if not levels:
                raise
            logger.warning("stopped loading at level %d: %s", index, exc)
            error = exc
            break
        if level is None:
            break
        if len(levels) >= max_levels:
            error = TooManyLevelsInSet(f"limit is {max_levels}",
                                       level_index=index, cursor=cursor)
            if not levels:
                raise error
            logger.warning("level set truncated to %d levels", max_levels)
            break
        levels.append(level)

    if not levels:
        raise NoLevelDataFound(level_index=1, cursor=cursor)

    logger.debug("loaded %d level(s)", len(levels))
    return LevelSet(levels, comment=levels[0].precomment, error=error)


def parse(buffer) -> list:
    """Parse *buffer* and return its levels as a plain list."""
    return load_levels(buffer).levels


def dump_level(level: Level, solution: str | None = None, state=None) -> str:
    """
    Render *level* back to XSB text.

    When *state* is given its field and player position are drawn
    instead of the level's starting layout.  *solution* is appended as
    a trailing comment.  The output parses back to the same level.
    """
    field  = level.field if state is None else state.field
    player = level.player_start if state is None else state.position

    lines = [f"; Level id: {level.key}", ""]
    for y in range(level.height):
        row = []
        for x in range(level.width):
            cell      = int(field[y, x]) & ~FIELD_FLOOR
            on_player = (x, y) == player
            if cell == FIELD_WALL:
                row.append("#")
            elif cell == FIELD_ATOM | FIELD_GOAL:
                row.append("*")
            elif cell == FIELD_ATOM:
                row.append("$")
            elif cell == FIELD_GOAL:
                row.append("+" if on_player else ".")
            else:
                row.append("@" if on_player else " ")
        lines.append("".join(row))
    lines.append("")
    if solution:
        lines.append("; Solution")
        lines.append(f"; {solution}")
    else:
        lines.append("; No solution available")
    return "\n".join(lines) + "\n"
