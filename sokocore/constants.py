"""
constants.py — Shared constants for sokocore.

Grid geometry, cell flags, directional data, the move alphabet and
save-file extensions live here so every other module can import them
from a single authoritative source.
"""

# ═══════════════════════════════════════════════════════════════════════════
#  GRID GEOMETRY
# ═══════════════════════════════════════════════════════════════════════════

# Side of the square backing array of every playfield.
GRID_SIZE = 64

# Rows / columns a level may use.  The parser writes at (+1, +1) so the
# flood fill always has a free border to walk around the level.
MAX_LEVEL_SIDE = 62

# Longest comment kept per slot; the remainder of the line is dropped.
MAX_COMMENT_LEN = 127

# Default capacity of a level set.
MAX_LEVELS = 4096

# ═══════════════════════════════════════════════════════════════════════════
#  CELL FLAGS
# ═══════════════════════════════════════════════════════════════════════════

FIELD_FLOOR = 1
FIELD_ATOM  = 2
FIELD_GOAL  = 4
FIELD_WALL  = 8

# ═══════════════════════════════════════════════════════════════════════════
#  DIRECTIONAL DATA
# ═══════════════════════════════════════════════════════════════════════════

# (dx, dy) for each compass direction.  y grows downward.
DIR_DELTA = {
    "up":    ( 0, -1),
    "right": ( 1,  0),
    "down":  ( 0,  1),
    "left":  (-1,  0),
}

# Angle the player sprite faces after a move in each direction.
DIR_ANGLE = {"up": 0, "right": 90, "down": 180, "left": 270}

# Lowercase history character per direction; a push is the uppercase form.
DIR_CHAR = {"up": "u", "right": "r", "down": "d", "left": "l"}
CHAR_DIR = {ch: d for d, ch in DIR_CHAR.items()}

# ═══════════════════════════════════════════════════════════════════════════
#  HISTORY ENCODING
# ═══════════════════════════════════════════════════════════════════════════

# Nibble code of every history character.  Codes 8-15 are invalid.
MOVE_CODES = {
    "u": 0, "l": 1, "d": 2, "r": 3,
    "U": 4, "L": 5, "D": 6, "R": 7,
}
CODE_MOVES = {code: ch for ch, code in MOVE_CODES.items()}

# Longest run a single encoded byte can hold.
MAX_RUN = 15

# ═══════════════════════════════════════════════════════════════════════════
#  SAVE FILES
# ═══════════════════════════════════════════════════════════════════════════

EXT_SOLUTION = "sol"   # best solution, keyed by the 64-bit identity hash
EXT_SNAPSHOT = "sav"   # explicit in-progress save, same key
EXT_LEGACY   = "dat"   # solutions written by old versions, 32-bit key
