"""
errors.py — Error taxonomy for sokocore.

Every failure the library reports is a subclass of SokobanError and
carries a short human-readable message.  Parse errors also remember
which level block failed and where in the buffer parsing stopped.

Move rejections (walls, blocked pushes) are *not* errors: try_move()
returns None for them.
"""


class SokobanError(Exception):
    """Base class of every sokocore error."""

    message = "Undefined error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


# ═══════════════════════════════════════════════════════════════════════════
#  LEVEL LOADING
# ═══════════════════════════════════════════════════════════════════════════

class ParseError(SokobanError, ValueError):
    """A level block could not be loaded."""

    def __init__(self, detail: str = "", level_index: int = 0, cursor: int = 0):
        self.level_index = level_index
        self.cursor      = cursor
        super().__init__(detail)


class LevelTooTall(ParseError):
    message = "Level height too high"


class LevelTooWide(ParseError):
    message = "Level width too large"


class LevelTooSmall(ParseError):
    message = "Level dimensions too small"


class NoLevelDataFound(ParseError):
    message = "No level data found in file"


class PlayerPositionUndefined(ParseError):
    message = "Player position not defined"


class TooManyLevelsInSet(ParseError):
    message = "Too many levels in set"


# ═══════════════════════════════════════════════════════════════════════════
#  PLAY / PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════════

class MemoryAllocationFailed(SokobanError):
    message = "Memory allocation failed - out of memory?"


class CorruptSolution(SokobanError, ValueError):
    message = "Corrupted solution data"


class InvalidMoveCharacter(SokobanError, ValueError):
    message = "Invalid move character"


def strerror(error) -> str:
    """Return the message for an error instance or class."""
    if isinstance(error, type) and issubclass(error, SokobanError):
        return error.message
    if isinstance(error, SokobanError):
        return error.message
    return "Unknown error"
