"""
Shared pytest fixtures for sokocore tests.

Level fixtures are built fresh for every test so that attaching a best
solution in one test never leaks into another.
"""

import pytest

from sokocore.entities import GameState
from sokocore.level_manager import load_levels
from sokocore.levels import LEVELS
from sokocore.storage import SolutionStore


CORNER_LEVEL = """\
######
#.   #
# $  #
#  @ #
######
"""

# Moves that solve CORNER_LEVEL, as directions and as a history string.
CORNER_SOLUTION_DIRS = ["up", "left", "down", "left", "up"]
CORNER_SOLUTION = "uLdlU"


@pytest.fixture
def starter_set():
    """The built-in three-level starter set."""
    return load_levels(LEVELS[0])


@pytest.fixture
def corner_level():
    return load_levels(CORNER_LEVEL)[0]


@pytest.fixture
def corner_state(corner_level):
    return GameState.for_level(corner_level)


@pytest.fixture
def store(tmp_path):
    return SolutionStore(tmp_path / "solved")
