"""
sokocore.levels — Built-in level sets for sokocore.

Each sub-module exports a single LEVEL_DATA string in XSB text form.
This __init__ aggregates them into the LEVELS list.  To add a set,
create level_NN.py with a LEVEL_DATA string and append it below.
"""

from sokocore.levels.level_01 import LEVEL_DATA as _L01
from sokocore.levels.level_02 import LEVEL_DATA as _L02

LEVELS = [
    _L01,
    _L02,
]
