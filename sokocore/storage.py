"""
storage.py — File-backed solution store.

Each level's history lives in its own small file named after the
level's key, e.g. ``00a1b2c3d4e5f607.sol`` or, for files written by old
versions, ``1A2B3C4D.dat``.  The payload is the history_codec encoding
with nothing around it.

Where the directory lives is the caller's decision; the store only
joins names onto the paths it is given.
"""

from __future__ import annotations

import logging
import os

from sokocore.constants import EXT_LEGACY, EXT_SOLUTION
from sokocore.hashing import format_key, format_legacy_key
from sokocore.history_codec import decode_history, encode_history

logger = logging.getLogger(__name__)


class SolutionStore:
    """
    Read and write encoded histories keyed by level hash.

    Parameters
    ----------
    directory          : str  – where new files are written, and the
                                first place searched when loading.
    legacy_directories : list – extra read-only locations searched after
                                *directory* (older install layouts).
    """

    def __init__(self, directory, legacy_directories=()):
        self.directory          = os.fspath(directory)
        self.legacy_directories = [os.fspath(d) for d in legacy_directories]

    @staticmethod
    def filename(key: int, ext: str) -> str:
        if ext.lower() == EXT_LEGACY:
            return f"{format_legacy_key(key)}.{ext}"
        return f"{format_key(key)}.{ext}"

    def path_for(self, key: int, ext: str = EXT_SOLUTION) -> str:
        return os.path.join(self.directory, self.filename(key, ext))

    def load(self, key: int, ext: str = EXT_SOLUTION):
        """
        Return the stored history for *key*, or None if there is none.

        Raises
        ------
        CorruptSolution – the file exists but does not decode.
        """
        name = self.filename(key, ext)
        for directory in [self.directory] + self.legacy_directories:
            path = os.path.join(directory, name)
            try:
                with open(path, "rb") as f:
                    data = f.read()
            except FileNotFoundError:
                continue
            logger.debug("read %d byte(s) from %s", len(data), path)
            return decode_history(data)
        return None

    def save(self, key: int, history: str, ext: str = EXT_SOLUTION) -> str:
        """Encode *history* and write it for *key*.  Returns the file path."""
        data = encode_history(history)
        os.makedirs(self.directory, exist_ok=True)
        path = self.path_for(key, ext)
        tmp  = path + ".tmp"
        try:
            with open(tmp, "wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.debug("wrote %d move(s) to %s", len(history), path)
        return path
