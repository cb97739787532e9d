"""
hashing.py — Content hashes used as solution lookup keys.

Two keys identify a level independently of its file name or comments:

  identity_hash  – CRC-64 (Jones polynomial, reflected, no final XOR)
                   over the player's start position followed by every
                   cell of the playfield, row by row.
  legacy_hash    – CRC-32 as written by old save files.  It walks the
                   grid with the width and height bounds swapped and
                   skips the player position, so it only covers part of
                   the field.  It must stay exactly this way or older
                   solutions can no longer be found.
"""

from __future__ import annotations

import zlib

import numpy as np

# Jones polynomial 0xAD93D23594C935A9, bit-reversed for the right-shifting table.
_CRC64_POLY = 0x95AC9329AC4BC9B5


def _make_crc64_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ _CRC64_POLY
            else:
                crc >>= 1
        table.append(crc)
    return table


_CRC64_TABLE = _make_crc64_table()


def crc64(data: bytes, crc: int = 0) -> int:
    """
    Feed *data* into a running CRC-64.

    Start from 0; the result of one call can be passed back as *crc* to
    continue hashing more data.
    """
    table = _CRC64_TABLE
    for byte in data:
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc


def identity_hash(field: np.ndarray, width: int, height: int,
                  player: tuple[int, int]) -> int:
    """64-bit key of a parsed playfield (*field* indexed ``[y, x]``)."""
    px, py = player
    crc = crc64(bytes((px & 0xFF, py & 0xFF)))
    return crc64(field[:height, :width].tobytes(), crc)


def legacy_hash(field: np.ndarray, width: int, height: int) -> int:
    """
    32-bit key computed the way old versions did.

    The outer loop runs over ``width`` rows and the inner one over
    ``height`` columns, i.e. the axes are transposed.
    """
    return zlib.crc32(field[:width, :height].tobytes()) & 0xFFFFFFFF


def format_key(value: int) -> str:
    """Render an identity hash as used in save-file names."""
    return f"{value:016x}"


def format_legacy_key(value: int) -> str:
    """Render a legacy hash as used in old save-file names."""
    return f"{value:08X}"
