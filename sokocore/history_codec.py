"""
history_codec.py — Compact on-disk encoding of move histories.

Each byte stores one run of identical moves:

    high nibble │ low nibble
    ────────────┼──────────────────────────────────────────
    run length  │ move code  u l d r U L D R  →  0 … 7
    (1 … 15)    │            8 … 15 are invalid

A run longer than 15 is split over several bytes.  The stream has no
header or terminator; it simply ends at EOF.
"""

from __future__ import annotations

from sokocore.constants import CODE_MOVES, MAX_RUN, MOVE_CODES
from sokocore.errors import CorruptSolution, InvalidMoveCharacter


def encode_history(history: str) -> bytes:
    """
    Pack *history* into run-length nibble bytes.

    Raises
    ------
    InvalidMoveCharacter – *history* holds a character outside ``udlrUDLR``.
    """
    out = bytearray()
    last, run = None, 0
    for ch in history:
        code = MOVE_CODES.get(ch)
        if code is None:
            raise InvalidMoveCharacter(repr(ch))
        if code == last and run < MAX_RUN:
            run += 1
            continue
        if run:
            out.append((run << 4) | last)
        last, run = code, 1
    if run:
        out.append((run << 4) | last)
    return bytes(out)


def decode_history(data: bytes) -> str:
    """
    Unpack bytes produced by encode_history().

    Raises
    ------
    CorruptSolution – a byte carries a move code above 7.  Nothing is
                      returned in that case, not even the valid prefix.
    """
    parts = []
    for offset, byte in enumerate(data):
        run, code = byte >> 4, byte & 0x0F
        ch = CODE_MOVES.get(code)
        if ch is None:
            raise CorruptSolution(f"invalid move code {code} at byte {offset}")
        parts.append(ch * run)
    return "".join(parts)


def expand_rle(text: str) -> str:
    """
    Expand a textual run-length-encoded solution, e.g. ``"3r2U"`` → ``"rrrUU"``.

    Digits prefix the single character that follows them.  Whitespace is
    dropped so solutions pasted over several lines still expand.
    """
    out = []
    count = None
    for ch in text:
        if ch.isdigit():
            count = (count or 0) * 10 + int(ch)
            continue
        if ch.isspace():
            continue
        out.append(ch * (1 if count is None else count))
        count = None
    return "".join(out)
