"""Square type alias and coordinate helpers.

Board layout (Little-Endian Rank-File mapping):
    a1=0, b1=1, ..., h1=7
    a2=8, b2=9, ..., h2=15
    ...
    a8=56, b8=57, ..., h8=63
"""

from __future__ import annotations

from typing import Final, TypeAlias

Square: TypeAlias = int  # 0–63

BOARD_WIDTH: Final = 8
BOARD_HEIGHT: Final = 8


def file_of(sq: Square) -> int:
    """File index 0–7 (a–h)."""
    return sq & 7


def rank_of(sq: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return sq >> 3


def make_square(file: int, rank: int) -> Square:
    """Create square from file (0–7) and rank (0–7)."""
    return rank * BOARD_WIDTH + file


def file_letter(file: int) -> str:
    """File index to its letter, e.g. 4 → 'e'."""
    return chr(ord("a") + file)


def rank_digit(rank: int) -> str:
    """Rank index to its digit, e.g. 0 → '1'."""
    return str(rank + 1)


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 → 'a1', 63 → 'h8'."""
    return file_letter(file_of(sq)) + rank_digit(rank_of(sq))


def parse_square_or_none(name: str) -> Square | None:
    """Parse square name, returning ``None`` for anything malformed."""
    if len(name) != 2:
        return None
    file = ord(name[0]) - ord("a")
    rank = ord(name[1]) - ord("1")
    if not (0 <= file < BOARD_WIDTH and 0 <= rank < BOARD_HEIGHT):
        return None
    return make_square(file, rank)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → 28."""
    sq = parse_square_or_none(name)
    if sq is None:
        raise ValueError(f"Invalid square name: {name!r}")
    return sq


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)
