"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chesscodec.core.notation import STARTING_FEN, position_from_fen
from chesscodec.core.position import Position

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"

# White pawn on e5 may take the f5 pawn en passant.
EN_PASSANT_FEN = "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3"

# Chess960: king b1, rook a1. Queenside castling lands the king on c1,
# the same square a plain king step reaches.
CHESS960_QUEENSIDE_FEN = "rk6/8/8/8/8/8/8/RK6 w Aa - 0 1"


@pytest.fixture
def start() -> Position:
    """Standard starting position."""
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def kiwipete() -> Position:
    return position_from_fen(KIWIPETE)


@pytest.fixture
def en_passant() -> Position:
    return position_from_fen(EN_PASSANT_FEN)


@pytest.fixture
def chess960_queenside() -> Position:
    return position_from_fen(CHESS960_QUEENSIDE_FEN)
