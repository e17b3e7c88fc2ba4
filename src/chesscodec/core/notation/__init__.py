"""Notation package: FEN / SAN / LAN parsing and serialization."""

from chesscodec.core.notation.codec import (
    MoveNotation,
    move_to_string,
    parse_move,
    string_to_move,
)
from chesscodec.core.notation.errors import NotationError, NotationErrorKind
from chesscodec.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chesscodec.core.notation.lan import lan_to_move, move_to_lan, parse_lan
from chesscodec.core.notation.san import move_to_san, parse_san, san_to_move

__all__ = [
    "STARTING_FEN",
    "MoveNotation",
    "NotationError",
    "NotationErrorKind",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "san_to_move",
    "move_to_lan",
    "parse_lan",
    "lan_to_move",
    "move_to_string",
    "parse_move",
    "string_to_move",
]
