"""Core domain layer: positions, legal moves and the SAN/LAN move codec.

Quick start::

    from chesscodec.core import MoveNotation, move_to_string, parse_move, position_from_fen

    pos = position_from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
    move = parse_move(pos, "Nf3")
    print(move_to_string(pos, move, MoveNotation.LAN))  # g1f3
"""

from chesscodec.core.board import Board
from chesscodec.core.enums import CastlingRights, CastlingSide, Color, PieceType
from chesscodec.core.move import Move
from chesscodec.core.move_generator import MoveGenerator
from chesscodec.core.notation import (
    STARTING_FEN,
    MoveNotation,
    NotationError,
    NotationErrorKind,
    lan_to_move,
    move_to_lan,
    move_to_san,
    move_to_string,
    parse_lan,
    parse_move,
    parse_san,
    position_from_fen,
    position_to_fen,
    san_to_move,
    string_to_move,
)
from chesscodec.core.piece import Piece, piece_letter, piece_type_from_letter
from chesscodec.core.position import Position
from chesscodec.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    parse_square_or_none,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CastlingSide",
    "Color",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "parse_square_or_none",
    "piece_letter",
    "piece_type_from_letter",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    # Notation
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
