"""LAN (Long Algebraic Notation) conversion and parsing, e.g. ``e7e8q``."""

from __future__ import annotations

import logging

from chesscodec.core.enums import CastlingSide, PieceType
from chesscodec.core.move import Move
from chesscodec.core.notation.errors import NotationError, NotationErrorKind
from chesscodec.core.piece import Piece, piece_type_from_letter
from chesscodec.core.position import Position
from chesscodec.core.types import parse_square_or_none

_LOGGER = logging.getLogger(__name__)


def move_to_lan(move: Move) -> str:
    """Source square, target square and lowercase promotion letter."""
    return str(move)


def parse_lan(position: Position, lan: str) -> Move | None:
    """Parse a LAN string, returning ``None`` if it is malformed."""
    try:
        return lan_to_move(position, lan)
    except NotationError as exc:
        _LOGGER.debug("Rejected LAN %r: %s", lan, exc)
        return None


def lan_to_move(position: Position, lan: str) -> Move:
    """Parse a LAN string into a :class:`Move`.

    Legality is not checked. A king travelling two or three files along its
    rank is read as castling towards that side.
    """
    if not 4 <= len(lan) <= 5:
        raise NotationError(
            f"Malformed LAN {lan!r}: expected 4 or 5 characters",
            NotationErrorKind.STRUCTURE,
        )

    from_sq = parse_square_or_none(lan[0:2])
    to_sq = parse_square_or_none(lan[2:4])
    if from_sq is None or to_sq is None:
        raise NotationError(
            f"Malformed LAN {lan!r}: invalid square", NotationErrorKind.STRUCTURE
        )

    promotion: PieceType | None = None
    if len(lan) == 5:
        promotion = piece_type_from_letter(lan[4].upper())
        if promotion is None:
            raise NotationError(
                f"Malformed LAN {lan!r}: invalid promotion piece",
                NotationErrorKind.STRUCTURE,
            )

    castling = CastlingSide.NONE
    if position.board[from_sq] == Piece(position.side_to_move, PieceType.KING):
        diff = to_sq - from_sq
        if diff in (-2, -3):
            castling = CastlingSide.QUEENSIDE
        elif diff in (2, 3):
            castling = CastlingSide.KINGSIDE

    return Move(from_sq, to_sq, promotion, castling)
