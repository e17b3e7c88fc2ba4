"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

import logging

from chesscodec.core.enums import CastlingSide, Color, PieceType
from chesscodec.core.move import Move
from chesscodec.core.move_generator import MoveGenerator
from chesscodec.core.notation.errors import NotationError, NotationErrorKind
from chesscodec.core.piece import piece_letter, piece_type_from_letter
from chesscodec.core.position import Position
from chesscodec.core.types import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    Square,
    file_letter,
    file_of,
    make_square,
    parse_square_or_none,
    rank_digit,
    rank_of,
    square_name,
)

_LOGGER = logging.getLogger(__name__)

_CASTLING_SAN: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: "O-O",
    CastlingSide.QUEENSIDE: "O-O-O",
}
_CASTLING_SAN_REV: dict[str, CastlingSide] = {v: k for k, v in _CASTLING_SAN.items()}
_ANNOTATIONS = "+#!?"


def is_capture(position: Position, piece_type: PieceType, to_sq: Square) -> bool:
    """Whether a *piece_type* move of the side to move onto *to_sq* captures."""
    target = position.board[to_sq]
    if target is not None:
        return target.color != position.side_to_move
    return piece_type == PieceType.PAWN and to_sq == position.en_passant


# ── Encoding ─────────────────────────────────────────────────────────────────


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    piece = position.board[move.from_sq]
    assert piece is not None

    suffix = _check_suffix(position, move)

    if piece.piece_type == PieceType.KING and move.castling != CastlingSide.NONE:
        return _CASTLING_SAN[move.castling] + suffix

    capture = is_capture(position, piece.piece_type, move.to_sq)
    if piece.piece_type == PieceType.PAWN:
        san = file_letter(file_of(move.from_sq)) if capture else ""
    else:
        san = piece_letter(piece.piece_type) + _disambiguation(
            position, move, piece.piece_type
        )

    if capture:
        san += "x"
    san += square_name(move.to_sq)

    if move.promotion is not None:
        san += "=" + piece_letter(move.promotion)

    return san + suffix


def _check_suffix(position: Position, move: Move) -> str:
    with position.applied(move):
        gen = MoveGenerator(position)
        if not gen.is_in_check(position.side_to_move):
            return ""
        return "+" if gen.has_legal_move() else "#"


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    """Source file and/or rank needed to tell *move* apart from its rivals."""
    board = position.board
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and board[m.from_sq] is not None
        and board[m.from_sq].piece_type == piece_type  # type: ignore[union-attr]
    ]
    if not rivals:
        return ""

    file, rank = file_of(move.from_sq), rank_of(move.from_sq)
    if not any(file_of(sq) == file for sq in rivals):
        return file_letter(file)
    if not any(rank_of(sq) == rank for sq in rivals):
        return rank_digit(rank)
    return file_letter(file) + rank_digit(rank)


# ── Decoding ─────────────────────────────────────────────────────────────────


def parse_san(position: Position, san: str) -> Move | None:
    """Parse a SAN string, returning ``None`` if it names no single legal move."""
    try:
        return san_to_move(position, san)
    except NotationError as exc:
        _LOGGER.debug("Rejected SAN %r (%s): %s", san, exc.kind.value, exc)
        return None


def san_to_move(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*.

    Raises:
        NotationError: malformed string, disagreement with the board, or an
            ambiguous / illegal move.
    """
    clean = san.rstrip(_ANNOTATIONS)
    if len(clean) < 2:
        raise _structure_error(san, "too short")

    if clean.startswith(("O-O", "0-0")):
        return _castling_move(position, san, clean.replace("0", "O"))

    # A SAN move never starts with the capture mark, and pawns carry no letter
    if clean[0] in ("x", "P"):
        raise _structure_error(san, f"unexpected leading {clean[0]!r}")

    parser = _SanCursor(san, clean)
    piece_type = piece_type_from_letter(clean[0])
    target: Square | None = None
    if piece_type is None:
        piece_type = PieceType.PAWN
        target = parse_square_or_none(clean[:2])
        if target is not None:
            parser.pos = 2
    else:
        parser.pos = 1

    from_file: int | None = None
    from_rank: int | None = None
    explicit_capture = False

    if target is None:
        file = ord(parser.peek()) - ord("a")
        if 0 <= file < BOARD_WIDTH:
            from_file = file
            parser.advance()

        ch = parser.peek()
        if "0" <= ch <= "9":
            rank = ord(ch) - ord("1")
            if not 0 <= rank < BOARD_HEIGHT:
                raise _structure_error(san, f"rank {ch!r} out of range")
            from_rank = rank
            parser.pos += 1

        if parser.at_end():
            # What looked like the source square was the target square.
            if from_file is None or from_rank is None:
                raise _structure_error(san, "missing target square")
            target = make_square(from_file, from_rank)
            from_file = from_rank = None
        else:
            if parser.peek() == "x":
                parser.advance()
                explicit_capture = True
            target = parse_square_or_none(parser.take(2))
            if target is None:
                raise _structure_error(san, "invalid target square")

    if is_capture(position, piece_type, target) != explicit_capture:
        raise NotationError(
            f"Capture mark does not match the board: {san}", NotationErrorKind.MISMATCH
        )

    promotion = _parse_promotion(parser)

    board = position.board
    candidates: list[Move] = []
    for m in MoveGenerator(position).generate_legal_moves():
        p = board[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != target or m.castling != CastlingSide.NONE:
            continue
        if m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise NotationError(f"Illegal move: {san}", NotationErrorKind.MISMATCH)
    raise NotationError(
        f"Ambiguous move: {san} → {', '.join(map(str, candidates))}",
        NotationErrorKind.AMBIGUOUS,
    )


def _castling_move(position: Position, san: str, clean: str) -> Move:
    side = _CASTLING_SAN_REV.get(clean)
    if side is None:
        raise _structure_error(san, "malformed castling")
    color: Color = position.side_to_move
    try:
        king_sq = position.board.king_square(color)
    except ValueError as exc:
        raise NotationError(str(exc), NotationErrorKind.MISMATCH) from exc
    return Move(king_sq, position.castling_target(color, side), castling=side)


def _parse_promotion(parser: _SanCursor) -> PieceType | None:
    if parser.at_end():
        return None
    closing = ""
    lead = parser.peek()
    if lead in "=(":
        parser.advance()
        closing = ")" if lead == "(" else ""

    promotion = piece_type_from_letter(parser.peek())
    if promotion is None:
        raise _structure_error(parser.san, "invalid promotion piece")
    parser.pos += 1
    if closing and not parser.at_end() and parser.peek() == closing:
        parser.pos += 1
    if not parser.at_end():
        raise _structure_error(parser.san, "trailing characters")
    return promotion


def _structure_error(san: str, reason: str) -> NotationError:
    return NotationError(f"Malformed SAN {san!r}: {reason}", NotationErrorKind.STRUCTURE)


class _SanCursor:
    """Read position over an annotation-stripped SAN string."""

    __slots__ = ("san", "text", "pos")

    def __init__(self, san: str, text: str) -> None:
        self.san = san
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        if self.at_end():
            raise _structure_error(self.san, "unexpected end")
        return self.text[self.pos]

    def advance(self) -> None:
        """Step past the current character, which must not be the last one."""
        self.pos += 1
        if self.at_end():
            raise _structure_error(self.san, "unexpected end")

    def take(self, count: int) -> str:
        chunk = self.text[self.pos : self.pos + count]
        if len(chunk) < count:
            raise _structure_error(self.san, "unexpected end")
        self.pos += count
        return chunk
