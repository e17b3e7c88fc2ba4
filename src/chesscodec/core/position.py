"""Position: complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from chesscodec.core.board import CHESS960_STANDARD, Board
from chesscodec.core.enums import CastlingRights, CastlingSide, Color, PieceType
from chesscodec.core.move import Move
from chesscodec.core.piece import Piece
from chesscodec.core.types import Square, file_of, make_square, rank_of

# Destination files after castling, identical in standard chess and Chess960.
KING_CASTLE_FILES: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 6,
    CastlingSide.QUEENSIDE: 2,
}
ROOK_CASTLE_FILES: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 5,
    CastlingSide.QUEENSIDE: 3,
}
_STANDARD_ROOK_FILES: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 7,
    CastlingSide.QUEENSIDE: 0,
}


@dataclass(slots=True)
class UndoState:
    """Snapshot saved before each move so we can undo it.

    Returned by :meth:`Position.make_move` as the token that
    :meth:`Position.unmake_move` consumes.
    """

    move: Move
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured_piece: Piece | None
    captured_sq: Square | None


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Supports efficient :meth:`make_move` / :meth:`unmake_move` via an internal
    history stack (Command pattern). ``chess960`` marks a randomised start;
    ``rook_files`` holds the file of the castling rook for each wing, shared
    by both colors.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "chess960",
        "rook_files",
        "_history",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        chess960: bool = False,
        rook_files: Mapping[CastlingSide, int] | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.chess960 = chess960
        self.rook_files: dict[CastlingSide, int] = dict(_STANDARD_ROOK_FILES)
        if rook_files is not None:
            self.rook_files.update(rook_files)
        self._history: list[UndoState] = []

    @classmethod
    def chess960_start(cls, number: int) -> Position:
        """Starting position of Chess960 layout *number* with full castling rights."""
        board = Board.chess960(number)
        rooks = sorted(file_of(sq) for sq in board.pieces(Color.WHITE, PieceType.ROOK))
        return cls(
            board=board,
            chess960=number != CHESS960_STANDARD,
            rook_files={
                CastlingSide.QUEENSIDE: rooks[0],
                CastlingSide.KINGSIDE: rooks[-1],
            },
        )

    # ── Castling geometry ────────────────────────────────────────────────

    def castling_target(self, color: Color, side: CastlingSide) -> Square:
        """Square the king of *color* lands on when castling towards *side*."""
        return make_square(KING_CASTLE_FILES[side], color.back_rank)

    def castling_rook_square(self, color: Color, side: CastlingSide) -> Square:
        """Starting square of the rook *color* castles with towards *side*."""
        return make_square(self.rook_files[side], color.back_rank)

    def has_castling_right(self, color: Color, side: CastlingSide) -> bool:
        return bool(self.castling & CastlingRights.of(color, side))

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> UndoState:
        """Apply *move*, pushing undo state onto the history stack.

        Returns the pushed state; pass it to :meth:`unmake_move` to have the
        pairing checked.
        """
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        captured_sq: Square | None = None
        if move.castling == CastlingSide.NONE:
            captured_sq = move.to_sq
            # En passant: the captured pawn sits beside the origin square
            if (
                piece.piece_type == PieceType.PAWN
                and move.to_sq == self.en_passant
                and file_of(move.to_sq) != file_of(move.from_sq)
            ):
                captured_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = self.board[captured_sq] if captured_sq is not None else None
        state = UndoState(
            move=move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            captured_piece=captured,
            captured_sq=captured_sq if captured is not None else None,
        )

        if move.castling != CastlingSide.NONE:
            self._move_castling_pieces(piece, move)
        else:
            self.board[move.from_sq] = None
            if captured_sq is not None:
                self.board[captured_sq] = None
            placed_piece = piece
            if move.promotion is not None:
                placed_piece = Piece(piece.color, move.promotion)
            self.board[move.to_sq] = placed_piece
        self._history.append(state)

        # En passant target for the opponent
        next_en_passant: Square | None = None
        if (
            piece.piece_type == PieceType.PAWN
            and abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2
        ):
            next_en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        self.en_passant = next_en_passant

        self._update_castling(move, piece)

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        return state

    def unmake_move(self, move: Move, undo: UndoState | None = None) -> None:
        """Undo the last :meth:`make_move`.

        Raises:
            ValueError: nothing to undo, or *move* / *undo* is not the last
                move played.
        """
        if not self._history:
            raise ValueError("No move to undo")
        state = self._history[-1]
        if (undo is not None and undo is not state) or state.move != move:
            raise ValueError(f"{move} is not the last move played")
        self._history.pop()

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        if move.castling != CastlingSide.NONE:
            self._restore_castling_pieces(move)
        else:
            piece = self.board[move.to_sq]
            assert piece is not None
            if move.promotion is not None:
                piece = Piece(piece.color, PieceType.PAWN)
            self.board[move.to_sq] = None
            self.board[move.from_sq] = piece
            if state.captured_sq is not None:
                self.board[state.captured_sq] = state.captured_piece

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock

    @contextmanager
    def applied(self, move: Move) -> Iterator[Position]:
        """Play *move* for the duration of a ``with`` block, then take it back."""
        undo = self.make_move(move)
        try:
            yield self
        finally:
            self.unmake_move(move, undo)

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _move_castling_pieces(self, king: Piece, move: Move) -> None:
        rank = rank_of(move.from_sq)
        rook_from = make_square(self.rook_files[move.castling], rank)
        rook_to = make_square(ROOK_CASTLE_FILES[move.castling], rank)
        rook = self.board[rook_from]
        if rook is None:
            raise ValueError(f"No castling rook on {rook_from}")
        # Lift both first: in Chess960 the destinations may overlap the origins.
        self.board[move.from_sq] = None
        self.board[rook_from] = None
        self.board[move.to_sq] = king
        self.board[rook_to] = rook

    def _restore_castling_pieces(self, move: Move) -> None:
        rank = rank_of(move.from_sq)
        rook_from = make_square(self.rook_files[move.castling], rank)
        rook_to = make_square(ROOK_CASTLE_FILES[move.castling], rank)
        king = self.board[move.to_sq]
        rook = self.board[rook_to]
        self.board[move.to_sq] = None
        self.board[rook_to] = None
        self.board[move.from_sq] = king
        self.board[rook_from] = rook

    def _update_castling(self, move: Move, piece: Piece) -> None:
        if not self.castling:
            return
        next_castling = self.castling
        if piece.piece_type == PieceType.KING:
            next_castling &= ~CastlingRights.both(piece.color)

        for color in (Color.WHITE, Color.BLACK):
            for side in (CastlingSide.KINGSIDE, CastlingSide.QUEENSIDE):
                corner = self.castling_rook_square(color, side)
                if corner in (move.from_sq, move.to_sq):
                    next_castling &= ~CastlingRights.of(color, side)

        self.castling = next_castling
