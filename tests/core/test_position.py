"""Tests for Position make/unmake."""

import pytest

from chesscodec.core.enums import CastlingRights, CastlingSide, Color, PieceType
from chesscodec.core.move import Move
from chesscodec.core.move_generator import MoveGenerator
from chesscodec.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chesscodec.core.piece import Piece
from chesscodec.core.position import Position
from chesscodec.core.types import (
    B1, C1, D1, E1, E2, E4, E5, D5, D7, F1, F5, F6, G1, H1,
    parse_square,
)


class TestMakeUnmake:
    def test_side_switches(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.side_to_move == Color.BLACK

    def test_unmake_restores_side(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        move = Move(E2, E4)
        pos.make_move(move)
        pos.unmake_move(move)
        assert pos.side_to_move == Color.WHITE

    def test_unmake_restores_fen(self) -> None:
        """After make+unmake of every legal move, FEN must be unchanged."""
        pos = position_from_fen(STARTING_FEN)
        fen_before = position_to_fen(pos)
        gen = MoveGenerator(pos)
        for move in gen.generate_legal_moves():
            pos.make_move(move)
            pos.unmake_move(move)
            assert position_to_fen(pos) == fen_before, f"Failed for {move}"

    def test_double_push_sets_en_passant(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        assert pos.en_passant == parse_square("e3")

    def test_en_passant_replaced(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        pos.make_move(Move(D7, D5))
        assert pos.en_passant == parse_square("d6")

    def test_single_push_clears_en_passant(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        pos.make_move(Move(D7, parse_square("d6")))
        assert pos.en_passant is None

    def test_capture_restores_piece(self) -> None:
        fen = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2"
        pos = position_from_fen(fen)
        fen_before = position_to_fen(pos)
        capture = Move(E4, D5)
        pos.make_move(capture)
        assert pos.board[D5] == Piece(Color.WHITE, PieceType.PAWN)
        assert pos.halfmove_clock == 0
        pos.unmake_move(capture)
        assert position_to_fen(pos) == fen_before

    def test_en_passant_capture_inferred(self, en_passant: Position) -> None:
        fen_before = position_to_fen(en_passant)
        move = Move(E5, F6)
        en_passant.make_move(move)
        assert en_passant.board[F6] == Piece(Color.WHITE, PieceType.PAWN)
        assert en_passant.board[F5] is None
        en_passant.unmake_move(move)
        assert position_to_fen(en_passant) == fen_before

    def test_empty_source_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(ValueError, match="No piece"):
            pos.make_move(Move(E4, parse_square("e5")))


class TestApplied:
    def test_reverts_on_exit(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pos.applied(Move(E2, E4)) as inner:
            assert inner is pos
            assert pos.board[E4] == Piece(Color.WHITE, PieceType.PAWN)
        assert position_to_fen(pos) == STARTING_FEN

    def test_reverts_on_exception(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(RuntimeError):
            with pos.applied(Move(E2, E4)):
                raise RuntimeError("boom")
        assert position_to_fen(pos) == STARTING_FEN

    def test_undo_token_pairs_with_move(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        first = pos.make_move(Move(E2, E4))
        second = pos.make_move(Move(D7, D5))
        assert second.move == Move(D7, D5)
        with pytest.raises(ValueError, match="not the last move"):
            pos.unmake_move(Move(E2, E4), first)
        pos.unmake_move(Move(D7, D5), second)
        pos.unmake_move(Move(E2, E4), first)
        assert position_to_fen(pos) == STARTING_FEN

    def test_unmake_wrong_move_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pos.make_move(Move(E2, E4))
        with pytest.raises(ValueError, match="not the last move"):
            pos.unmake_move(Move(D7, D5))

    def test_unmake_without_history_raises(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        with pytest.raises(ValueError, match="No move to undo"):
            pos.unmake_move(Move(E2, E4))


class TestCastlingRightsUpdate:
    FEN = "r3k2r/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1"

    def test_king_move_removes_rights(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.make_move(Move(E1, F1))
        assert not (pos.castling & CastlingRights.WHITE_BOTH)
        assert pos.castling & CastlingRights.BLACK_BOTH == CastlingRights.BLACK_BOTH

    def test_rook_move_removes_one_right(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.make_move(Move(parse_square("a1"), parse_square("b1")))
        assert not (pos.castling & CastlingRights.WHITE_QUEENSIDE)
        assert bool(pos.castling & CastlingRights.WHITE_KINGSIDE)

    def test_castling_kingside(self) -> None:
        pos = position_from_fen(self.FEN)
        move = Move(E1, G1, castling=CastlingSide.KINGSIDE)
        pos.make_move(move)
        assert pos.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[H1] is None
        pos.unmake_move(move)
        assert position_to_fen(pos) == self.FEN

    def test_castling_queenside(self) -> None:
        pos = position_from_fen(self.FEN)
        move = Move(E1, C1, castling=CastlingSide.QUEENSIDE)
        pos.make_move(move)
        assert pos.board[C1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[D1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[parse_square("a1")] is None


class TestChess960Castling:
    def test_king_and_rook_swap_through_each_other(self) -> None:
        fen = "rk6/8/8/8/8/8/8/RK6 w Aa - 0 1"
        pos = position_from_fen(fen)
        move = Move(B1, C1, castling=CastlingSide.QUEENSIDE)
        pos.make_move(move)
        assert pos.board[C1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[D1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[B1] is None
        assert pos.board[parse_square("a1")] is None
        assert not (pos.castling & CastlingRights.WHITE_BOTH)
        pos.unmake_move(move)
        assert position_to_fen(pos) == fen

    def test_king_already_on_target(self) -> None:
        fen = "6kr/8/8/8/8/8/8/6KR w Hh - 0 1"
        pos = position_from_fen(fen)
        move = Move(G1, G1, castling=CastlingSide.KINGSIDE)
        pos.make_move(move)
        assert pos.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[H1] is None
        pos.unmake_move(move)
        assert position_to_fen(pos) == fen

    def test_chess960_start(self) -> None:
        pos = Position.chess960_start(0)
        assert pos.chess960
        assert pos.castling == CastlingRights.ALL
        assert pos.rook_files == {CastlingSide.QUEENSIDE: 5, CastlingSide.KINGSIDE: 7}
        assert pos.castling_rook_square(Color.BLACK, CastlingSide.QUEENSIDE) == parse_square("f8")

    def test_standard_number_is_not_chess960(self) -> None:
        assert not Position.chess960_start(518).chess960


class TestPromotion:
    FEN = "8/4P3/8/8/8/8/4k3/4K3 w - - 0 1"

    def test_promote_to_queen(self) -> None:
        pos = position_from_fen(self.FEN)
        pos.make_move(Move(parse_square("e7"), parse_square("e8"), PieceType.QUEEN))
        assert pos.board[parse_square("e8")] == Piece(Color.WHITE, PieceType.QUEEN)

    def test_promote_unmake_restores_pawn(self) -> None:
        pos = position_from_fen(self.FEN)
        move = Move(parse_square("e7"), parse_square("e8"), PieceType.KNIGHT)
        pos.make_move(move)
        pos.unmake_move(move)
        assert position_to_fen(pos) == self.FEN
