"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesscodec.core.enums import CastlingRights, CastlingSide, Color, PieceType
from chesscodec.core.move import Move
from chesscodec.core.piece import Piece
from chesscodec.core.position import ROOK_CASTLE_FILES
from chesscodec.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chesscodec.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
_COLOR_OPPOSITE: tuple[Color, Color] = (Color.BLACK, Color.WHITE)

# [color] -> (forward step, start rank, last rank before promotion)
_PAWN_GEOMETRY: tuple[tuple[int, int, int], tuple[int, int, int]] = (
    (8, 1, 6),
    (-8, 6, 1),
)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """[color][sq] -> squares a pawn of *color* would attack *sq* from."""
    per_color: list[tuple[int, ...]] = []
    for behind in (-1, 1):
        masks: list[int] = []
        for sq in range(64):
            mask = 0
            attacker_rank = (sq >> 3) + behind
            if 0 <= attacker_rank < 8:
                for df in (-1, 1):
                    attacker_file = (sq & 7) + df
                    if 0 <= attacker_file < 8:
                        mask |= 1 << make_square(attacker_file, attacker_rank)
            masks.append(mask)
        per_color.append(tuple(masks))
    return (per_color[0], per_color[1])


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        legal: list[Move] = []
        moving_color = self._pos.side_to_move
        append_legal = legal.append

        for move in self.generate_pseudo_legal_moves():
            undo = self._pos.make_move(move)
            if not self.is_in_check(moving_color):
                append_legal(move)
            self._pos.unmake_move(move, undo)
        return legal

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        moving_color = self._pos.side_to_move
        for move in self.generate_pseudo_legal_moves():
            with self._pos.applied(move):
                if not self.is_in_check(moving_color):
                    return True
        return False

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        for sq in board.pieces(color, PieceType.PAWN):
            self._gen_pawn(sq, color, moves)
        for sq in board.pieces(color, PieceType.KNIGHT):
            self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
        for sq in board.pieces(color, PieceType.BISHOP):
            self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.ROOK):
            self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.QUEEN):
            self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.KING):
            self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, color, moves)

        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)])

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board
        by_idx = int(by_color)

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        ):
            return True

        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
        for rays, slider in (
            (_BISHOP_RAYS[sq], PieceType.BISHOP),
            (_ROOK_RAYS[sq], PieceType.ROOK),
        ):
            if not (queens or board.pieces_bitboard(by_color, slider)):
                continue
            for ray in rays:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        slider,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step, start_rank, promo_rank = _PAWN_GEOMETRY[int(color)]
        rank_idx = rank_of(sq)
        promoting = rank_idx == promo_rank

        one_step = sq + step
        if not 0 <= one_step < 64:
            return
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, promoting, moves)
            if rank_idx == start_rank and board.is_empty(one_step + step):
                moves.append(Move(sq, one_step + step))

        for df in (-1, 1):
            if not 0 <= file_of(sq) + df < 8:
                continue
            cap_sq = one_step + df
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, promoting, moves)
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq))

    @staticmethod
    def _add_pawn_move(
        from_sq: Square, to_sq: Square, promoting: bool, moves: list[Move]
    ) -> None:
        if promoting:
            for pt in _PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, pt))
        else:
            moves.append(Move(from_sq, to_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        """Castling for standard and Chess960 setups.

        Every square spanned by king and rook (origins and destinations) must be
        empty apart from those two pieces, and no square the king crosses,
        including its origin, may be attacked.
        """
        pos = self._pos
        back_rank = color.back_rank
        if rank_of(king_sq) != back_rank or not pos.castling & CastlingRights.both(color):
            return
        if self.is_in_check(color):
            return

        board = self._board
        opponent = _COLOR_OPPOSITE[int(color)]
        own_rook = Piece(color, PieceType.ROOK)

        for side in (CastlingSide.KINGSIDE, CastlingSide.QUEENSIDE):
            if not pos.has_castling_right(color, side):
                continue
            rook_sq = pos.castling_rook_square(color, side)
            if board[rook_sq] != own_rook:
                continue
            king_to = pos.castling_target(color, side)
            rook_to = make_square(ROOK_CASTLE_FILES[side], back_rank)

            lo = min(king_sq, king_to, rook_sq, rook_to)
            hi = max(king_sq, king_to, rook_sq, rook_to)
            if any(
                not board.is_empty(sq)
                for sq in range(lo, hi + 1)
                if sq not in (king_sq, rook_sq)
            ):
                continue

            step = 1 if king_to >= king_sq else -1
            if any(
                self.is_square_attacked(sq, opponent)
                for sq in range(king_sq + step, king_to + step, step)
            ):
                continue

            moves.append(Move(king_sq, king_to, castling=side))
