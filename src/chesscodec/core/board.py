"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from chesscodec.core.enums import Color, PieceType
from chesscodec.core.piece import Piece
from chesscodec.core.types import BOARD_HEIGHT, BOARD_WIDTH, Square, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2
_SQUARE_COUNT = BOARD_WIDTH * BOARD_HEIGHT

CHESS960_STANDARD = 518

_STANDARD_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Knight placements over the five squares left after bishops and queen.
_KNIGHT_PAIRS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (0, 2),
    (0, 3),
    (0, 4),
    (1, 2),
    (1, 3),
    (1, 4),
    (2, 3),
    (2, 4),
    (3, 4),
)


def chess960_back_rank(number: int) -> tuple[PieceType, ...]:
    """Back rank (files a–h) for Scharnagl start position *number* (0–959)."""
    if not 0 <= number < 960:
        raise ValueError(f"Chess960 position number out of range: {number}")

    rank: list[PieceType | None] = [None] * BOARD_WIDTH
    n, light = divmod(number, 4)
    rank[2 * light + 1] = PieceType.BISHOP
    n, dark = divmod(n, 4)
    rank[2 * dark] = PieceType.BISHOP

    n, queen = divmod(n, 6)
    free = [f for f, pt in enumerate(rank) if pt is None]
    rank[free[queen]] = PieceType.QUEEN

    free = [f for f, pt in enumerate(rank) if pt is None]
    for idx in _KNIGHT_PAIRS[n]:
        rank[free[idx]] = PieceType.KNIGHT

    # Rook, king, rook on what remains, left to right.
    free = [f for f, pt in enumerate(rank) if pt is None]
    for f, pt in zip(free, (PieceType.ROOK, PieceType.KING, PieceType.ROOK)):
        rank[f] = pt

    return tuple(pt for pt in rank if pt is not None)


class Board:
    """Mutable 64-square board with incremental piece indexes."""

    __slots__ = ("_squares", "_piece_bitboards", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * _SQUARE_COUNT
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None] * _COLOR_COUNT

    @staticmethod
    def _piece_type_index(piece_type: PieceType) -> int:
        return int(piece_type) - 1

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color_idx = int(old_piece.color)
            old_piece_idx = self._piece_type_index(old_piece.piece_type)
            self._piece_bitboards[old_color_idx][old_piece_idx] &= ~mask
            if (
                old_piece.piece_type == PieceType.KING
                and self._king_squares[old_color_idx] == sq
            ):
                self._king_squares[old_color_idx] = None

        self._squares[sq] = piece

        if piece is None:
            return

        color_idx = int(piece.color)
        piece_idx = self._piece_type_index(piece.piece_type)
        self._piece_bitboards[color_idx][piece_idx] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_squares[color_idx] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        bitboard = self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]
        return self._squares_from_bitboard(bitboard)

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Factory ------------------------------------------------------------

    @classmethod
    def from_back_rank(cls, back_rank: tuple[PieceType, ...]) -> Board:
        """Full pawn ranks plus *back_rank* mirrored for both sides."""
        b = cls()
        for f in range(BOARD_WIDTH):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, BOARD_HEIGHT - 2)] = Piece(Color.BLACK, PieceType.PAWN)

        for f, pt in enumerate(back_rank):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, BOARD_HEIGHT - 1)] = Piece(Color.BLACK, pt)
        return b

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        return cls.from_back_rank(_STANDARD_BACK_RANK)

    @classmethod
    def chess960(cls, number: int) -> Board:
        """Chess960 starting position with Scharnagl *number*."""
        return cls.from_back_rank(chess960_back_rank(number))

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

