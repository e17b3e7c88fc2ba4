"""FEN parsing and serialization.

Castling accepts the classic ``KQkq`` letters, X-FEN (the same letters meaning
the outermost rook on that wing in Chess960) and Shredder-FEN rook files
(``HAha``). Chess960 positions are written back with rook files.
"""

from __future__ import annotations

from chesscodec.core.board import Board
from chesscodec.core.enums import CastlingRights, CastlingSide, Color, PieceType
from chesscodec.core.piece import Piece
from chesscodec.core.position import Position
from chesscodec.core.types import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    Square,
    file_letter,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_ORDER: tuple[tuple[Color, CastlingSide], ...] = (
    (Color.WHITE, CastlingSide.KINGSIDE),
    (Color.WHITE, CastlingSide.QUEENSIDE),
    (Color.BLACK, CastlingSide.KINGSIDE),
    (Color.BLACK, CastlingSide.QUEENSIDE),
)
_CLASSIC_CASTLING: dict[str, CastlingSide] = {
    "k": CastlingSide.KINGSIDE,
    "q": CastlingSide.QUEENSIDE,
}


def position_from_fen(fen: str, chess960: bool = False) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Shredder-FEN castling letters switch *chess960* on implicitly.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != BOARD_HEIGHT:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = BOARD_HEIGHT - 1 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= BOARD_WIDTH):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= BOARD_WIDTH:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > BOARD_WIDTH:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != BOARD_WIDTH:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling, rook_files, shredder = _parse_castling(board, castling_part, chess960)
    chess960 = chess960 or shredder

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        ep_rank = rank_of(ep)
        if ep_rank not in (2, 5):
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}")
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if ep_rank != expected_ep_rank:
            raise ValueError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks (optional)
    if len(parts) > 4:
        halfmove = int(parts[4])
        if halfmove < 0:
            raise ValueError(f"Invalid FEN halfmove clock: {parts[4]!r}")
    else:
        halfmove = 0

    if len(parts) > 5:
        fullmove = int(parts[5])
        if fullmove < 1:
            raise ValueError(f"Invalid FEN fullmove number: {parts[5]!r}")
    else:
        fullmove = 1

    return Position(
        board,
        side,
        castling,
        ep,
        halfmove,
        fullmove,
        chess960=chess960,
        rook_files=rook_files,
    )


def _parse_castling(
    board: Board, field: str, chess960: bool
) -> tuple[CastlingRights, dict[CastlingSide, int], bool]:
    """Castling rights, rook file per wing, and whether rook files were spelled out."""
    castling = CastlingRights.NONE
    rook_files: dict[CastlingSide, int] = {}
    shredder = False
    if field == "-":
        return castling, rook_files, shredder

    seen: set[str] = set()
    for ch in field:
        if ch in seen:
            raise ValueError(f"Invalid FEN castling field: {field!r}")
        seen.add(ch)

        color = Color.WHITE if ch.isupper() else Color.BLACK
        lower = ch.lower()
        if lower in _CLASSIC_CASTLING:
            side = _CLASSIC_CASTLING[lower]
            rook_file = _outermost_rook_file(board, color, side) if chess960 else None
            if rook_file is None:
                rook_file = 7 if side == CastlingSide.KINGSIDE else 0
        elif "a" <= lower <= file_letter(BOARD_WIDTH - 1):
            shredder = True
            rook_file = ord(lower) - ord("a")
            side = _wing_of_rook(board, color, rook_file, field)
        else:
            raise ValueError(f"Invalid FEN castling field: {field!r}")

        if rook_files.setdefault(side, rook_file) != rook_file:
            raise ValueError(f"Invalid FEN castling field (rook files differ): {field!r}")
        castling |= CastlingRights.of(color, side)

    return castling, rook_files, shredder


def _outermost_rook_file(board: Board, color: Color, side: CastlingSide) -> int | None:
    try:
        king_file = file_of(board.king_square(color))
    except ValueError:
        return None
    files = sorted(
        file_of(sq)
        for sq in board.pieces(color, PieceType.ROOK)
        if rank_of(sq) == color.back_rank
    )
    if side == CastlingSide.KINGSIDE:
        outer = [f for f in files if f > king_file]
        return outer[-1] if outer else None
    outer = [f for f in files if f < king_file]
    return outer[0] if outer else None


def _wing_of_rook(board: Board, color: Color, rook_file: int, field: str) -> CastlingSide:
    try:
        king_file = file_of(board.king_square(color))
    except ValueError:
        raise ValueError(f"Invalid FEN castling field (no king): {field!r}") from None
    if rook_file == king_file:
        raise ValueError(f"Invalid FEN castling field: {field!r}")
    return CastlingSide.KINGSIDE if rook_file > king_file else CastlingSide.QUEENSIDE


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(BOARD_HEIGHT - 1, -1, -1):
        empty = 0
        row = ""
        for file in range(BOARD_WIDTH):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = ""
    for color, side in _CASTLING_ORDER:
        if not pos.has_castling_right(color, side):
            continue
        if pos.chess960:
            letter = file_letter(pos.rook_files[side])
        else:
            letter = "k" if side == CastlingSide.KINGSIDE else "q"
        castling_str += letter.upper() if color == Color.WHITE else letter
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
