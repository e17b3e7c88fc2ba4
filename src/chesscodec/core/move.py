"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chesscodec.core.enums import CastlingSide, PieceType
from chesscodec.core.piece import piece_letter
from chesscodec.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Only the castling wing and the promotion piece are carried explicitly;
    en passant and double pawn pushes follow from the position the move is
    played in. For castling, ``to_sq`` is the king's destination.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None
    castling: CastlingSide = CastlingSide.NONE

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Long algebraic form, e.g. ``e7e8q``."""
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += piece_letter(self.promotion).lower()
        return base

    @property
    def is_castling(self) -> bool:
        return self.castling != CastlingSide.NONE
