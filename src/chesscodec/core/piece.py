"""Piece value object and the piece-letter lexicon."""

from __future__ import annotations

from dataclasses import dataclass

from chesscodec.core.enums import Color, PieceType

# Notation letters, always uppercase (SAN style).
_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_LETTERS_REV: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}


def piece_letter(piece_type: PieceType) -> str:
    """Uppercase notation letter, e.g. KNIGHT → 'N'."""
    return _LETTERS[piece_type]


def piece_type_from_letter(letter: str) -> PieceType | None:
    """Inverse of :func:`piece_letter`; case-sensitive, ``None`` if unknown."""
    return _LETTERS_REV.get(letter)


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        ptype = _LETTERS_REV.get(char.upper())
        if ptype is None or len(char) != 1:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, ptype)
