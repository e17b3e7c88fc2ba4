"""Notation dispatch: pick SAN or LAN when writing, try both when reading."""

from __future__ import annotations

import logging
from enum import Enum

from chesscodec.core.move import Move
from chesscodec.core.notation.errors import NotationError
from chesscodec.core.notation.lan import lan_to_move, move_to_lan
from chesscodec.core.notation.san import move_to_san, san_to_move
from chesscodec.core.position import Position

_LOGGER = logging.getLogger(__name__)


class MoveNotation(Enum):
    """Requested output notation."""

    SAN = "san"
    LAN = "lan"


def move_to_string(
    position: Position, move: Move, notation: MoveNotation = MoveNotation.SAN
) -> str:
    """Serialise *move* in the requested *notation*.

    LAN cannot tell a Chess960 castling move from a plain king move, so
    castling in a Chess960 position is always written in SAN.
    """
    if notation == MoveNotation.SAN:
        return move_to_san(position, move)
    if move.is_castling and position.chess960:
        _LOGGER.debug("Writing Chess960 castling %s as SAN", move)
        return move_to_san(position, move)
    return move_to_lan(move)


def string_to_move(position: Position, text: str) -> Move:
    """Read *text* as SAN, falling back to LAN.

    Raises:
        NotationError: neither notation yields a move.
    """
    text = text.strip()
    try:
        return san_to_move(position, text)
    except NotationError as san_exc:
        try:
            return lan_to_move(position, text)
        except NotationError as lan_exc:
            raise NotationError(
                f"Unrecognised move {text!r}: {san_exc}; {lan_exc}", san_exc.kind
            ) from san_exc


def parse_move(position: Position, text: str) -> Move | None:
    """Like :func:`string_to_move`, but ``None`` instead of an exception."""
    try:
        return string_to_move(position, text)
    except NotationError as exc:
        _LOGGER.debug("Rejected move string %r: %s", text, exc)
        return None
