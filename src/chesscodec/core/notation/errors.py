"""Notation-layer exceptions."""

from __future__ import annotations

from enum import Enum


class NotationErrorKind(Enum):
    """Why a move string could not be decoded."""

    STRUCTURE = "structure"  # too short, malformed token, premature end
    MISMATCH = "mismatch"  # disagrees with the board or no legal candidate
    AMBIGUOUS = "ambiguous"  # several legal candidates


class NotationError(ValueError):
    """A move string does not denote exactly one move in the position."""

    def __init__(self, message: str, kind: NotationErrorKind) -> None:
        super().__init__(message)
        self.kind = kind
