"""
Type definitions used across layers
"""

from enum import StrEnum


class SessionStatus(StrEnum):
    WAITING = "waiting"
    ACTIVE = "active"
    OVER = "over"


# Status can only move forward through this order.
STATUS_ORDER: tuple[SessionStatus, ...] = (
    SessionStatus.WAITING,
    SessionStatus.ACTIVE,
    SessionStatus.OVER,
)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceKind(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
