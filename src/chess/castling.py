"""Castling rights bookkeeping. Castling itself is never a legal move here, but the rights are part of the board metadata."""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.chess.square import Square
from src.core.shared_types import Color


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


# Order in which the rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Where the king and the rook of a castling direction start from.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    rook_from: Square

    @classmethod
    def from_algebraic(cls, k_from: str, r_from: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(Square.from_algebraic(k_from), Square.from_algebraic(r_from))


CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic("e1", "h1"),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic("e1", "a1"),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic("e8", "h8"),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic("e8", "a8"),
}


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def directions_for(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]
