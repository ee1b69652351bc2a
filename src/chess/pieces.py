"""Defines the chess pieces: a color + a piece kind"""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceKind

FEN_TO_PIECE: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

PIECE_TO_FEN: dict[PieceKind, str] = {value: key for key, value in FEN_TO_PIECE.items()}


@dataclass(frozen=True)
class Piece:
    color: Color
    kind: PieceKind

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise InvalidFENError(f"Unknown piece character: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(color, FEN_TO_PIECE[character.lower()])

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.kind].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.kind]
        )

    def promoted(self, kind: PieceKind = PieceKind.QUEEN) -> Self:
        """Pieces are immutable values: promotion hands back a new piece of the same color."""
        return type(self)(self.color, kind)


# Pawns of each color move in one direction only. Row 0 is black's back rank, so white pawns move "up" (row decreases).
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_HOME_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}
