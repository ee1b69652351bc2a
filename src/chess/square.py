"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


@dataclass(frozen=True)
class Square:
    """
    Grid coordinate of a square.

    NOTE: row 0 is black's back rank (the 8th rank), row 7 is white's back rank (the 1st rank).
    Columns run from the a-file (0) to the h-file (7).
    """

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' maps to (0, 0), 'h1' to (7, 7)"""
        if not isinstance(sq, str) or len(sq) != 2:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")

        file_char, rank_char = sq[0], sq[1]
        if file_char not in FILE_NAMES or rank_char not in RANK_NAMES:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")

        return cls(row=BOARD_DIMENSIONS[1] - int(rank_char), col=FILE_NAMES.index(file_char))

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.col]}{BOARD_DIMENSIONS[1] - self.row}"

    def offset(self, d_row: int, d_col: int) -> Square:
        """The square reached by stepping (d_row, d_col). Callers stay on the board."""
        return Square(self.row + d_row, self.col + d_col)
