"""The Board: the grid of pieces plus the metadata that is written to a FEN string (side to move, castling, counters)."""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
    directions_for,
)
from src.chess.fen import STARTING_FEN, split_fen
from src.chess.pieces import (
    PAWN_DIRECTION,
    PROMOTION_ROW,
    Piece,
)
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceKind

Grid = list[list[Optional[Piece]]]


def empty_grid() -> Grid:
    num_files, num_ranks = BOARD_DIMENSIONS
    return [[None] * num_files for _ in range(num_ranks)]


def all_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CastlingDirection}


@dataclass
class Board:
    grid: Grid = field(default_factory=empty_grid)
    side_to_move: Color = Color.WHITE
    castling_rights: dict[CastlingDirection, bool] = field(
        default_factory=all_castling_rights
    )
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    full_move_number: int = 1

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Construct a board using a full FEN string.

        The first field denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0 of the grid), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        fields = split_fen(fen)

        grid = empty_grid()
        # FEN string is read from top rank (8th) to bottom rank (1st), which is exactly the row order of the grid
        for row, fen_one_rank in enumerate(fields.position.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)

        en_passant_square = (
            Square.from_algebraic(fields.en_passant)
            if fields.en_passant != "-"
            else None
        )
        return cls(
            grid=grid,
            side_to_move=Color.WHITE if fields.active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(fields.castling),
            en_passant_square=en_passant_square,
            half_move_clock=fields.half_move_clock,
            full_move_number=fields.full_move_number,
        )

    def to_fen(self) -> str:
        position = "/".join(self._row_to_fen(row) for row in self.grid)
        active_color = "w" if self.side_to_move == Color.WHITE else "b"
        en_passant = (
            self.en_passant_square.to_algebraic() if self.en_passant_square else "-"
        )
        return (
            f"{position} {active_color} {castling_to_fen(self.castling_rights)} "
            f"{en_passant} {self.half_move_clock} {self.full_move_number}"
        )

    def _row_to_fen(self, row: list[Optional[Piece]]) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def locate(self, piece: Piece) -> list[Square]:
        return [
            Square(row, col)
            for row, pieces in enumerate(self.grid)
            for col, found in enumerate(pieces)
            if found == piece
        ]

    def squares_of(self, color: Color) -> list[Square]:
        return [
            Square(row, col)
            for row, pieces in enumerate(self.grid)
            for col, found in enumerate(pieces)
            if found is not None and found.color == color
        ]

    def has_one_king_each(self) -> bool:
        return all(
            len(self.locate(Piece(color, PieceKind.KING))) == 1 for color in Color
        )

    def clone(self) -> Self:
        """Deep copy: nothing mutable is shared with the original."""
        return deepcopy(self)

    # --- UPDATES ---
    def place(self, square: Square, piece: Optional[Piece]) -> None:
        self.grid[square.row][square.col] = piece

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Relocate whatever stands on from_square. Whatever stood on to_square is gone."""
        self.place(to_square, self.piece(from_square))
        self.place(from_square, None)

    def apply_move(self, from_square: Square, to_square: Square) -> Self:
        """
        Advance the state by one half-move and return the new board (self is left untouched).
        -----

        1. relocate the piece (capturing whatever stood on the target square)
        2. a pawn reaching the last rank is promoted to a queen
        3. castling rights / en passant square / move counters are updated
        4. the other color is to move

        NOTE: no legality checks are done here, see moves.is_legal()
        """
        moving_piece = self.piece(from_square)
        if moving_piece is None:
            raise IllegalMoveError(f"No piece on {from_square.to_algebraic()}.")

        board = self.clone()
        captured_piece = board.piece(to_square)
        board.move_piece(from_square, to_square)

        is_pawn_move = moving_piece.kind == PieceKind.PAWN
        if is_pawn_move and to_square.row == PROMOTION_ROW[moving_piece.color]:
            board.place(to_square, moving_piece.promoted(PieceKind.QUEEN))

        board._revoke_castling_rights(moving_piece, from_square, to_square)

        # the square "behind" a pawn that just advanced two squares
        is_double_push = is_pawn_move and abs(to_square.row - from_square.row) == 2
        board.en_passant_square = (
            from_square.offset(PAWN_DIRECTION[moving_piece.color], 0)
            if is_double_push
            else None
        )

        if is_pawn_move or captured_piece is not None:
            board.half_move_clock = 0
        else:
            board.half_move_clock += 1

        if moving_piece.color == Color.BLACK:
            board.full_move_number += 1

        board.side_to_move = moving_piece.color.opponent
        return board

    def _revoke_castling_rights(
        self, moving_piece: Piece, from_square: Square, to_square: Square
    ) -> None:
        """
        1. If you are moving your king --> revoke both
        2. If you are moving a rook off its starting square --> revoke that direction
        3. If anything lands on a rook's starting square --> that direction is gone as well (the rook got captured)
        """
        if moving_piece.kind == PieceKind.KING:
            for direction in directions_for(moving_piece.color):
                self.castling_rights[direction] = False

        for direction, squares in CASTLING_RULES.items():
            if squares.rook_from in (from_square, to_square):
                self.castling_rights[direction] = False
