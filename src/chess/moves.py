"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement geometry for each piece type.

This is a conservative filter, not a full rules engine: it only looks at how pieces move and which squares are occupied.
Check, pinned pieces, castling and en passant are never considered (a move leaving your own king in check is accepted).
Every place that needs to validate a move (the move transaction, listing legal moves for a client) goes through is_legal().
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import PAWN_DIRECTION, PAWN_HOME_ROW, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidSquareError
from src.core.shared_types import Color, PieceKind


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def squares_of(self, color: Color) -> list[Square]: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_algebraic(cls, from_square: str, to_square: str) -> Self:
        return cls(Square.from_algebraic(from_square), Square.from_algebraic(to_square))

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface: <from_square><to_square>

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "g1f3": (knight) moves from g1 to f3
        """
        if len(uci) != 4:
            raise InvalidSquareError(f"Cannot interpret {uci!r} as a move.")
        return cls.from_algebraic(uci[:2], uci[2:])

    def to_uci(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"

    @property
    def delta(self) -> Vector:
        return (
            self.to_square.row - self.from_square.row,
            self.to_square.col - self.from_square.col,
        )


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    The squares strictly in between two squares on the same row, column, or diagonal.

    Needed for the sliding pieces: they cannot jump over anything.
    """
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    if not (d_row == 0 or d_col == 0 or abs(d_row) == abs(d_col)):
        raise ValueError(
            f"squares_between requires both squares on a shared line. \n from: {from_square}\n to:{to_square}"
        )

    step_row, step_col = _sign(d_row), _sign(d_col)
    distance = max(abs(d_row), abs(d_col))
    return [
        from_square.offset(step_row * step, step_col * step)
        for step in range(1, distance)
    ]


def is_path_clear(move: Move, board: Board) -> bool:
    return all(
        board.is_empty(square) for square in squares_between(move.from_square, move.to_square)
    )


# --- MOVEMENT RULES ---
def is_legal_pawn_move(move: Move, board: Board, color: Color) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their home rank), if both squares are empty.
    - takes diagonally (one square), only if an opponent's piece is standing there.

    NOTE: En passant is not supported. Promotion is done by Board.apply_move() (always to a queen).
    """
    d_row, d_col = move.delta
    forward = PAWN_DIRECTION[color]
    target_piece = board.piece(move.to_square)

    # Pawn pushes
    if d_col == 0 and target_piece is None:
        if d_row == forward:
            return True
        is_on_home_row = move.from_square.row == PAWN_HOME_ROW[color]
        intermediate_square = move.from_square.offset(forward, 0)
        if d_row == 2 * forward and is_on_home_row and board.is_empty(intermediate_square):
            return True
        return False

    # pawns take diagonally
    if abs(d_col) == 1 and d_row == forward:
        return target_piece is not None and target_piece.color != color
    return False


def is_legal_knight_move(move: Move, board: Board, color: Color) -> bool:
    """Knights jump in an L-shape: |delta_row|, |delta_col| is (1, 2) or (2, 1)"""
    d_row, d_col = move.delta
    return {abs(d_row), abs(d_col)} == {1, 2}


def is_legal_bishop_move(move: Move, board: Board, color: Color) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|, and cannot jump over pieces"""
    d_row, d_col = move.delta
    if abs(d_row) != abs(d_col):
        return False
    return is_path_clear(move, board)


def is_legal_rook_move(move: Move, board: Board, color: Color) -> bool:
    """Rooks move either horizontally or vertically, and cannot jump over pieces"""
    d_row, d_col = move.delta
    if d_row != 0 and d_col != 0:
        return False
    return is_path_clear(move, board)


def is_legal_queen_move(move: Move, board: Board, color: Color) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_rook_move(move, board, color) or is_legal_bishop_move(
        move, board, color
    )


def is_legal_king_move(move: Move, board: Board, color: Color) -> bool:
    """
    The king can move by a single square at the time, in any direction.

    Castling is never legal here.
    """
    d_row, d_col = move.delta
    return max(abs(d_row), abs(d_col)) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveRuleFn = Callable[[Move, Board, Color], bool]
MOVEMENT_RULES: dict[PieceKind, MoveRuleFn] = {
    PieceKind.PAWN: is_legal_pawn_move,
    PieceKind.KNIGHT: is_legal_knight_move,
    PieceKind.BISHOP: is_legal_bishop_move,
    PieceKind.ROOK: is_legal_rook_move,
    PieceKind.QUEEN: is_legal_queen_move,
    PieceKind.KING: is_legal_king_move,
}


# --- LEGALITY ---
def is_legal(from_square: str, to_square: str, board: Board, color: Color) -> bool:
    """
    Decide if the player with the `color` pieces may move from `from_square` to `to_square`.
    ----

    Checked in order, first failure makes the move illegal:
    1. both squares exist and are different
    2. there is a piece on from_square and it is yours
    3. you do not capture your own piece
    4. the piece's movement geometry allows it
    """
    try:
        move = Move.from_algebraic(from_square, to_square)
    except InvalidSquareError:
        return False
    return is_legal_move(move, board, color)


def is_legal_move(move: Move, board: Board, color: Color) -> bool:
    """Same as is_legal(), for an already parsed Move."""
    if move.from_square == move.to_square:
        return False

    moving_piece = board.piece(move.from_square)
    if moving_piece is None or moving_piece.color != color:
        return False

    target_piece = board.piece(move.to_square)
    if target_piece is not None and target_piece.color == color:
        return False

    movement_rule = MOVEMENT_RULES[moving_piece.kind]
    return movement_rule(move, board, color)


def all_squares() -> list[Square]:
    num_files, num_ranks = BOARD_DIMENSIONS
    return [Square(row, col) for row in range(num_ranks) for col in range(num_files)]


def legal_destinations(from_square: Square, board: Board, color: Color) -> list[Square]:
    """Every square the piece on from_square may move to (used by clients to highlight squares)."""
    return [
        to_square
        for to_square in all_squares()
        if is_legal_move(Move(from_square, to_square), board, color)
    ]


def legal_moves(board: Board, color: Color) -> list[Move]:
    """All legal moves for the player with the `color` pieces."""
    return [
        Move(from_square, to_square)
        for from_square in board.squares_of(color)
        for to_square in legal_destinations(from_square, board, color)
    ]
