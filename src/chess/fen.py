"""
Validation of FEN strings, the format used to persist a board.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.

<board position string><active color><castling rights><en passant square><# half move clock><number turns played>

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
"""

from itertools import combinations
from typing import NamedTuple

from src.chess.castling import CASTLING_ORDER
from src.chess.pieces import FEN_TO_PIECE
from src.chess.square import BOARD_DIMENSIONS, FILE_NAMES, RANK_NAMES
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NUM_FEN_FIELDS = 6

# "-" or any non-empty selection of "KQkq", always written in that order
VALID_CASTLING_ENCODINGS: frozenset[str] = frozenset(
    ["-"]
    + [
        "".join(direction.value for direction in selection)
        for size in range(1, len(CASTLING_ORDER) + 1)
        for selection in combinations(CASTLING_ORDER, size)
    ]
)


class FENFields(NamedTuple):
    position: str
    active_color: str
    castling: str
    en_passant: str
    half_move_clock: int
    full_move_number: int


def split_fen(fen: str) -> FENFields:
    """Validate and cut a FEN string into its six fields."""
    if not is_valid_fen(fen):
        raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")
    position, color, castling, en_passant, half_moves, full_moves = fen.split(" ")
    return FENFields(
        position, color, castling, en_passant, int(half_moves), int(full_moves)
    )


def is_valid_fen(fen: str) -> bool:
    """All six fields present (separated by single spaces), and each of them well-formed."""
    fields = fen.split(" ")
    if len(fields) != NUM_FEN_FIELDS:
        return False

    position, color, castling, en_passant, half_moves, full_moves = fields
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_moves)
        and is_valid_move_counter(full_moves)
    )


def is_valid_position(position: str) -> bool:
    """The piece placement field: one entry per rank, separated by '/'."""
    ranks = position.split("/")
    return len(ranks) == BOARD_DIMENSIONS[1] and all(
        _rank_width(rank) == BOARD_DIMENSIONS[0] for rank in ranks
    )


def _rank_width(rank_fen: str) -> int | None:
    """Number of squares described by a single rank. None for characters that are neither a piece nor a digit 1-8."""
    width = 0
    for character in rank_fen:
        if character in RANK_NAMES:
            width += int(character)
        elif character.lower() in FEN_TO_PIECE:
            width += 1
        else:
            return None
    return width


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    return en_passant == "-" or is_valid_square(en_passant)


def is_valid_square(square: str) -> bool:
    return len(square) == 2 and square[0] in FILE_NAMES and square[1] in RANK_NAMES


def is_valid_move_counter(counter: str) -> bool:
    """Non-negative integer, plain ASCII digits only ('-1', '1.5' and '٣' are rejected)."""
    return counter.isascii() and counter.isdigit()
