"""Unit tests for src/chess/moves.py"""

import pytest

from src.chess.board import Board
from src.chess.moves import (
    MOVEMENT_RULES,
    Move,
    is_legal,
    legal_destinations,
    legal_moves,
    squares_between,
)
from src.chess.square import Square
from src.core.exceptions import InvalidSquareError
from src.core.shared_types import Color, PieceKind

KINGS_ONLY = "k7/8/8/8/8/8/8/K7 w - - 0 1"


def sq(notation: str) -> Square:
    return Square.from_algebraic(notation)


# -- MOVE CREATION, ENCODING/DECODING UCI NOTATION ---
@pytest.mark.parametrize(
    "uci_move, from_square, to_square",
    [
        ("e2e4", "e2", "e4"),
        ("a1a5", "a1", "a5"),
        ("g3a7", "g3", "a7"),
    ],
)
def test_creating_move_from_uci(uci_move: str, from_square: str, to_square: str) -> None:
    """UCI notation for the move is <from_square><to_square>"""
    move = Move.from_uci(uci_move)
    assert move == Move(sq(from_square), sq(to_square))
    assert move.to_uci() == uci_move


@pytest.mark.parametrize("uci_move", ["e2e", "e2e4q", "", "z2e4"])
def test_invalid_uci(uci_move: str) -> None:
    with pytest.raises(InvalidSquareError):
        Move.from_uci(uci_move)


def test_move_delta() -> None:
    """White moving up the board means a negative row delta."""
    assert Move.from_uci("e2e4").delta == (-2, 0)
    assert Move.from_uci("g8f6").delta == (2, -1)


# --- PATHS ---
@pytest.mark.parametrize(
    "from_square, to_square, expected",
    [
        ("a1", "a4", ["a2", "a3"]),
        ("a4", "a1", ["a3", "a2"]),
        ("c1", "f4", ["d2", "e3"]),
        ("h8", "e8", ["g8", "f8"]),
        ("d4", "d5", []),
    ],
)
def test_squares_between(from_square: str, to_square: str, expected: list[str]) -> None:
    between = squares_between(sq(from_square), sq(to_square))
    assert [square.to_algebraic() for square in between] == expected


def test_squares_between_requires_a_line() -> None:
    with pytest.raises(ValueError):
        squares_between(sq("g1"), sq("f3"))


def test_every_piece_has_a_movement_rule() -> None:
    assert set(MOVEMENT_RULES) == set(PieceKind)


# --- GENERIC CHECKS ---
@pytest.mark.parametrize(
    "from_square, to_square",
    [
        ("z9", "e4"),  # not a square
        ("e2", "e9"),
        ("", ""),
        ("e2", "e2"),  # null move
        ("e4", "e5"),  # nothing on e4
        ("e7", "e5"),  # not your piece
        ("d1", "d2"),  # capturing your own piece
        ("b1", "d2"),
    ],
)
def test_illegal_regardless_of_piece(from_square: str, to_square: str) -> None:
    assert not is_legal(from_square, to_square, Board.starting_position(), Color.WHITE)


def test_legality_depends_on_color_only() -> None:
    """The player's color decides which pieces they may move, not whose turn the board says it is."""
    board = Board.starting_position()
    assert is_legal("e7", "e5", board, Color.BLACK)
    assert not is_legal("e2", "e4", board, Color.BLACK)


# --- PAWNS ---
@pytest.mark.parametrize(
    "fen, from_square, to_square, color, expected",
    [
        # pushes from the home rank
        (None, "e2", "e3", Color.WHITE, True),
        (None, "e2", "e4", Color.WHITE, True),
        (None, "e2", "e5", Color.WHITE, False),
        (None, "e7", "e5", Color.BLACK, True),
        (None, "e7", "e6", Color.BLACK, True),
        # diagonal onto an empty square
        (None, "e2", "d3", Color.WHITE, False),
        # blocked pushes
        ("k7/8/8/8/8/4n3/4P3/K7 w - - 0 1", "e2", "e3", Color.WHITE, False),
        ("k7/8/8/8/8/4n3/4P3/K7 w - - 0 1", "e2", "e4", Color.WHITE, False),
        ("k7/8/8/8/4n3/8/4P3/K7 w - - 0 1", "e2", "e4", Color.WHITE, False),
        ("k7/8/8/8/4n3/8/4P3/K7 w - - 0 1", "e2", "e3", Color.WHITE, True),
        # double step only from the home rank
        ("k7/8/8/8/8/4P3/8/K7 w - - 0 1", "e3", "e5", Color.WHITE, False),
        ("k7/8/8/8/8/4p3/8/K7 b - - 0 1", "e3", "e1", Color.BLACK, False),
        # backwards / sideways
        ("k7/8/8/8/4P3/8/8/K7 w - - 0 1", "e4", "e3", Color.WHITE, False),
        ("k7/8/8/8/4P3/8/8/K7 w - - 0 1", "e4", "f4", Color.WHITE, False),
        # captures
        ("k7/8/8/3p4/4P3/8/8/K7 w - - 0 1", "e4", "d5", Color.WHITE, True),
        ("k7/8/8/3p4/4P3/8/8/K7 b - - 0 1", "d5", "e4", Color.BLACK, True),
        ("k7/8/8/3P4/4P3/8/8/K7 w - - 0 1", "e4", "d5", Color.WHITE, False),
        ("k7/8/8/4p3/4P3/8/8/K7 w - - 0 1", "e4", "e5", Color.WHITE, False),
        ("k7/8/8/3p4/4P3/8/8/K7 b - - 0 1", "d5", "c4", Color.BLACK, False),
        # no en passant
        ("k7/8/8/3pP3/8/8/8/K7 w - d6 0 2", "e5", "d6", Color.WHITE, False),
        # promotion square is a regular destination
        ("k7/4P3/8/8/8/8/8/K7 w - - 0 1", "e7", "e8", Color.WHITE, True),
    ],
)
def test_pawn_moves(
    fen: str | None, from_square: str, to_square: str, color: Color, expected: bool
) -> None:
    board = Board.from_fen(fen) if fen else Board.starting_position()
    assert is_legal(from_square, to_square, board, color) is expected


# --- KNIGHTS ---
@pytest.mark.parametrize(
    "from_square, to_square, expected",
    [
        ("g1", "f3", True),
        ("g1", "h3", True),
        ("b1", "c3", True),  # jumps over the pawns
        ("b1", "a3", True),
        ("g1", "g3", False),
        ("g1", "e2", False),  # own pawn
        ("b1", "d3", False),
    ],
)
def test_knight_moves(from_square: str, to_square: str, expected: bool) -> None:
    assert is_legal(from_square, to_square, Board.starting_position(), Color.WHITE) is expected


# --- SLIDING PIECES ---
@pytest.mark.parametrize(
    "fen, from_square, to_square, expected",
    [
        # bishop on c1
        ("k7/8/8/8/8/8/8/K1B5 w - - 0 1", "c1", "h6", True),
        ("k7/8/8/8/8/8/8/K1B5 w - - 0 1", "c1", "a3", True),
        ("k7/8/8/8/8/8/8/K1B5 w - - 0 1", "c1", "c5", False),
        ("k7/8/8/8/8/4p3/8/K1B5 w - - 0 1", "c1", "e3", True),
        ("k7/8/8/8/8/4p3/8/K1B5 w - - 0 1", "c1", "h6", False),
        (None, "c1", "e3", False),
        # rook on a1, king on e1
        ("k7/8/8/8/8/8/8/R3K3 w - - 0 1", "a1", "a7", True),
        ("k7/8/8/8/8/8/8/R3K3 w - - 0 1", "a1", "d1", True),
        ("k7/8/8/8/8/8/8/R3K3 w - - 0 1", "a1", "e1", False),
        ("k7/8/8/8/8/8/8/R3K3 w - - 0 1", "a1", "f1", False),
        ("k7/8/8/8/8/8/8/R3K3 w - - 0 1", "a1", "b2", False),
        (None, "a1", "a3", False),
        # queen on d1, king on a1
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "d8", True),
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "h5", True),
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "a4", True),
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "h1", True),
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "e3", False),
        ("k7/8/8/8/8/8/8/K2Q4 w - - 0 1", "d1", "a1", False),
        ("k7/8/8/8/8/8/3p4/K2Q4 w - - 0 1", "d1", "d8", False),
        (None, "d1", "d3", False),
    ],
)
def test_sliding_piece_moves(
    fen: str | None, from_square: str, to_square: str, expected: bool
) -> None:
    board = Board.from_fen(fen) if fen else Board.starting_position()
    assert is_legal(from_square, to_square, board, Color.WHITE) is expected


# --- KINGS ---
@pytest.mark.parametrize(
    "to_square, expected",
    [
        ("e2", True),
        ("d2", True),
        ("f1", True),
        ("d1", True),
        ("e3", False),
        ("g1", False),  # no castling
        ("c1", False),
    ],
)
def test_king_moves(to_square: str, expected: bool) -> None:
    board = Board.from_fen("k7/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert is_legal("e1", to_square, board, Color.WHITE) is expected


def test_king_may_step_into_check() -> None:
    """Only geometry is considered: check is never looked at."""
    board = Board.from_fen("k7/8/8/8/8/8/3r4/4K3 w - - 0 1")
    assert is_legal("e1", "d1", board, Color.WHITE)
    assert is_legal("e1", "d2", board, Color.WHITE)


# --- REVERSED MOVES ---
@pytest.mark.parametrize(
    "from_square, to_square, reverse_is_legal",
    [
        ("e2", "e4", False),  # pawns never move back
        ("g1", "f3", True),
    ],
)
def test_reverse_move_is_checked_on_its_own(
    from_square: str, to_square: str, reverse_is_legal: bool
) -> None:
    board = Board.starting_position()
    assert is_legal(from_square, to_square, board, Color.WHITE)
    after = board.apply_move(sq(from_square), sq(to_square))
    assert is_legal(to_square, from_square, after, Color.WHITE) is reverse_is_legal


# --- LISTING MOVES ---
def test_legal_destinations() -> None:
    board = Board.starting_position()
    destinations = legal_destinations(sq("g1"), board, Color.WHITE)
    assert sorted(square.to_algebraic() for square in destinations) == ["f3", "h3"]
    assert legal_destinations(sq("c1"), board, Color.WHITE) == []
    # not your piece
    assert legal_destinations(sq("g8"), board, Color.WHITE) == []


def test_legal_moves_from_starting_position() -> None:
    """16 pawn moves + 4 knight moves"""
    board = Board.starting_position()
    for color in Color:
        moves = legal_moves(board, color)
        assert len(moves) == 20
        assert all(is_legal(m.from_square.to_algebraic(), m.to_square.to_algebraic(), board, color) for m in moves)

    uci_moves = {move.to_uci() for move in legal_moves(board, Color.WHITE)}
    assert {"e2e4", "e2e3", "b1c3", "g1h3"} <= uci_moves


def test_legal_moves_of_lone_king_in_corner() -> None:
    moves = legal_moves(Board.from_fen(KINGS_ONLY), Color.WHITE)
    assert sorted(move.to_uci() for move in moves) == ["a1a2", "a1b1", "a1b2"]
