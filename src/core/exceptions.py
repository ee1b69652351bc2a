"""
Custom exceptions.

Every business-rule failure carries a stable, machine-readable `code` next to the human-readable message,
so the layer on top (HTTP handlers, CLI, ...) can map them without parsing strings.
"""


class GameError(Exception):
    """Top-level exception for anything the chess backend raises on purpose."""

    code: str = "game_error"
    default_message: str = "Something went wrong with the game."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --- Request / input errors ---
class InvalidRequestError(GameError):
    code = "invalid_request"
    default_message = "The request could not be interpreted."


class InvalidCodeError(GameError):
    code = "invalid_code"
    default_message = "Missing game code."


class InvalidSquareError(GameError):
    code = "invalid_square"
    default_message = "Not a valid square name."


class InvalidFENError(GameError):
    code = "invalid_fen"
    default_message = "Cannot interpret the position."


# --- Session lifecycle errors ---
class SessionNotFoundError(GameError):
    code = "not_found"
    default_message = "Game not found."


class GameFullError(GameError):
    code = "game_full"
    default_message = "This game already has two players."


class CodeExhaustedError(GameError):
    code = "code_exhausted"
    default_message = "Could not generate unique game code."


# --- Move errors ---
class ForbiddenError(GameError):
    code = "forbidden"
    default_message = "You are not permitted to move in this game."


class GameOverError(GameError):
    code = "game_over"
    default_message = "Game is over."


class NotYourTurnError(GameError):
    code = "not_your_turn"
    default_message = "It is not your turn."


class IllegalMoveError(GameError):
    code = "illegal_move"
    default_message = "Move is not legal."


class GameStateError(GameError):
    """Stored data that breaks one of the session invariants (ex. a status going backwards)."""

    code = "invalid_state"
    default_message = "The game is in an inconsistent state."


# --- Infrastructure ---
class RepositoryError(GameError):
    code = "server_error"
    default_message = "Storage failure."
