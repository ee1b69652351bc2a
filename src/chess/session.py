"""
The GameSession class is the entrypoint into the domain layer for the service layer.
It owns the rules of a shared session: who plays which color, whose turn it is, which moves get accepted, and when the session is over.

The service layer always runs these methods inside a repository transaction: load -> GameSession.from_model -> mutate -> to_model -> write.
Any exception raised here aborts the transaction, so a session is never partially updated.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move, is_legal, legal_moves
from src.core.exceptions import (
    ForbiddenError,
    GameFullError,
    GameOverError,
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    NotYourTurnError,
)
from src.core.models import MoveModel, PlayerModel, ResultModel, SessionModel
from src.core.shared_types import STATUS_ORDER, Color, SessionStatus

MAX_PLAYERS = 2
# The seat of a player decides the color: the creator (seat 0) is always white.
COLOR_BY_SEAT: tuple[Color, ...] = (Color.WHITE, Color.BLACK)
RESIGN_REASON = "resign"


@dataclass
class Player:
    uid: str
    color: Color
    joined_at: datetime


@dataclass(frozen=True)
class MoveRecord:
    move: Move
    color: Color
    timestamp: datetime


@dataclass
class Result:
    status: SessionStatus
    reason: str
    winner: Optional[Color] = None


@dataclass
class GameSession:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    code: str
    created_at: datetime
    board: Board
    turn: Color
    status: SessionStatus
    players: list[Player] = field(default_factory=list)
    moves: list[MoveRecord] = field(default_factory=list)
    result: Optional[Result] = None

    @classmethod
    def new_session(
        cls,
        code: str,
        creator: str,
        now: datetime,
        starting_fen: Optional[str] = None,
    ) -> Self:
        """A session waiting for its second player. The creator plays white."""
        board = Board.from_fen(starting_fen) if starting_fen else Board.starting_position()
        if not board.has_one_king_each():
            raise InvalidFENError("A game starts with exactly one king of each color.")

        return cls(
            code=code,
            created_at=now,
            board=board,
            turn=board.side_to_move,
            status=SessionStatus.WAITING,
            players=[Player(uid=creator, color=COLOR_BY_SEAT[0], joined_at=now)],
        )

    @classmethod
    def from_model(cls, model: SessionModel) -> Self:
        """Define how to construct a GameSession from the information the Service layer actually has"""
        if model.status not in {status.value for status in SessionStatus}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(SessionStatus)}"
            )

        result = (
            Result(
                status=SessionStatus(model.result.status),
                reason=model.result.reason,
                winner=Color(model.result.winner) if model.result.winner else None,
            )
            if model.result
            else None
        )
        return cls(
            code=model.code,
            created_at=model.created_at,
            board=Board.from_fen(model.current_fen),
            turn=Color(model.turn),
            status=SessionStatus(model.status),
            players=[
                Player(uid=p.uid, color=Color(p.color), joined_at=p.joined_at)
                for p in model.players
            ],
            moves=[
                MoveRecord(
                    move=Move.from_algebraic(m.from_square, m.to_square),
                    color=Color(m.color),
                    timestamp=m.timestamp,
                )
                for m in model.moves
            ],
            result=result,
        )

    def to_model(self) -> SessionModel:
        """Encode back into a format the Service layer uses"""
        return SessionModel(
            code=self.code,
            created_at=self.created_at,
            current_fen=self.board.to_fen(),
            turn=str(self.turn),
            status=str(self.status),
            players=[
                PlayerModel(uid=p.uid, color=str(p.color), joined_at=p.joined_at)
                for p in self.players
            ],
            moves=[
                MoveModel(
                    from_square=record.move.from_square.to_algebraic(),
                    to_square=record.move.to_square.to_algebraic(),
                    color=str(record.color),
                    timestamp=record.timestamp,
                )
                for record in self.moves
            ],
            result=(
                ResultModel(
                    status=str(self.result.status),
                    reason=self.result.reason,
                    winner=str(self.result.winner) if self.result.winner else None,
                )
                if self.result
                else None
            ),
        )

    @property
    def is_over(self) -> bool:
        return self.status == SessionStatus.OVER or self.result is not None

    def register_player(self, uid: str, now: datetime) -> Color:
        """
        A player (re)joins the session.
        ----

        * Already seated? Nothing changes, you get your color back (reconnecting).
        * Game over? GameOverError.
        * Two players seated already? GameFullError.
        * Otherwise you take the next seat (black) and the game starts once both seats are taken.
        """
        seated = self._find_player(uid)
        if seated is not None:
            return seated.color

        # newcomers cannot take a seat in a finished game
        self._assert_not_over()
        if len(self.players) >= MAX_PLAYERS:
            raise GameFullError()

        color = COLOR_BY_SEAT[len(self.players)]
        self.players.append(Player(uid=uid, color=color, joined_at=now))
        if len(self.players) == MAX_PLAYERS:
            self._change_status(SessionStatus.ACTIVE)
        return color

    def make_move(
        self, uid: str, from_square: str, to_square: str, now: datetime
    ) -> MoveRecord:
        """
        Attempt to make a move
        -----

        1. you must be one of the players
        2. the game must not be over
        3. it must be your turn (your color follows from your seat)
        4. the move must pass the legality checks
        5. record the move, advance the board (pawns on the last rank become queens), hand the turn over
        """
        color = self.player_color(uid)
        self._assert_not_over()
        self._assert_your_turn(color)

        if not is_legal(from_square, to_square, self.board, color):
            raise IllegalMoveError(f"Move not allowed: {from_square}{to_square}")

        move = Move.from_algebraic(from_square, to_square)
        record = MoveRecord(move=move, color=color, timestamp=now)
        self.moves.append(record)
        self.board = self.board.apply_move(move.from_square, move.to_square)
        self.turn = color.opponent
        return record

    def legal_moves(self, uid: str) -> list[str]:
        """The moves the player could submit right now (UCI notation)."""
        color = self.player_color(uid)
        self._assert_not_over()
        self._assert_your_turn(color)
        return [move.to_uci() for move in legal_moves(self.board, color)]

    def resign(self, uid: str) -> Result:
        """The player gives up. The opponent (if there is one) wins."""
        color = self.player_color(uid)
        self._assert_not_over()

        opponent_seated = any(p.color == color.opponent for p in self.players)
        self.result = Result(
            status=SessionStatus.OVER,
            reason=RESIGN_REASON,
            winner=color.opponent if opponent_seated else None,
        )
        self._change_status(SessionStatus.OVER)
        return self.result

    def player_color(self, uid: str) -> Color:
        """Color of a seated player. Anybody else is not allowed to act on this session."""
        for seat, player in enumerate(self.players):
            if player.uid == uid:
                return COLOR_BY_SEAT[seat]
        raise ForbiddenError(f"{uid!r} is not a player in this game.")

    # -- PRIVATE HELPERS ---
    def _find_player(self, uid: str) -> Optional[Player]:
        return next((p for p in self.players if p.uid == uid), None)

    def _assert_not_over(self) -> None:
        if self.is_over:
            raise GameOverError()

    def _assert_your_turn(self, color: Color) -> None:
        if self.turn != color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.turn} to make a move first."
            )

    def _change_status(self, new_status: SessionStatus) -> None:
        """Status only ever moves forward: waiting -> active -> over."""
        if STATUS_ORDER.index(new_status) < STATUS_ORDER.index(self.status):
            raise GameStateError(
                f"Cannot change status from {self.status} back to {new_status}."
            )
        self.status = new_status
