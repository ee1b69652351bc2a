"""Requests and Response models"""

import random
import string
from datetime import datetime
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import GameError, InvalidRequestError
from src.core.models import MoveModel, PlayerModel, SessionModel
from src.core.shared_types import Color, SessionStatus

ANONYMOUS_PREFIX = "anon_"


def anonymous_player_id() -> str:
    """Callers that do not identify themselves still get a (throwaway) identity, ex. 'anon_k3x9qa'."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{ANONYMOUS_PREFIX}{suffix}"


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    player_id: str = Field(default_factory=anonymous_player_id)
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class JoinSessionRequest(BaseModel):
    # raw, as typed by the user. Normalized by the service.
    code: str = ""
    player_id: str = Field(default_factory=anonymous_player_id)


class GetSessionRequest(BaseModel):
    session_id: UUID


class LegalMovesRequest(BaseModel):
    session_id: UUID
    player_id: str


class MoveRequest(BaseModel):
    session_id: UUID
    player_id: str
    from_square: str
    to_square: str

    @field_validator("player_id", "from_square", "to_square")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        """Missing parameters are a bad request. Whether the squares make sense is up to the legality checks."""
        value = value.strip()
        if not value:
            raise InvalidRequestError("Missing required parameters.")
        return value

    @field_validator("from_square", "to_square")
    @classmethod
    def lower_case_square(cls, value: str) -> str:
        return value.lower()


class ResignRequest(BaseModel):
    session_id: UUID
    player_id: str


# --- RESPONSE MODELS ---
class PlayerResponse(BaseModel):
    uid: str
    color: Color
    joined_at: datetime

    @classmethod
    def from_model(cls, player: PlayerModel) -> Self:
        return cls(uid=player.uid, color=Color(player.color), joined_at=player.joined_at)


class MoveResponse(BaseModel):
    from_square: str
    to_square: str
    color: Color
    timestamp: datetime

    @classmethod
    def from_model(cls, move: MoveModel) -> Self:
        return cls(
            from_square=move.from_square,
            to_square=move.to_square,
            color=Color(move.color),
            timestamp=move.timestamp,
        )


class ResultResponse(BaseModel):
    status: SessionStatus
    reason: str
    winner: Optional[Color] = None


class CreateSessionResponse(BaseModel):
    session_id: UUID
    code: str
    player_id: str
    color: Color


class JoinSessionResponse(BaseModel):
    session_id: UUID
    code: str
    color: Color
    players: list[PlayerResponse]
    status: SessionStatus


class SessionResponse(BaseModel):
    """Snapshot of a session, as returned after every change."""

    session_id: UUID
    code: str
    status: SessionStatus
    turn: Color
    fen_state: str
    players: list[PlayerResponse]
    move_history: list[MoveResponse]
    last_move: Optional[MoveResponse] = None
    result: Optional[ResultResponse] = None

    @classmethod
    def from_model(cls, session_id: UUID, model: SessionModel) -> Self:
        moves = [MoveResponse.from_model(move) for move in model.moves]
        result = (
            ResultResponse(
                status=SessionStatus(model.result.status),
                reason=model.result.reason,
                winner=Color(model.result.winner) if model.result.winner else None,
            )
            if model.result
            else None
        )
        return cls(
            session_id=session_id,
            code=model.code,
            status=SessionStatus(model.status),
            turn=Color(model.turn),
            fen_state=model.current_fen,
            players=[PlayerResponse.from_model(p) for p in model.players],
            move_history=moves,
            last_move=moves[-1] if moves else None,
            result=result,
        )


class LegalMovesResponse(BaseModel):
    session_id: UUID
    player_id: str
    color: Color
    legal_moves: list[str]


class ErrorResponse(BaseModel):
    """Every error maps to a stable machine-readable code + an explanation for humans."""

    ok: bool = False
    error: str
    details: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: Exception) -> Self:
        if isinstance(exc, GameError):
            return cls(error=exc.code, details=exc.message)
        return cls(error="server_error", details="Something went wrong on our side.")
