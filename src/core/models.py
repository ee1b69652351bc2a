"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Type aliases to make SessionModel easier to read
PieceColor = str
PlayerId = str


@dataclass
class PlayerModel:
    uid: PlayerId
    color: PieceColor
    joined_at: datetime


@dataclass
class MoveModel:
    """One accepted half-move. Never changed after it got appended."""

    from_square: str
    to_square: str
    color: PieceColor
    timestamp: datetime


@dataclass
class ResultModel:
    status: str
    reason: str
    winner: Optional[PieceColor] = None


@dataclass
class SessionModel:
    """Transport-safe representation of a shared chess session used between API, Service, DB, and domain layers."""

    code: str
    created_at: datetime
    current_fen: str
    turn: PieceColor
    status: str
    players: list[PlayerModel] = field(default_factory=list)
    moves: list[MoveModel] = field(default_factory=list)
    result: Optional[ResultModel] = None
