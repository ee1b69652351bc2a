"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from src.api.models import (
    CreateSessionRequest,
    CreateSessionResponse,
    GetSessionRequest,
    JoinSessionRequest,
    JoinSessionResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PlayerResponse,
    ResignRequest,
    SessionResponse,
)
from src.chess.session import GameSession
from src.core.config import Settings
from src.core.exceptions import InvalidCodeError, SessionNotFoundError
from src.core.models import SessionModel
from src.core.shared_types import SessionStatus
from src.db.repository import SessionRepository
from src.services.code_generator import generate_code, normalize_code

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """Orchestration of layers for a shared chess session."""

    def __init__(
        self,
        repository: SessionRepository,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.clock = clock
        self.rng = rng

    # -- API routes logic ---
    def create_session(self, request: CreateSessionRequest) -> CreateSessionResponse:
        """First player requested to create a new session. They play white and get a code to share."""

        # Pick a join code not used by any stored session
        code = generate_code(
            self._code_in_use,
            max_attempts=self.settings.code_max_attempts,
            length=self.settings.code_length,
            rng=self.rng,
        )

        # Create the session (domain) and convert into SessionModel
        session = GameSession.new_session(
            code=code,
            creator=request.player_id,
            now=self.clock(),
            starting_fen=request.starting_fen,
        )

        # Store the SessionModel in the repository
        stored, session_id = self.repo.create_session(session.to_model())
        logger.info("Session %s created with code %s", session_id, stored.code)

        return CreateSessionResponse(
            session_id=session_id,
            code=stored.code,
            player_id=request.player_id,
            color=session.players[0].color,
        )

    def join_session(self, request: JoinSessionRequest) -> JoinSessionResponse:
        """
        Second player requested to join a session using the code.

        Rejoining with the same identity just hands back your color (no changes made).
        """
        code = normalize_code(request.code)
        if not code:
            raise InvalidCodeError()

        found = self.repo.find_by_code(code)
        if found is None:
            raise SessionNotFoundError("No game found with that code.")
        _, session_id = found

        now = self.clock()

        def _register(model: SessionModel) -> SessionModel:
            session = GameSession.from_model(model)
            session.register_player(request.player_id, now)
            return session.to_model()

        updated = self.repo.update_session(session_id, _register)
        color = GameSession.from_model(updated).player_color(request.player_id)
        logger.info("Player %s seated as %s in session %s", request.player_id, color, session_id)

        return JoinSessionResponse(
            session_id=session_id,
            code=updated.code,
            color=color,
            players=[PlayerResponse.from_model(p) for p in updated.players],
            status=SessionStatus(updated.status),
        )

    def get_session(self, request: GetSessionRequest) -> SessionResponse:
        """
        Retrieve current session state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        model = self._fetch_session(request.session_id)
        return SessionResponse.from_model(request.session_id, model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (to highlight squares in the frontend)."""
        session = GameSession.from_model(self._fetch_session(request.session_id))
        moves = session.legal_moves(request.player_id)
        return LegalMovesResponse(
            session_id=request.session_id,
            player_id=request.player_id,
            color=session.player_color(request.player_id),
            legal_moves=moves,
        )

    def submit_move(self, request: MoveRequest) -> SessionResponse:
        """Make a move attempt. Checked and applied as one atomic update of the stored session."""
        now = self.clock()

        def _move(model: SessionModel) -> SessionModel:
            session = GameSession.from_model(model)
            session.make_move(request.player_id, request.from_square, request.to_square, now)
            return session.to_model()

        updated = self.repo.update_session(request.session_id, _move)
        logger.info(
            "Session %s: %s played %s%s",
            request.session_id,
            request.player_id,
            request.from_square,
            request.to_square,
        )
        return SessionResponse.from_model(request.session_id, updated)

    def resign(self, request: ResignRequest) -> SessionResponse:
        """A player gives up. This is the only way a session ends."""

        def _resign(model: SessionModel) -> SessionModel:
            session = GameSession.from_model(model)
            session.resign(request.player_id)
            return session.to_model()

        updated = self.repo.update_session(request.session_id, _resign)
        logger.info("Session %s: %s resigned", request.session_id, request.player_id)
        return SessionResponse.from_model(request.session_id, updated)

    # -- Internal helpers --
    def _code_in_use(self, code: str) -> bool:
        return self.repo.find_by_code(code) is not None

    def _fetch_session(self, session_id: UUID) -> SessionModel:
        """Attempt to find the session in the repository and raise error if it fails."""
        model = self.repo.get_session(session_id)
        if model is None:
            raise SessionNotFoundError(f"Session with {session_id=} not found.")
        return model
