"""Unit tests for src/main.py"""

from pathlib import Path

from src.api.models import (
    CreateSessionRequest,
    GetSessionRequest,
    JoinSessionRequest,
    MoveRequest,
)
from src.core.config import Settings
from src.core.shared_types import Color, SessionStatus
from src.main import build_service


def test_build_service(tmp_path: Path) -> None:
    """Wire everything against a fresh SQLite file and play the opening move."""
    settings = Settings(_env_file=None, database_url=f"sqlite:///{tmp_path / 'chess.db'}")
    service = build_service(settings)

    created = service.create_session(CreateSessionRequest(player_id="alice"))
    joined = service.join_session(JoinSessionRequest(code=created.code.lower(), player_id="bob"))
    assert joined.color == Color.BLACK
    assert joined.status == SessionStatus.ACTIVE

    service.submit_move(
        MoveRequest(session_id=created.session_id, player_id="alice", from_square="e2", to_square="e4")
    )

    # a second service on the same file sees the same state
    other = build_service(settings)
    state = other.get_session(GetSessionRequest(session_id=created.session_id))
    assert state.turn == Color.BLACK
    assert [m.from_square + m.to_square for m in state.move_history] == ["e2e4"]
