"""Implementation of (Session)Repository using SQLAlchemy"""

import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from src.core.exceptions import RepositoryError, SessionNotFoundError
from src.core.models import MoveModel, PlayerModel, ResultModel, SessionModel
from src.db.repository import SessionMutation
from src.db.schema import DBSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5


class SQLSessionRepository:
    """
    Data stored using SQL / methods implemented using SQLAlchemy.

    Every call opens its own database session, so one repository can be shared by concurrent requests.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self.session_factory = session_factory
        self.max_retries = max_retries

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        with self.session_factory() as db:
            record = db.get(DBSession, session_id)
            return self._to_model(record) if record else None

    def find_by_code(self, code: str) -> tuple[SessionModel, UUID] | None:
        """Get the (first) session using this join code + its ID, if any."""
        query = (
            select(DBSession)
            .where(DBSession.code == code)
            .order_by(DBSession.created_at)
            .limit(1)
        )
        with self.session_factory() as db:
            record = db.scalars(query).first()
            return (self._to_model(record), record.id) if record else None

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        new_id = uuid4()
        with self.session_factory() as db:
            record = DBSession(id=new_id)
            self._write(record, session)
            db.add(record)
            self._commit(db)
            db.refresh(record)
            return self._to_model(record), new_id

    def update_session(self, session_id: UUID, mutate: SessionMutation) -> SessionModel:
        """
        Optimistic transaction
        ----

        1. read the row (and its version)
        2. compute the new state from a copy
        3. UPDATE ... WHERE version_id = <version read in 1.>
        4. nobody matched? Someone else wrote in between --> start over at 1.

        Exceptions raised by `mutate` (business rules) abort the attempt: nothing gets written and they are not retried.
        """
        for attempt in range(1, self.max_retries + 1):
            with self.session_factory() as db:
                record = db.get(DBSession, session_id)
                if record is None:
                    raise SessionNotFoundError(f"Session with {session_id=} not found.")

                current = self._to_model(record)
                updated = mutate(deepcopy(current))
                if updated == current:
                    # nothing changed, no need to write (and bump the version)
                    return current

                self._write(record, updated)
                try:
                    db.commit()
                except StaleDataError:
                    db.rollback()
                    logger.warning(
                        "Write conflict on session %s (attempt %d/%d), retrying",
                        session_id,
                        attempt,
                        self.max_retries,
                    )
                    continue
                except SQLAlchemyError as exc:
                    db.rollback()
                    logger.error("Transaction failed on session %s", session_id, exc_info=True)
                    raise RepositoryError(f"Could not update session {session_id}.") from exc

                db.refresh(record)
                return self._to_model(record)

        raise RepositoryError(
            f"Session {session_id} kept changing underneath us: gave up after {self.max_retries} attempts."
        )

    def append_player(self, session_id: UUID, player: PlayerModel) -> SessionModel:
        """Add the player to the player list, unless an identical entry is there already (array union)."""

        def _union(session: SessionModel) -> SessionModel:
            if player not in session.players:
                session.players.append(player)
            return session

        return self.update_session(session_id, _union)

    # --- helpers ---
    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Commit failed", exc_info=True)
            raise RepositoryError("Could not store session.") from exc

    def _write(self, record: DBSession, session: SessionModel) -> None:
        """Copy the data transfer model onto the SQLAlchemy model. Lists are replaced, not mutated, so changes get detected."""
        record.code = session.code
        record.created_at = session.created_at
        record.current_fen = session.current_fen
        record.turn = session.turn
        record.status = session.status
        record.players = [_player_to_json(p) for p in session.players]
        record.moves = [_move_to_json(m) for m in session.moves]
        record.result = _result_to_json(session.result) if session.result else None

    def _to_model(self, record: DBSession) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            code=record.code,
            created_at=_as_utc(record.created_at),
            current_fen=record.current_fen,
            turn=record.turn,
            status=record.status,
            players=[_player_from_json(p) for p in record.players or []],
            moves=[_move_from_json(m) for m in record.moves or []],
            result=_result_from_json(record.result) if record.result else None,
        )


# --- JSON (de)serialization of the nested documents ---
def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes. Everything we store is UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _player_to_json(player: PlayerModel) -> dict[str, Any]:
    return {
        "uid": player.uid,
        "color": player.color,
        "joined_at": player.joined_at.isoformat(),
    }


def _player_from_json(data: dict[str, Any]) -> PlayerModel:
    return PlayerModel(
        uid=data["uid"],
        color=data["color"],
        joined_at=_as_utc(datetime.fromisoformat(data["joined_at"])),
    )


def _move_to_json(move: MoveModel) -> dict[str, Any]:
    return {
        "from": move.from_square,
        "to": move.to_square,
        "color": move.color,
        "ts": move.timestamp.isoformat(),
    }


def _move_from_json(data: dict[str, Any]) -> MoveModel:
    return MoveModel(
        from_square=data["from"],
        to_square=data["to"],
        color=data["color"],
        timestamp=_as_utc(datetime.fromisoformat(data["ts"])),
    )


def _result_to_json(result: ResultModel) -> dict[str, Any]:
    return {"status": result.status, "reason": result.reason, "winner": result.winner}


def _result_from_json(data: dict[str, Any]) -> ResultModel:
    return ResultModel(
        status=data["status"], reason=data["reason"], winner=data.get("winner")
    )
