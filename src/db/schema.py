"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import SessionStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBSession(Base):
    """
    One row per chess session (a 'document').

    version_id is bumped by SQLAlchemy on every UPDATE, and the UPDATE only matches the row when the version is still
    the one that was read. A concurrent writer therefore makes the flush fail with StaleDataError instead of being overwritten.
    """

    __tablename__ = "sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(8), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    current_fen: Mapped[str]
    turn: Mapped[str]
    status: Mapped[str] = mapped_column(default=SessionStatus.WAITING.value)
    players: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    result: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
    version_id: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
