"""Protocol repository: the operations the service needs from a transactional document store."""

from typing import Callable, Protocol
from uuid import UUID

from src.core.models import PlayerModel, SessionModel

# Receives the currently stored session and returns the session that should be stored instead.
# Raising inside the function aborts the update without writing anything.
SessionMutation = Callable[[SessionModel], SessionModel]


class SessionRepository(Protocol):
    """Persistence layer orchestration"""

    def get_session(self, session_id: UUID) -> SessionModel | None:
        """Get session by ID, if record exists."""
        ...

    def find_by_code(self, code: str) -> tuple[SessionModel, UUID] | None:
        """Get the (first) session using this join code + its ID, if any."""
        ...

    def create_session(self, session: SessionModel) -> tuple[SessionModel, UUID]:
        """Store new session and return the stored data + newly created session ID."""
        ...

    def update_session(self, session_id: UUID, mutate: SessionMutation) -> SessionModel:
        """
        Atomic read-modify-write of a single session.

        Reads the session, applies `mutate` and writes the result only if nobody else wrote in between.
        On a conflicting write the whole thing is replayed from the read (bounded number of times).
        Raises SessionNotFoundError when there is no such session.
        """
        ...

    def append_player(self, session_id: UUID, player: PlayerModel) -> SessionModel:
        """Add the player to the player list, unless an identical entry is there already (array union)."""
        ...
