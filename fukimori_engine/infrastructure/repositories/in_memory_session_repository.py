from typing import Dict, List, Optional

from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.domain.entities import GameSession


class InMemoryGameSessionRepository(IGameSessionRepository):
    """
    Keeps every player's session in a dictionary.
    Good enough for a single process and for tests; state is lost on exit.
    """
    _sessions: Dict[str, GameSession]

    def __init__(self):
        self._sessions = {}

    async def get_by_id(self, session_id: str) -> Optional[GameSession]:
        """Returns a copy, so callers only change stored state through save()."""
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def save(self, session: GameSession) -> None:
        self._sessions[session.id] = session.model_copy(deep=True)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def clear(self) -> None:
        """A helper for tests."""
        self._sessions = {}
