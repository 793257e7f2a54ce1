from abc import ABC, abstractmethod
from typing import Optional

from fukimori_engine.domain.entities import GameSession


class IGameSessionRepository(ABC):
    """
    An interface (Port) for persisting and retrieving one player's game.
    Implementations must hand out copies, so a handler that fails halfway
    never leaves a half-mutated session behind.
    """

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[GameSession]:
        """
        Retrieves a game session by its unique ID.
        Returns None if the session is not found.
        """
        pass

    @abstractmethod
    async def save(self, session: GameSession) -> None:
        """Saves the whole session aggregate, creating or replacing it."""
        pass
