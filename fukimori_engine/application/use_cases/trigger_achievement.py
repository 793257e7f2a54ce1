from typing import Optional

from fukimori_engine.application.commands.progression import TriggerAchievementCommand
from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.application.services.reputation_engine import ReputationEngine
from fukimori_engine.domain.errors import SessionNotFoundError
from fukimori_engine.domain.events import AchievementUnlocked
from fukimori_engine.domain.reputation import UnlockedAchievement
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry


class TriggerAchievementHandler:
    """
    Handles the TriggerAchievementCommand use case.
    An unknown key or an achievement the player already holds is not an
    error: the handler returns None and nothing is saved.
    """
    def __init__(
        self,
        session_repository: IGameSessionRepository,
        event_bus: IEventBus,
        session_locks: SessionLockRegistry,
        reputation_engine: ReputationEngine,
    ):
        self._repo = session_repository
        self._bus = event_bus
        self._locks = session_locks
        self._reputation = reputation_engine

    async def execute(self, command: TriggerAchievementCommand) -> Optional[UnlockedAchievement]:
        async with self._locks.hold(command.session_id):
            session = await self._repo.get_by_id(command.session_id)
            if not session:
                raise SessionNotFoundError(command.session_id)

            unlocked = self._reputation.trigger_achievement(session, command.event_key)
            if unlocked is None:
                return None
            await self._repo.save(session)

        await self._bus.publish(AchievementUnlocked(
            session_id=session.id,
            achievement_id=unlocked.id,
            achievement_name=unlocked.name,
            new_title=session.reputation.current_title,
        ), session)
        return unlocked
