from fukimori_engine.application.commands.progression import AwardExperienceCommand
from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.application.services.progression_engine import PlayerProgressionEngine
from fukimori_engine.domain.errors import SessionNotFoundError
from fukimori_engine.domain.events import ExperienceAwarded, PlayerLeveledUp
from fukimori_engine.domain.progression import ExperienceGain, LevelUpResult
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry


class AwardExperienceHandler:
    """
    Handles the AwardExperienceCommand use case.
    """
    def __init__(
        self,
        session_repository: IGameSessionRepository,
        event_bus: IEventBus,
        session_locks: SessionLockRegistry,
        progression_engine: PlayerProgressionEngine,
    ):
        self._repo = session_repository
        self._bus = event_bus
        self._locks = session_locks
        self._progression = progression_engine

    async def execute(self, command: AwardExperienceCommand) -> LevelUpResult:
        gain = ExperienceGain(
            amount=command.amount,
            source=command.source,
            skill_category=command.skill_category,
            description=command.description,
        )

        async with self._locks.hold(command.session_id):
            session = await self._repo.get_by_id(command.session_id)
            if not session:
                raise SessionNotFoundError(command.session_id)

            result = self._progression.award_experience(session, gain)
            await self._repo.save(session)

        await self._bus.publish(ExperienceAwarded(
            session_id=session.id, amount=gain.amount, source=gain.source, skill_category=gain.skill_category,
        ), session)
        if result.leveled_up:
            await self._bus.publish(PlayerLeveledUp(
                session_id=session.id,
                new_level=result.new_level,
                characteristics_improved=result.characteristics_improved,
                actions_unlocked=result.actions_unlocked,
                skills_unlocked=result.skills_unlocked,
            ), session)
        return result
