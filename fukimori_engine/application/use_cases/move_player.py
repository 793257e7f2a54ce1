from fukimori_engine.application.commands.interaction import MovePlayerCommand
from fukimori_engine.application.ports.logger import ILogger
from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.errors import EngineError, SessionNotFoundError
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry


class MovePlayerHandler:
    """
    Handles the MovePlayerCommand use case.
    The player may only walk to a location connected to the current one.
    """
    def __init__(
        self,
        session_repository: IGameSessionRepository,
        session_locks: SessionLockRegistry,
        logger: ILogger,
    ):
        self._repo = session_repository
        self._locks = session_locks
        self._logger = logger

    async def execute(self, command: MovePlayerCommand) -> GameSession:
        async with self._locks.hold(command.session_id):
            session = await self._repo.get_by_id(command.session_id)
            if not session:
                raise SessionNotFoundError(command.session_id)

            if session.current_location_id == command.target_location_id:
                return session

            target = session.locations.get(command.target_location_id)
            if not target:
                raise EngineError(f"Location '{command.target_location_id}' does not exist.")

            current = session.locations.get(session.current_location_id)
            if current and command.target_location_id not in current.connected_locations:
                raise EngineError(f"{target.name} is not reachable from {current.name}.")

            session.current_location_id = target.id
            await self._repo.save(session)

        self._logger.info(f"Player walked to {target.name}.")
        return session
