import pytest
from unittest.mock import Mock

from fukimori_engine.application.commands.interaction import MovePlayerCommand
from fukimori_engine.application.ports.logger import ILogger
from fukimori_engine.application.use_cases.move_player import MovePlayerHandler
from fukimori_engine.domain.entities import GameSession, Location, LocationId
from fukimori_engine.domain.errors import EngineError, SessionNotFoundError
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry
from fukimori_engine.infrastructure.repositories.in_memory_session_repository import InMemoryGameSessionRepository


@pytest.fixture
def setup():
    entrance = LocationId("entrance")
    hallway = LocationId("main_hallway")
    rooftop = LocationId("rooftop")
    session = GameSession(
        id="s1",
        current_location_id=entrance,
        locations={
            entrance: Location(id=entrance, name="Main Entrance", connected_locations=[hallway]),
            hallway: Location(id=hallway, name="Main Hallway", connected_locations=[entrance]),
            rooftop: Location(id=rooftop, name="School Rooftop"),
        },
    )
    repo = InMemoryGameSessionRepository()
    logger = Mock(spec=ILogger)
    handler = MovePlayerHandler(session_repository=repo, session_locks=SessionLockRegistry(), logger=logger)
    return {"handler": handler, "repo": repo, "session": session, "logger": logger}


@pytest.mark.asyncio
async def test_move_player_successfully(setup):
    """
    Tests the happy path: the player walks to a connected location.
    """
    # 1. ARRANGE
    await setup["repo"].save(setup["session"])

    # 2. ACT
    updated = await setup["handler"].execute(MovePlayerCommand(session_id="s1", target_location_id="main_hallway"))

    # 3. ASSERT
    assert updated.current_location_id == "main_hallway"
    saved = await setup["repo"].get_by_id("s1")
    assert saved.current_location_id == "main_hallway"
    setup["logger"].info.assert_called_once_with("Player walked to Main Hallway.")


@pytest.mark.asyncio
async def test_move_to_unconnected_location_raises_error(setup):
    await setup["repo"].save(setup["session"])

    with pytest.raises(EngineError, match="not reachable"):
        await setup["handler"].execute(MovePlayerCommand(session_id="s1", target_location_id="rooftop"))

    saved = await setup["repo"].get_by_id("s1")
    assert saved.current_location_id == "entrance"


@pytest.mark.asyncio
async def test_move_to_unknown_location_raises_error(setup):
    await setup["repo"].save(setup["session"])

    with pytest.raises(EngineError, match="does not exist"):
        await setup["handler"].execute(MovePlayerCommand(session_id="s1", target_location_id="pool"))


@pytest.mark.asyncio
async def test_move_to_current_location_is_a_no_op(setup):
    await setup["repo"].save(setup["session"])

    updated = await setup["handler"].execute(MovePlayerCommand(session_id="s1", target_location_id="entrance"))

    assert updated.current_location_id == "entrance"
    setup["logger"].info.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_session_raises(setup):
    with pytest.raises(SessionNotFoundError):
        await setup["handler"].execute(MovePlayerCommand(session_id="missing", target_location_id="entrance"))
