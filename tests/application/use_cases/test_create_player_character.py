import pytest
from unittest.mock import AsyncMock

from fukimori_engine.application.commands.character import (
    CreatePlayerCharacterCommand,
    PlayerAppearance,
    PlayerBackstory,
)
from fukimori_engine.application.services.character_registry import CharacterRegistry
from fukimori_engine.application.services.memory_service import MemoryService
from fukimori_engine.application.use_cases.create_player_character import (
    CreatePlayerCharacterHandler,
    generate_backstory,
)
from fukimori_engine.domain.entities import GameSession, Location
from fukimori_engine.domain.errors import SessionNotFoundError
from fukimori_engine.domain.events import CharacterCreated
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry
from fukimori_engine.infrastructure.event_bus.local_event_bus import LocalEventBus
from fukimori_engine.infrastructure.repositories.in_memory_session_repository import InMemoryGameSessionRepository


@pytest.fixture
def setup():
    repo = InMemoryGameSessionRepository()
    event_bus = LocalEventBus()
    spy = AsyncMock()
    event_bus.subscribe(CharacterCreated, spy)
    handler = CreatePlayerCharacterHandler(
        session_repository=repo,
        event_bus=event_bus,
        session_locks=SessionLockRegistry(),
        character_registry=CharacterRegistry(),
        memory_service=MemoryService(),
    )
    session = GameSession(
        id="s1",
        current_location_id="classroom_1a",
        locations={
            "entrance": Location(id="entrance", name="Main Entrance"),
            "classroom_1a": Location(id="classroom_1a", name="Classroom 1-A"),
        },
    )
    return {"handler": handler, "repo": repo, "spy": spy, "session": session}


@pytest.fixture
def command():
    return CreatePlayerCharacterCommand(
        session_id="s1",
        name="Hana",
        backstory=PlayerBackstory(
            transfer_student=True,
            previous_school="Osaka Daiichi",
            personality=["shy", "curious"],
            hobbies=["photography"],
            academic_strength="literature",
        ),
        appearance=PlayerAppearance(photo_description="Short brown hair, glasses", height="short"),
        starting_date="school_year_start",
    )


@pytest.mark.asyncio
async def test_create_player_character(setup, command):
    await setup["repo"].save(setup["session"])

    player = await setup["handler"].execute(command)

    assert player.id == "player"
    assert player.name == "Hana"
    assert player.appearance.hair_color == "brown"
    assert player.appearance.height == "short"
    assert player.personality.social_style == "reserved"
    assert player.abilities.artistic.talents == ["photography"]
    assert player.abilities.academic.subjects == ["literature"]
    assert "transfer student" in player.reputation_tags

    saved = await setup["repo"].get_by_id("s1")
    assert saved.characters["player"].name == "Hana"
    assert saved.current_location_id == "entrance"
    memory = saved.story_memory.memories[-1]
    assert memory.summary == (
        "Hana begins their journey at Fukimori High School - First day of the new school year in April"
    )
    assert memory.emotional_tone == "nervous but excited"

    setup["spy"].assert_called_once()
    assert setup["spy"].call_args[0][0].character_name == "Hana"


@pytest.mark.asyncio
async def test_start_location_missing_from_world_keeps_current(setup, command):
    await setup["repo"].save(setup["session"])

    await setup["handler"].execute(command.model_copy(update={"starting_date": "transfer_mid_year"}))

    saved = await setup["repo"].get_by_id("s1")
    assert saved.current_location_id == "classroom_1a"


@pytest.mark.asyncio
async def test_unknown_session_raises(setup, command):
    with pytest.raises(SessionNotFoundError):
        await setup["handler"].execute(command)


def test_generate_backstory(command):
    backstory = generate_backstory(command, "Joining mid-semester")

    assert backstory.startswith("Hana is a 15-year-old student")
    assert "As a transfer student from Osaka Daiichi" in backstory
    assert "being shy, curious, and they have a passion for photography." in backstory
    assert "particular strength in literature" in backstory
    assert backstory.endswith("Joining mid-semester marks the beginning of what they hope will be an "
                              "unforgettable high school experience.")


def test_name_is_required():
    with pytest.raises(ValueError):
        CreatePlayerCharacterCommand(session_id="s1", name="")
