import pytest

from fukimori_engine.application.services.character_registry import CharacterRegistry, RelationshipDelta
from fukimori_engine.domain.entities import GameSession, RelationshipStatus
from fukimori_engine.domain.errors import CharacterNotFoundError
from fukimori_engine.domain.story_memory import StoryMemory


@pytest.fixture
def registry():
    return CharacterRegistry()


@pytest.fixture
def session():
    return GameSession(id="test_session")


def test_create_character_fills_defaults(registry, session):
    character = registry.create_character(session, {
        "id": "student_shy_aoi",
        "name": "Aoi Hayashi",
        "personality": {"traits": ["shy"]},
    })

    assert session.characters["student_shy_aoi"] is character
    assert character.personality.traits == ["shy"]
    assert character.personality.speech_pattern == "casual"
    assert character.abilities.social.reputation == 50


def test_create_character_generates_id_when_missing(registry, session):
    character = registry.create_character(session, {"name": "Nameless"})

    assert character.id.startswith("char_")
    assert registry.get_character(session, character.id) is character


def test_create_character_overwrites_existing_id(registry, session):
    registry.create_character(session, {"id": "student_x", "name": "First"})
    registry.create_character(session, {"id": "student_x", "name": "Second"})

    assert len(session.characters) == 1
    assert session.characters["student_x"].name == "Second"


def test_require_character_raises_for_unknown_id(registry, session):
    with pytest.raises(CharacterNotFoundError) as exc_info:
        registry.require_character(session, "ghost")
    assert exc_info.value.character_id == "ghost"


def test_update_relationship_creates_record_and_is_one_way(registry, session):
    registry.create_character(session, {"id": "a", "name": "A"})
    registry.create_character(session, {"id": "b", "name": "B"})

    relationship = registry.update_relationship(
        session, "a", "b", RelationshipDelta(type="classmate", affection_change=15, new_memory="shared notes"),
    )

    assert relationship.type == "classmate"
    assert relationship.affection_level == 65
    assert relationship.current_status == RelationshipStatus.FRIEND
    assert relationship.shared_memories == ["shared notes"]
    assert "a" not in session.characters["b"].relationships


def test_update_relationship_clamps(registry, session):
    registry.create_character(session, {
        "id": "a",
        "relationships": {"b": {"affection_level": 95}},
    })

    relationship = registry.update_relationship(session, "a", "b", RelationshipDelta(affection_change=20))

    assert relationship.affection_level == 100
    assert relationship.current_status == RelationshipStatus.CLOSE_FRIEND


def test_update_relationship_requires_owner(registry, session):
    with pytest.raises(CharacterNotFoundError):
        registry.update_relationship(session, "ghost", "b", RelationshipDelta(affection_change=1))


def test_history_limit_is_configurable(session):
    registry = CharacterRegistry(history_limit=2)
    registry.create_character(session, {"id": "a"})

    for i in range(3):
        registry.update_relationship(session, "a", "b", RelationshipDelta(new_memory=f"m{i}"))

    assert session.characters["a"].relationships["b"].shared_memories == ["m1", "m2"]


def test_reset_world_clears_characters_and_memory(registry, session):
    registry.create_character(session, {"id": "a"})
    session.story_memory.append(StoryMemory(location="library", summary="something"))

    registry.reset_world(session)

    assert registry.all_characters(session) == []
    assert len(session.story_memory) == 0
