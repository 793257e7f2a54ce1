import pytest
from pydantic import ValidationError

from fukimori_engine.application.services.character_registry import CharacterRegistry
from fukimori_engine.infrastructure.config.settings import DATA_DIR
from fukimori_engine.infrastructure.config.world_loader import WorldLoader

WORLD_FILE = DATA_DIR / "fukimori_high.yaml"
ACHIEVEMENTS_FILE = DATA_DIR / "achievements.yaml"


@pytest.fixture
def loader():
    return WorldLoader(CharacterRegistry(), memory_capacity=200)


def test_load_bundled_world(loader):
    config = loader.load_world(WORLD_FILE)

    assert config.id == "fukimori_high"
    assert config.start_location == "entrance"
    assert any(loc.id == "library" for loc in config.locations)
    assert any(c["id"] == "student_popular_mika" for c in config.characters)


def test_create_session_drops_unknown_connections(loader):
    session = loader.create_session(loader.load_world(WORLD_FILE), "s1")

    entrance = session.locations["entrance"]
    assert "parking_area" not in entrance.connected_locations
    assert entrance.connected_locations == ["main_hallway", "courtyard"]
    for location in session.locations.values():
        assert all(c in session.locations for c in location.connected_locations)


def test_create_session_builds_characters_and_default_player(loader):
    session = loader.create_session(loader.load_world(WORLD_FILE), "s1")

    assert session.id == "s1"
    assert session.current_location_id == "entrance"
    assert session.story_memory.capacity == 200
    assert session.characters["player"].name == "Transfer Student"
    mika = session.characters["student_popular_mika"]
    assert "popular" in mika.personality.traits
    assert mika.abilities.social.reputation == 92
    assert "teacher" in session.characters["teacher_tanaka"].reputation_tags


def test_sessions_from_one_config_are_independent(loader):
    config = loader.load_world(WORLD_FILE)
    first = loader.create_session(config, "one")
    second = loader.create_session(config, "two")

    first.characters["student_shy_aoi"].abilities.social.reputation = 99

    assert second.characters["student_shy_aoi"].abilities.social.reputation != 99


def test_unknown_start_location_falls_back_to_first(loader, tmp_path):
    world_file = tmp_path / "world.yaml"
    world_file.write_text(
        "id: tiny\n"
        "name: Tiny School\n"
        "start_location: nowhere\n"
        "locations:\n"
        "  - id: gate\n"
        "    name: Gate\n"
        "characters:\n"
        "  - id: player\n"
        "    name: Kenji\n",
        encoding="utf-8",
    )

    session = loader.create_session(loader.load_world(world_file), "s1")

    assert session.current_location_id == "gate"
    assert session.characters["player"].name == "Kenji"


def test_missing_world_file(loader, tmp_path):
    with pytest.raises(FileNotFoundError):
        loader.load_world(tmp_path / "missing.yaml")


def test_load_bundled_achievements(loader):
    catalog = loader.load_achievements(ACHIEVEMENTS_FILE)

    assert len(catalog.achievements) == 14
    first_kiss = catalog.find_by_trigger("first_kiss_success")
    assert first_kiss.id == "first_kiss"
    assert first_kiss.reputation_effect.attractiveness_change == 20


def test_duplicate_trigger_events_are_rejected(loader, tmp_path):
    achievements_file = tmp_path / "achievements.yaml"
    achievements_file.write_text(
        "achievements:\n"
        "  - {id: a, name: A, description: x, category: social, trigger_event: same}\n"
        "  - {id: b, name: B, description: y, category: social, trigger_event: same}\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Duplicate"):
        loader.load_achievements(achievements_file)


def test_invalid_category_is_rejected(loader, tmp_path):
    achievements_file = tmp_path / "achievements.yaml"
    achievements_file.write_text(
        "achievements:\n"
        "  - {id: a, name: A, description: x, category: cooking, trigger_event: t}\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        loader.load_achievements(achievements_file)
