from fukimori_engine.domain.entities import Character, GameSession
from fukimori_engine.interface.cli.main import _find_character


def _session_with(*characters: Character) -> GameSession:
    session = GameSession(id="local")
    session.characters = {c.id: c for c in characters}
    return session


def test_find_character_by_first_name_or_id():
    session = _session_with(Character(id="player", name="Ren"), Character(id="aoi", name="Aoi Hayashi"))

    assert _find_character(session, "Aoi").id == "aoi"
    assert _find_character(session, "aoi").id == "aoi"
    assert _find_character(session, "ren") is None


def test_find_character_tolerates_blank_names():
    session = _session_with(
        Character(id="player", name="Ren"),
        Character(id="nameless", name=""),
        Character(id="spaces", name="   "),
        Character(id="aoi", name="Aoi Hayashi"),
    )

    assert _find_character(session, "aoi").id == "aoi"
    assert _find_character(session, "nobody") is None
