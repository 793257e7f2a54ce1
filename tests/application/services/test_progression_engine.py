import pytest
import random
from unittest.mock import Mock

from fukimori_engine.application.services.progression_engine import PlayerProgressionEngine
from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.progression import ExperienceGain, PlayerStats
from fukimori_engine.domain.story_memory import StoryMemory


def fixed_rng(value: float) -> Mock:
    rng = Mock(spec=random.Random)
    rng.random.return_value = value
    return rng


@pytest.fixture
def session():
    return GameSession(id="test_session")


def test_award_experience_levels_up_twice(session):
    engine = PlayerProgressionEngine(rng=fixed_rng(0.0))

    result = engine.award_experience(session, ExperienceGain(amount=250, source="test"))

    stats = session.progression
    assert stats.level == 3
    assert stats.experience == 30
    assert stats.experience_to_next == 144
    assert result.leveled_up
    assert result.new_level == 3
    assert result.levels_gained == 2
    assert result.characteristics_improved == ["academics", "academics"]
    assert stats.characteristics.academics == 60
    assert result.actions_unlocked == ["join_club"]
    assert "join_club" in stats.unlocked_actions
    assert stats.inventory.max_capacity == 12


def test_award_experience_records_memory(session):
    engine = PlayerProgressionEngine(rng=fixed_rng(0.0))

    engine.award_experience(session, ExperienceGain(amount=120, source="test", description="A long day"))

    memory = session.story_memory.memories[-1]
    assert memory.summary == "Player gained 120 XP from test: A long day"
    assert memory.emotional_tone == "accomplished"
    assert memory.consequences == ["Level up to 2"]
    assert memory.participants == ["player"]


def test_award_experience_below_threshold(session):
    engine = PlayerProgressionEngine()

    result = engine.award_experience(session, ExperienceGain(amount=99, source="test"))

    assert not result.leveled_up
    assert result.new_level is None
    assert session.progression.level == 1
    assert session.progression.experience == 99


def test_skill_experience_can_cover_several_levels(session):
    engine = PlayerProgressionEngine(rng=fixed_rng(0.0))

    result = engine.award_experience(session, ExperienceGain(amount=160, source="test", skill_category="athletics"))

    skill = session.progression.skills["athletics"]
    assert skill.level == 3
    assert skill.experience == 10
    assert result.skill_levels_gained == 2


def test_unknown_skill_category_only_awards_total_experience(session):
    engine = PlayerProgressionEngine()

    result = engine.award_experience(session, ExperienceGain(amount=40, source="test", skill_category="charm"))

    assert result.skill_levels_gained == 0
    assert "charm" not in session.progression.skills
    assert session.progression.experience == 40


def test_level_four_unlocks_persuasion(session):
    engine = PlayerProgressionEngine(rng=fixed_rng(0.0))
    session.progression.level = 3
    session.progression.experience_to_next = 10

    result = engine.award_experience(session, ExperienceGain(amount=10, source="test"))

    assert result.skills_unlocked == ["persuasion"]
    assert engine.is_skill_unlocked(session, "persuasion")
    assert "persuasion" in engine.unlocked_skills(session)


def test_characteristic_choice_without_history_is_uniform(session):
    engine = PlayerProgressionEngine(rng=fixed_rng(0.99))

    result = engine.award_experience(session, ExperienceGain(amount=100, source="test"))

    assert result.characteristics_improved == ["leadership"]


def test_characteristic_choice_is_weighted_by_recent_memories(session):
    session.story_memory.append(StoryMemory(location="gymnasium", summary="Player went to sports practice"))
    # weights: academics 1, athletics 3, six others 1; 0.25 * 10 = 2.5 lands on athletics
    engine = PlayerProgressionEngine(rng=fixed_rng(0.25))

    result = engine.award_experience(session, ExperienceGain(amount=100, source="test"))

    assert result.characteristics_improved == ["athletics"]
    assert session.progression.characteristics.athletics == 55


def test_seeded_rng_is_reproducible():
    first, second = GameSession(id="one"), GameSession(id="two")

    PlayerProgressionEngine(rng=random.Random(7)).award_experience(first, ExperienceGain(amount=1000, source="t"))
    PlayerProgressionEngine(rng=random.Random(7)).award_experience(second, ExperienceGain(amount=1000, source="t"))

    assert first.progression.characteristics == second.progression.characteristics


def test_can_perform_action(session):
    engine = PlayerProgressionEngine()

    assert engine.can_perform_action(session, "study")
    assert not engine.can_perform_action(session, "ask_on_date")


def test_add_item_respects_capacity(session):
    engine = PlayerProgressionEngine()
    inventory = session.progression.inventory
    inventory.items = [f"item_{i}" for i in range(inventory.max_capacity)]

    assert engine.add_item(session, "bento") is False
    assert "bento" not in inventory.items
    assert engine.add_item(session, "love letter", is_special=True) is True
    assert inventory.special_items == ["love letter"]


def test_remove_item(session):
    engine = PlayerProgressionEngine()

    assert engine.remove_item(session, "pencil") is True
    assert "pencil" not in session.progression.inventory.items
    assert engine.remove_item(session, "pencil") is False


@pytest.mark.parametrize("charm, expected", [(50, 1.0), (80, 1.3), (0, 0.5), (100, 1.5)])
def test_experience_multiplier(session, charm, expected):
    session.progression.characteristics.charm = charm
    assert PlayerProgressionEngine().get_experience_multiplier(session, "social") == pytest.approx(expected)


def test_experience_multiplier_for_unknown_activity(session):
    assert PlayerProgressionEngine().get_experience_multiplier(session, None) == 1.0


def test_calculate_experience_gain_with_bonuses(session):
    gain = PlayerProgressionEngine().calculate_experience_gain(session, "Hello sensei", "happy", "teacher_tanaka")

    # 12 * (1.0 + 0.5 happy + 0.3 authority)
    assert gain.amount == 21
    assert gain.source == "social_interaction"
    assert gain.skill_category == "charm"
    assert gain.description == "Interaction with teacher_tanaka"


def test_calculate_experience_gain_default(session):
    gain = PlayerProgressionEngine().calculate_experience_gain(session, "...", "neutral", "student_shy_aoi")

    assert gain.amount == 10
    assert gain.source == "general_interaction"
    assert gain.skill_category is None


def test_player_stats_is_a_copy(session):
    engine = PlayerProgressionEngine()
    stats = engine.get_player_stats(session)
    stats.level = 50

    assert session.progression.level == 1
    assert engine.get_skill_level(session, "mathematics") == 1
    assert engine.get_skill_level(session, "telekinesis") == 0


def test_player_stats_carry_only_progression_state():
    assert set(PlayerStats().model_dump()) == {
        "level", "experience", "experience_to_next", "characteristics",
        "skills", "inventory", "unlocked_actions",
    }
