import pytest
from datetime import datetime, timezone

from fukimori_engine.domain.reputation import (
    AchievementCatalog,
    AchievementDefinition,
    DEFAULT_TITLE,
    INITIAL_TITLE,
    ReputationStatus,
    UnlockedAchievement,
    calculate_notoriety,
    derive_title,
    reaction_modifier_for,
)
from fukimori_engine.domain.value_objects import ReputationEffect


def test_initial_status():
    status = ReputationStatus()

    assert (status.popularity, status.respect, status.fear, status.attractiveness) == (50, 50, 0, 50)
    assert status.notoriety == 10
    assert status.current_title == INITIAL_TITLE
    assert status.achievements == []


def test_notoriety_from_most_extreme_axis():
    status = ReputationStatus(popularity=90, respect=50, fear=50, attractiveness=50)
    assert calculate_notoriety(status) == 80


def test_notoriety_is_capped_at_100():
    status = ReputationStatus(popularity=100, respect=0, fear=50, attractiveness=50)
    assert calculate_notoriety(status) == 100


def test_apply_effect_clamps_each_axis_independently():
    status = ReputationStatus(popularity=95, respect=5, fear=50, attractiveness=50)

    status.apply_effect(ReputationEffect(popularity_change=20, respect_change=-10, fear_change=5))

    assert status.popularity == 100
    assert status.respect == 0
    assert status.fear == 55
    assert status.attractiveness == 50
    assert status.notoriety == 100


def test_unknown_axis_raises():
    with pytest.raises(ValueError):
        ReputationStatus().axis("charisma")


@pytest.mark.parametrize("axes, expected", [
    (dict(fear=85, popularity=95), "The Untouchable"),
    (dict(popularity=95), "School Royalty"),
    (dict(popularity=85, attractiveness=75), "The Golden Student"),
    (dict(fear=65, respect=65), "Respected & Feared"),
    (dict(fear=65), "The Intimidator"),
    (dict(popularity=62, respect=62), "Well-Rounded Student"),
    (dict(attractiveness=70), "The Charmer"),
    (dict(popularity=15), "Social Outcast"),
    (dict(popularity=30, fear=5), "The Invisible Student"),
    (dict(), DEFAULT_TITLE),
])
def test_title_rules_first_match_wins(axes, expected):
    assert derive_title(ReputationStatus(**axes)) == expected


def test_reaction_modifier_for_shy_character_when_player_is_feared():
    modifier = reaction_modifier_for(ReputationStatus(fear=60), ["shy", "kind"])

    assert modifier.attitude_shift == "intimidated"
    assert modifier.dialogue_modifier == "nervous and stuttering"
    assert modifier.relationship_bonus == -15


def test_reaction_modifier_for_popular_character():
    assert reaction_modifier_for(ReputationStatus(popularity=85), ["popular"]).attitude_shift == "impressed"
    assert reaction_modifier_for(ReputationStatus(popularity=20), ["popular"]).attitude_shift == "dismissive"


def test_rebellious_contempt_needs_both_conditions():
    status = ReputationStatus(respect=20, fear=10)
    assert reaction_modifier_for(status, ["rebellious"]).relationship_bonus == -20

    status = ReputationStatus(respect=20, fear=30)
    assert reaction_modifier_for(status, ["rebellious"]).attitude_shift == "normal"


def test_no_matching_trait_is_neutral():
    modifier = reaction_modifier_for(ReputationStatus(fear=90), ["cheerful"])

    assert modifier.attitude_shift == "normal"
    assert modifier.dialogue_modifier == "treats you normally"
    assert modifier.relationship_bonus == 0


def test_catalog_lookups():
    definition = AchievementDefinition(
        id="rooftop_access",
        name="Sky High Rebel",
        description="Found a way to access the school rooftop",
        category="rebel",
        trigger_event="accessed_rooftop",
    )
    catalog = AchievementCatalog(achievements=(definition,))

    assert catalog.find_by_trigger("accessed_rooftop") == definition
    assert catalog.find_by_trigger("rooftop_access") is None
    assert catalog.get("rooftop_access") == definition


def test_has_achievement():
    status = ReputationStatus()
    assert not status.has_achievement("first_kiss")

    status.achievements.append(_unlocked("first_kiss"))

    assert status.has_achievement("first_kiss")


def _unlocked(achievement_id: str):
    return UnlockedAchievement(
        id=achievement_id,
        name="Not a Simp Anymore",
        description="...",
        category="romantic",
        trigger_event="first_kiss_success",
        unlocked_at=datetime.now(timezone.utc),
    )
