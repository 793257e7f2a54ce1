from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Tuple

from fukimori_engine.domain.value_objects import (
    ImmutableValueObject,
    ReactionModifier,
    ReputationEffect,
    Threshold,
)

AXES = ("popularity", "respect", "fear", "attractiveness")
NEUTRAL_AXIS_VALUE = 50
NOTORIETY_MAX = 100

INITIAL_TITLE = "The Transfer Student"
DEFAULT_TITLE = "Regular Student"

AchievementCategory = Literal["social", "academic", "athletic", "romantic", "rebel", "leadership"]
AchievementRarity = Literal["common", "uncommon", "rare", "legendary"]


def _clamp_axis(value: int) -> int:
    return max(0, min(100, value))


class AchievementDefinition(ImmutableValueObject):
    """A static catalog entry. Defined once at start-up."""
    id: str
    name: str
    description: str
    category: AchievementCategory
    reputation_effect: ReputationEffect = Field(default_factory=ReputationEffect)
    trigger_event: str
    rarity: AchievementRarity = "common"


class UnlockedAchievement(AchievementDefinition):
    unlocked_at: datetime


class AchievementCatalog(ImmutableValueObject):
    """Read-only set of achievement definitions shared by every player."""
    achievements: Tuple[AchievementDefinition, ...] = ()

    def find_by_trigger(self, event_key: str) -> Optional[AchievementDefinition]:
        return next((a for a in self.achievements if a.trigger_event == event_key), None)

    def get(self, achievement_id: str) -> Optional[AchievementDefinition]:
        return next((a for a in self.achievements if a.id == achievement_id), None)


class ReputationStatus(BaseModel):
    """
    The player's four reputation axes plus everything derived from them.
    One instance exists per player.
    """
    popularity: int = Field(default=50, ge=0, le=100)
    respect: int = Field(default=50, ge=0, le=100)
    fear: int = Field(default=0, ge=0, le=100)
    attractiveness: int = Field(default=50, ge=0, le=100)
    notoriety: int = Field(default=10, ge=0, le=100)
    current_title: str = INITIAL_TITLE
    achievements: List[UnlockedAchievement] = Field(default_factory=list)

    def axis(self, name: str) -> int:
        if name not in AXES:
            raise ValueError(f"Unknown reputation axis '{name}'.")
        return getattr(self, name)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)

    def apply_effect(self, effect: ReputationEffect) -> None:
        # Each axis is clamped independently.
        self.popularity = _clamp_axis(self.popularity + effect.popularity_change)
        self.respect = _clamp_axis(self.respect + effect.respect_change)
        self.fear = _clamp_axis(self.fear + effect.fear_change)
        self.attractiveness = _clamp_axis(self.attractiveness + effect.attractiveness_change)
        self.notoriety = calculate_notoriety(self)


def calculate_notoriety(status: ReputationStatus) -> int:
    """How far the most extreme axis sits from the neutral midpoint, doubled."""
    extremeness = max(abs(status.axis(axis) - NEUTRAL_AXIS_VALUE) for axis in AXES)
    return min(NOTORIETY_MAX, extremeness * 2)


class TitleRule(ImmutableValueObject):
    title: str
    conditions: Tuple[Threshold, ...]

    def matches(self, status: ReputationStatus) -> bool:
        return all(c.matches(status.axis(c.axis)) for c in self.conditions)


def _rule(title: str, *conditions: Threshold) -> TitleRule:
    return TitleRule(title=title, conditions=conditions)


def _above(axis: str, value: int) -> Threshold:
    return Threshold(axis=axis, above=value)


def _below(axis: str, value: int) -> Threshold:
    return Threshold(axis=axis, below=value)


# Priority order matters: the first matching rule wins.
TITLE_RULES: Tuple[TitleRule, ...] = (
    # Legendary
    _rule("The Untouchable", _above("fear", 80)),
    _rule("School Royalty", _above("popularity", 90)),
    _rule("The Legend", _above("respect", 90)),
    _rule("Heartbreaker Supreme", _above("attractiveness", 90)),
    # High status
    _rule("The Golden Student", _above("popularity", 80), _above("attractiveness", 70)),
    _rule("Respected & Feared", _above("fear", 60), _above("respect", 60)),
    _rule("School Celebrity", _above("popularity", 75)),
    _rule("The Respected One", _above("respect", 75)),
    _rule("The Heartbreaker", _above("attractiveness", 75)),
    _rule("The Intimidator", _above("fear", 60)),
    # Balanced
    _rule("Well-Rounded Student", _above("popularity", 60), _above("respect", 60)),
    _rule("Popular Kid", _above("popularity", 65)),
    _rule("The Reliable One", _above("respect", 65)),
    _rule("The Charmer", _above("attractiveness", 65)),
    # Low status
    _rule("Social Outcast", _below("popularity", 20)),
    _rule("The Disappointment", _below("respect", 20)),
    _rule("Romantically Challenged", _below("attractiveness", 20)),
    _rule("The Invisible Student", _below("fear", 10), _below("popularity", 40)),
)


def derive_title(status: ReputationStatus) -> str:
    for rule in TITLE_RULES:
        if rule.matches(status):
            return rule.title
    return DEFAULT_TITLE


class ReactionRule(ImmutableValueObject):
    """Applies when the NPC has `trait` and the player's reputation meets every condition."""
    trait: str
    conditions: Tuple[Threshold, ...]
    modifier: ReactionModifier

    def matches(self, status: ReputationStatus, personality_tags: List[str]) -> bool:
        return self.trait in personality_tags and all(
            c.matches(status.axis(c.axis)) for c in self.conditions
        )


def _reaction(trait: str, conditions: Tuple[Threshold, ...], attitude: str, dialogue: str, bonus: int) -> ReactionRule:
    return ReactionRule(
        trait=trait,
        conditions=conditions,
        modifier=ReactionModifier(attitude_shift=attitude, dialogue_modifier=dialogue, relationship_bonus=bonus),
    )


REACTION_RULES: Tuple[ReactionRule, ...] = (
    _reaction("popular", (_above("popularity", 80),), "impressed", "treats you as an equal", 15),
    _reaction("popular", (_below("popularity", 30),), "dismissive", "barely acknowledges you", -10),
    _reaction("shy", (_above("fear", 50),), "intimidated", "nervous and stuttering", -15),
    _reaction("shy", (_above("attractiveness", 70),), "flustered", "blushing and awkward", 5),
    _reaction("rebellious", (_below("respect", 30), _below("fear", 20)), "contemptuous", "mocks you openly", -20),
    _reaction("rebellious", (_above("fear", 60),), "respectful", "acknowledges your reputation", 10),
)

NEUTRAL_REACTION = ReactionModifier()


def reaction_modifier_for(status: ReputationStatus, personality_tags: List[str]) -> ReactionModifier:
    for rule in REACTION_RULES:
        if rule.matches(status, personality_tags):
            return rule.modifier
    return NEUTRAL_REACTION
