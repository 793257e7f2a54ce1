"""
Keyword tables used to classify free text into game-mechanical buckets.

Every classifier has a default bucket, so classification never fails.
The rules are plain data so they can be tested and extended without
touching the engines that consume them.
"""
from typing import Dict, Optional, Tuple

from fukimori_engine.domain.value_objects import ImmutableValueObject


class KeywordRule(ImmutableValueObject):
    keywords: Tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        text = text.lower()
        return any(keyword in text for keyword in self.keywords)


class ActionImpactRule(KeywordRule):
    bucket: str
    base_impact: int
    # Direction of the actor's own social reputation change.
    reputation_sign: int = 0


ACTION_IMPACT_RULES: Tuple[ActionImpactRule, ...] = (
    ActionImpactRule(bucket="positive", keywords=("help", "kind", "generous"), base_impact=3, reputation_sign=1),
    ActionImpactRule(bucket="negative", keywords=("rude", "mean", "selfish"), base_impact=-4, reputation_sign=-1),
    ActionImpactRule(bucket="playful", keywords=("funny", "clever"), base_impact=2),
)
NEUTRAL_ACTION = ActionImpactRule(bucket="neutral", base_impact=0)


def classify_action(action_description: str) -> ActionImpactRule:
    return next((rule for rule in ACTION_IMPACT_RULES if rule.matches(action_description)), NEUTRAL_ACTION)


class ExperienceRule(KeywordRule):
    category: str
    base_xp: int
    skill_category: Optional[str] = None
    # Activity name used to look up the characteristic-based multiplier.
    activity: Optional[str] = None


EXPERIENCE_RULES: Tuple[ExperienceRule, ...] = (
    ExperienceRule(category="academic", keywords=("study", "homework", "class", "learn"),
                   base_xp=15, skill_category="academics", activity="academic"),
    ExperienceRule(category="social", keywords=("hello", "friend", "talk", "chat"),
                   base_xp=12, skill_category="charm", activity="social"),
    ExperienceRule(category="creative", keywords=("art", "music", "creative", "draw"),
                   base_xp=14, skill_category="creativity", activity="creative"),
    ExperienceRule(category="physical", keywords=("exercise", "sports", "gym", "run"),
                   base_xp=13, skill_category="athletics", activity="physical"),
    ExperienceRule(category="empathy", keywords=("help", "support", "comfort"),
                   base_xp=16, skill_category="empathy"),
    ExperienceRule(category="leadership", keywords=("organize", "lead", "suggest"),
                   base_xp=18, skill_category="leadership"),
)
DEFAULT_EXPERIENCE_RULE = ExperienceRule(category="general", base_xp=10)


def classify_experience(user_input: str) -> ExperienceRule:
    return next((rule for rule in EXPERIENCE_RULES if rule.matches(user_input)), DEFAULT_EXPERIENCE_RULE)


EMOTION_XP_BONUS: Dict[str, float] = {
    "happy": 0.5,
    "excited": 0.5,
    "grateful": 0.5,
    "angry": 0.2,
    "annoyed": 0.2,
}
AUTHORITY_XP_BONUS = 0.3
AUTHORITY_ID_MARKERS = ("teacher", "principal")


class CharacteristicWeightRule(KeywordRule):
    characteristic: str


# Matched against the most recent memory summaries on level-up.
CHARACTERISTIC_WEIGHT_RULES: Tuple[CharacteristicWeightRule, ...] = (
    CharacteristicWeightRule(characteristic="academics", keywords=("study", "class")),
    CharacteristicWeightRule(characteristic="athletics", keywords=("exercise", "sports")),
    CharacteristicWeightRule(characteristic="charm", keywords=("social", "friend")),
    CharacteristicWeightRule(characteristic="creativity", keywords=("art", "creative")),
    CharacteristicWeightRule(characteristic="empathy", keywords=("help", "kind")),
    CharacteristicWeightRule(characteristic="leadership", keywords=("lead", "organize")),
    CharacteristicWeightRule(characteristic="courage", keywords=("brave", "stand up")),
)
CHARACTERISTIC_WEIGHT_BONUS = 2
