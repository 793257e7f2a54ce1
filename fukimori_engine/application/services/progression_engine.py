import logging
import math
import random
from typing import Dict, List, Optional

from fukimori_engine.domain.classifiers import (
    AUTHORITY_ID_MARKERS,
    AUTHORITY_XP_BONUS,
    CHARACTERISTIC_WEIGHT_BONUS,
    CHARACTERISTIC_WEIGHT_RULES,
    EMOTION_XP_BONUS,
    classify_experience,
)
from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.progression import (
    ACTION_UNLOCKS_BY_LEVEL,
    CAPACITY_BONUS,
    CAPACITY_BONUS_LEVEL_INTERVAL,
    CHARACTERISTIC_LEVEL_UP_BONUS,
    CHARACTERISTICS,
    LEVEL_XP_GROWTH,
    SKILL_UNLOCKS_BY_LEVEL,
    SKILL_XP_PER_LEVEL,
    ExperienceGain,
    LevelUpResult,
    PlayerStats,
)
from fukimori_engine.domain.story_memory import StoryMemory

logger = logging.getLogger(__name__)

# Memories consulted when choosing which characteristic improves.
LEVEL_UP_MEMORY_WINDOW = 10

# Activity -> characteristic that scales experience for it.
ACTIVITY_CHARACTERISTICS = {
    "academic": "academics",
    "social": "charm",
    "physical": "athletics",
    "creative": "creativity",
}
MIN_EXPERIENCE_MULTIPLIER = 0.5
MAX_EXPERIENCE_MULTIPLIER = 2.0

PROGRESSION_LOCATION = "progression_system"


class PlayerProgressionEngine:
    """
    Levels, characteristics, skills and inventory of the player.

    The only source of randomness is the injected `rng`, used for the
    weighted characteristic draw on level-up. Pass a seeded
    `random.Random` to make level-ups reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def award_experience(self, session: GameSession, gain: ExperienceGain) -> LevelUpResult:
        stats = session.progression
        stats.experience += gain.amount

        skill_levels_gained = 0
        if gain.skill_category and gain.skill_category in stats.skills:
            skill = stats.skills[gain.skill_category]
            skill.experience += gain.amount
            # A large award may cover several skill levels.
            while skill.experience >= skill.level * SKILL_XP_PER_LEVEL:
                skill.experience -= skill.level * SKILL_XP_PER_LEVEL
                skill.level += 1
                skill_levels_gained += 1

        result = self._check_level_up(session)
        result.skill_levels_gained = skill_levels_gained

        session.story_memory.append(StoryMemory(
            participants=[session.player_id],
            location=PROGRESSION_LOCATION,
            summary=f"Player gained {gain.amount} XP from {gain.source}: {gain.description}",
            emotional_tone="accomplished",
            consequences=[f"Level up to {result.new_level}"] if result.leveled_up else [],
        ))
        return result

    def _check_level_up(self, session: GameSession) -> LevelUpResult:
        stats = session.progression
        result = LevelUpResult()

        while stats.experience >= stats.experience_to_next:
            stats.experience -= stats.experience_to_next
            stats.level += 1
            stats.experience_to_next = math.floor(stats.experience_to_next * LEVEL_XP_GROWTH)
            result.levels_gained += 1

            characteristic = self._choose_characteristic(session)
            stats.characteristics.improve(characteristic, CHARACTERISTIC_LEVEL_UP_BONUS)
            result.characteristics_improved.append(characteristic)

            action = ACTION_UNLOCKS_BY_LEVEL.get(stats.level)
            if action and action not in stats.unlocked_actions:
                stats.unlocked_actions.append(action)
                result.actions_unlocked.append(action)

            skill_name = SKILL_UNLOCKS_BY_LEVEL.get(stats.level)
            if skill_name and skill_name in stats.skills and not stats.skills[skill_name].unlocked:
                stats.skills[skill_name].unlocked = True
                result.skills_unlocked.append(skill_name)

            if stats.level % CAPACITY_BONUS_LEVEL_INTERVAL == 0:
                stats.inventory.max_capacity += CAPACITY_BONUS

            logger.info("Player in session '%s' reached level %d.", session.id, stats.level)

        if result.levels_gained:
            result.leveled_up = True
            result.new_level = stats.level
        return result

    def _choose_characteristic(self, session: GameSession) -> str:
        weights: Dict[str, int] = {name: 1 for name in CHARACTERISTICS}
        for memory in session.story_memory.recent(LEVEL_UP_MEMORY_WINDOW):
            for rule in CHARACTERISTIC_WEIGHT_RULES:
                if rule.matches(memory.summary):
                    weights[rule.characteristic] += CHARACTERISTIC_WEIGHT_BONUS

        remaining = self._rng.random() * sum(weights.values())
        for name in CHARACTERISTICS:
            remaining -= weights[name]
            if remaining <= 0:
                return name
        return CHARACTERISTICS[0]

    def can_perform_action(self, session: GameSession, action_key: str) -> bool:
        return action_key in session.progression.unlocked_actions

    def add_item(self, session: GameSession, item: str, is_special: bool = False) -> bool:
        """Special items ignore capacity. Returns False, changing nothing, when the bag is full."""
        inventory = session.progression.inventory
        if is_special:
            inventory.special_items.append(item)
            return True
        if inventory.is_full:
            return False
        inventory.items.append(item)
        return True

    def remove_item(self, session: GameSession, item: str) -> bool:
        items = session.progression.inventory.items
        if item not in items:
            return False
        items.remove(item)
        return True

    def get_experience_multiplier(self, session: GameSession, activity: Optional[str]) -> float:
        multiplier = 1.0
        characteristic = ACTIVITY_CHARACTERISTICS.get(activity or "")
        if characteristic:
            multiplier += (session.progression.characteristics.get(characteristic) - 50) / 100
        return max(MIN_EXPERIENCE_MULTIPLIER, min(MAX_EXPERIENCE_MULTIPLIER, multiplier))

    def calculate_experience_gain(
        self,
        session: GameSession,
        user_input: str,
        emotion: str,
        character_id: str,
    ) -> ExperienceGain:
        """Classifies what the player said into an experience award. Never fails."""
        rule = classify_experience(user_input)
        multiplier = self.get_experience_multiplier(session, rule.activity)
        multiplier += EMOTION_XP_BONUS.get(emotion.lower(), 0.0)
        if any(marker in character_id.lower() for marker in AUTHORITY_ID_MARKERS):
            multiplier += AUTHORITY_XP_BONUS

        return ExperienceGain(
            amount=math.floor(rule.base_xp * multiplier),
            source=f"{rule.category}_interaction",
            skill_category=rule.skill_category,
            description=f"Interaction with {character_id}",
        )

    def get_player_stats(self, session: GameSession) -> PlayerStats:
        """A detached copy of the player's progression."""
        return session.progression.model_copy(deep=True)

    def get_skill_level(self, session: GameSession, skill_name: str) -> int:
        skill = session.progression.skills.get(skill_name)
        return skill.level if skill else 0

    def is_skill_unlocked(self, session: GameSession, skill_name: str) -> bool:
        skill = session.progression.skills.get(skill_name)
        return bool(skill and skill.unlocked)

    def unlocked_skills(self, session: GameSession) -> List[str]:
        return [name for name, skill in session.progression.skills.items() if skill.unlocked]
