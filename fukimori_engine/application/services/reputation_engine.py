import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.reputation import (
    AchievementCatalog,
    ReputationStatus,
    UnlockedAchievement,
    derive_title,
    reaction_modifier_for,
)
from fukimori_engine.domain.value_objects import ReactionModifier

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReputationEngine:
    """
    Unlocks achievements against a shared, read-only catalog and keeps the
    player's reputation axes, notoriety and title in step with them.
    """

    def __init__(self, catalog: AchievementCatalog, clock: Callable[[], datetime] = _utc_now):
        self._catalog = catalog
        self._clock = clock

    @property
    def catalog(self) -> AchievementCatalog:
        return self._catalog

    def trigger_achievement(self, session: GameSession, event_key: str) -> Optional[UnlockedAchievement]:
        """
        Unlocks the achievement bound to `event_key`.
        Returns None if no achievement uses that key or the player already holds it.
        """
        definition = self._catalog.find_by_trigger(event_key)
        if definition is None:
            logger.debug("No achievement is triggered by '%s'.", event_key)
            return None

        status = session.reputation
        if status.has_achievement(definition.id):
            return None

        unlocked = UnlockedAchievement(**definition.model_dump(), unlocked_at=self._clock())
        status.achievements.append(unlocked)
        status.apply_effect(definition.reputation_effect)
        status.current_title = derive_title(status)
        logger.info("Achievement '%s' unlocked in session '%s'.", definition.id, session.id)
        return unlocked

    def get_reputation_status(self, session: GameSession) -> ReputationStatus:
        """A detached copy; mutating it does not affect the session."""
        return session.reputation.model_copy(deep=True)

    def get_character_reaction_modifier(self, session: GameSession, personality_tags: List[str]) -> ReactionModifier:
        return reaction_modifier_for(session.reputation, personality_tags)

    def get_recent_achievements(self, session: GameSession, limit: int = 5) -> List[UnlockedAchievement]:
        """Returns up to `limit` unlocked achievements, most recent first."""
        if limit <= 0:
            return []
        return list(reversed(session.reputation.achievements[-limit:]))

    def has_achievement(self, session: GameSession, achievement_id: str) -> bool:
        return session.reputation.has_achievement(achievement_id)
