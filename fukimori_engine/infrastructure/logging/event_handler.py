from typing import Optional

from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.application.ports.logger import ILogger
from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.events import (
    AchievementUnlocked,
    CharacterCreated,
    DialogueOccurred,
    DomainEvent,
    ExperienceAwarded,
    GroupInteractionProcessed,
    PlayerLeveledUp,
    RelationshipChanged,
)


class LoggingEventHandler:
    """
    Writes a human-readable line to the game log for every domain event.
    """
    def __init__(self, logger: ILogger):
        self._logger = logger

    async def handle(self, event: DomainEvent, session: Optional[GameSession] = None):
        # Failures are logged, never raised to the publisher.
        try:
            self._logger.info(f"[{event.session_id}] {self.describe(event, session)}")
        except Exception as e:
            self._logger.error(f"Error in LoggingEventHandler: {e}")

    @staticmethod
    def _name_of(character_id: str, session: Optional[GameSession]) -> str:
        if session:
            character = session.characters.get(character_id)
            if character:
                return character.name
        return character_id

    def describe(self, event: DomainEvent, session: Optional[GameSession] = None) -> str:
        if isinstance(event, CharacterCreated):
            return f"CHARACTER CREATED: '{event.character_name}' ({event.character_id})."
        if isinstance(event, RelationshipChanged):
            return (
                f"RELATIONSHIP: {self._name_of(event.owner_id, session)} -> {self._name_of(event.other_id, session)} "
                f"{event.affection_change:+d}, now {event.new_affection} ({event.new_status})."
            )
        if isinstance(event, GroupInteractionProcessed):
            return (
                f"GROUP INTERACTION: {self._name_of(event.actor_id, session)} '{event.action}' at "
                f"{event.location_id} seen by {len(event.witness_ids)} ({event.impact_bucket}, "
                f"reputation {event.reputation_change:+d})."
            )
        if isinstance(event, DialogueOccurred):
            return (
                f"DIALOGUE: {self._name_of(event.listener_id, session)} replied to "
                f"{self._name_of(event.speaker_id, session)} [{event.emotion}]: \"{event.dialogue_text}\""
            )
        if isinstance(event, AchievementUnlocked):
            return f"ACHIEVEMENT: '{event.achievement_name}' unlocked. Title is now '{event.new_title}'."
        if isinstance(event, ExperienceAwarded):
            skill = f" ({event.skill_category})" if event.skill_category else ""
            return f"EXPERIENCE: +{event.amount} XP from {event.source}{skill}."
        if isinstance(event, PlayerLeveledUp):
            return (
                f"LEVEL UP: reached level {event.new_level}; improved {', '.join(event.characteristics_improved)}"
                + (f"; unlocked actions {', '.join(event.actions_unlocked)}" if event.actions_unlocked else "")
                + (f"; unlocked skills {', '.join(event.skills_unlocked)}" if event.skills_unlocked else "")
                + "."
            )
        return f"EVENT: {event.name}"

    def subscribe(self, event_bus: IEventBus):
        event_bus.subscribe(DomainEvent, self.handle)
