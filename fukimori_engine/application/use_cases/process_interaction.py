from pydantic import BaseModel
from typing import List, Optional

from fukimori_engine.application.commands.interaction import ProcessInteractionCommand
from fukimori_engine.application.ports.dialogue_generator import (
    DialogueGenerationContext,
    DialogueGenerationResponse,
    IDialogueGenerator,
)
from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.application.services.character_registry import CharacterRegistry, RelationshipDelta
from fukimori_engine.application.services.memory_service import MemoryService
from fukimori_engine.application.services.progression_engine import PlayerProgressionEngine
from fukimori_engine.application.services.relationship_engine import (
    GroupInteractionResult,
    RelationshipPropagationEngine,
)
from fukimori_engine.application.services.reputation_engine import ReputationEngine
from fukimori_engine.domain.entities import Character, GameSession
from fukimori_engine.domain.errors import SessionNotFoundError
from fukimori_engine.domain.events import (
    AchievementUnlocked,
    DialogueOccurred,
    DomainEvent,
    ExperienceAwarded,
    GroupInteractionProcessed,
    PlayerLeveledUp,
    RelationshipChanged,
)
from fukimori_engine.domain.progression import LevelUpResult
from fukimori_engine.domain.reputation import UnlockedAchievement
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry

# How the responder's reply moves their feelings about the player.
WARM_EMOTIONS = ("happy", "excited")
COLD_EMOTIONS = ("angry", "annoyed")
WARM_AFFECTION_CHANGE = 2
COLD_AFFECTION_CHANGE = -3


class InteractionOutcome(BaseModel):
    response: DialogueGenerationResponse
    experience_gained: int
    level_up: Optional[LevelUpResult] = None
    achievement_unlocked: Optional[UnlockedAchievement] = None
    group_interaction: Optional[GroupInteractionResult] = None


class ProcessInteractionHandler:
    """
    Handles one Interaction Event from start to finish.
    The dialogue is generated before anything is mutated, so a failed
    generator call leaves the session untouched.
    """
    def __init__(
        self,
        session_repository: IGameSessionRepository,
        event_bus: IEventBus,
        session_locks: SessionLockRegistry,
        dialogue_generator: IDialogueGenerator,
        character_registry: CharacterRegistry,
        memory_service: MemoryService,
        relationship_engine: RelationshipPropagationEngine,
        reputation_engine: ReputationEngine,
        progression_engine: PlayerProgressionEngine,
    ):
        self._repo = session_repository
        self._bus = event_bus
        self._locks = session_locks
        self._generator = dialogue_generator
        self._registry = character_registry
        self._memory = memory_service
        self._relationships = relationship_engine
        self._reputation = reputation_engine
        self._progression = progression_engine

    async def execute(self, command: ProcessInteractionCommand) -> InteractionOutcome:
        """
        1. Builds the dialogue context from memories, social context and reputation.
        2. Asks the generator for the responder's reply.
        3. Adjusts the responder's feelings and propagates the action to witnesses.
        4. Records the dialogue, awards experience and checks achievements.
        5. Saves the session and publishes what happened.
        """
        async with self._locks.hold(command.session_id):
            session = await self._repo.get_by_id(command.session_id)
            if not session:
                raise SessionNotFoundError(command.session_id)

            responder = self._registry.require_character(session, command.character_id)
            context = self._build_context(session, responder, command)
            response = await self._generator.generate_dialogue(context)
            emotion = response.emotion.lower()

            events: List[DomainEvent] = []
            player_id = session.player_id

            relationship_event = self._react_to_player(session, responder, command.user_input, emotion)
            if relationship_event:
                events.append(relationship_event)

            group_result = None
            witnesses = [w for w in command.witness_ids if w not in (player_id, responder.id)]
            if witnesses and self._registry.get_character(session, player_id):
                group_result = self._relationships.process_group_interaction(
                    session, player_id, command.user_input, emotion, witnesses, command.location_id,
                )
                events.append(GroupInteractionProcessed(
                    session_id=session.id,
                    actor_id=player_id,
                    action=command.user_input,
                    location_id=command.location_id,
                    witness_ids=witnesses,
                    impact_bucket=group_result.impact_bucket,
                    reputation_change=group_result.reputation_change,
                ))

            self._memory.record(
                session,
                participants=[player_id, responder.id],
                location=command.location_id,
                summary=f"Player talked to {responder.name}: {command.user_input}",
                emotional_tone=emotion,
                dialogue_highlights=[
                    f"Player: \"{command.user_input}\"",
                    f"{responder.name}: \"{response.dialogue}\"",
                ],
            )
            events.append(DialogueOccurred(
                session_id=session.id,
                speaker_id=player_id,
                listener_id=responder.id,
                dialogue_text=response.dialogue,
                emotion=emotion,
            ))

            gain = self._progression.calculate_experience_gain(session, command.user_input, emotion, responder.id)
            level_up = self._progression.award_experience(session, gain)
            events.append(ExperienceAwarded(
                session_id=session.id, amount=gain.amount, source=gain.source, skill_category=gain.skill_category,
            ))
            if level_up.leveled_up:
                events.append(PlayerLeveledUp(
                    session_id=session.id,
                    new_level=level_up.new_level,
                    characteristics_improved=level_up.characteristics_improved,
                    actions_unlocked=level_up.actions_unlocked,
                    skills_unlocked=level_up.skills_unlocked,
                ))

            achievement = None
            for event_key in self._achievement_keys(responder.id, command.user_input, emotion):
                unlocked = self._reputation.trigger_achievement(session, event_key)
                if unlocked:
                    achievement = unlocked
                    events.append(AchievementUnlocked(
                        session_id=session.id,
                        achievement_id=unlocked.id,
                        achievement_name=unlocked.name,
                        new_title=session.reputation.current_title,
                    ))

            await self._repo.save(session)

        for event in events:
            await self._bus.publish(event, session)

        return InteractionOutcome(
            response=response,
            experience_gained=gain.amount,
            level_up=level_up if level_up.leveled_up else None,
            achievement_unlocked=achievement,
            group_interaction=group_result,
        )

    def _build_context(
        self, session: GameSession, responder: Character, command: ProcessInteractionCommand,
    ) -> DialogueGenerationContext:
        memories = self._memory.relevant_memories(session, responder.id, command.user_input)
        social = self._relationships.get_social_context(session, responder.id, command.location_id)
        modifier = self._reputation.get_character_reaction_modifier(session, responder.personality.traits)
        relationship = self._relationships.get_relationship_summary(session, responder.id, session.player_id)
        location = session.locations.get(command.location_id)

        return DialogueGenerationContext(
            character_id=responder.id,
            character_name=responder.name,
            personality_prompt=responder.personality_prompt(),
            location_name=location.name if location else command.location_id,
            location_description=location.description if location else "",
            player_input=command.user_input,
            relationship_summary=relationship or "no history with the player",
            relevant_memories=self._memory.format_for_prompt(memories),
            group_dynamics=social.group_dynamics,
            characters_present=social.characters_present,
            attitude_shift=modifier.attitude_shift,
            dialogue_modifier=modifier.dialogue_modifier,
            player_title=session.reputation.current_title,
        )

    def _react_to_player(
        self, session: GameSession, responder: Character, user_input: str, emotion: str,
    ) -> Optional[RelationshipChanged]:
        if emotion in WARM_EMOTIONS:
            delta = RelationshipDelta(
                affection_change=WARM_AFFECTION_CHANGE, new_memory=f"Player interaction: {user_input}",
            )
        elif emotion in COLD_EMOTIONS:
            delta = RelationshipDelta(
                affection_change=COLD_AFFECTION_CHANGE, conflict_event=f"Player upset them: {user_input}",
            )
        else:
            return None

        relationship = self._registry.update_relationship(session, responder.id, session.player_id, delta)
        return RelationshipChanged(
            session_id=session.id,
            owner_id=responder.id,
            other_id=session.player_id,
            affection_change=delta.affection_change,
            new_affection=relationship.affection_level,
            new_status=relationship.current_status.value,
        )

    @staticmethod
    def _achievement_keys(responder_id: str, user_input: str, emotion: str) -> List[str]:
        keys = []
        if emotion == "happy" and "kiss" in user_input.lower():
            keys.append("first_kiss_success")
        if "popular" in responder_id and emotion == "love":
            keys.append("dating_most_popular_girl")
        return keys
