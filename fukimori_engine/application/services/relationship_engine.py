import logging
import math
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Tuple

from fukimori_engine.application.services.character_registry import CharacterRegistry, RelationshipDelta
from fukimori_engine.domain.classifiers import classify_action
from fukimori_engine.domain.entities import Character, GameSession, clamp_score
from fukimori_engine.domain.story_memory import StoryMemory

logger = logging.getLogger(__name__)

# Reaction strength of a witness, from the actor's affection toward them.
STRONG_BOND_AFFECTION = 70
HOSTILE_BOND_AFFECTION = 30
STRONG_BOND_MULTIPLIER = 1.5
HOSTILE_BOND_MULTIPLIER = 1.3

FRIEND_AFFECTION = 60
ENEMY_AFFECTION = 40
POPULAR_REPUTATION = 70
UNPOPULAR_REPUTATION = 30
POPULAR_PRESENCE_PRESSURE = 2
TENSE_PRESSURE = 5

HEARSAY_FACTOR = 0.5

# Where characters are assumed to hang out when nobody tracks their position.
TEACHER_LOCATIONS = ("faculty_room", "classroom_1a", "library", "science_lab")
STUDENT_LOCATIONS = ("cafeteria", "courtyard", "library", "club_building")
ATHLETE_LOCATIONS = ("gymnasium", "courtyard")
COMMON_LOCATIONS = ("courtyard", "cafeteria", "main_hallway")


class SocialContext(BaseModel):
    characters_present: List[str] = Field(default_factory=list)
    social_pressure: int = 0
    reputation_modifier: int = 0
    group_dynamics: str = "neutral"


class GroupInteractionResult(BaseModel):
    impact_bucket: str
    witness_deltas: Dict[str, int] = Field(default_factory=dict)
    reputation_change: int = 0
    memory: StoryMemory


class CharacterReaction(BaseModel):
    base_attitude: str = "neutral"
    trust_level: str = "unknown"
    social_standing: str = "neutral"
    interaction_style: str = "polite"


def _banded(value: int, bands: Tuple[Tuple[int, str], ...], default: str) -> str:
    for bound, label in bands:
        if value > bound:
            return label
    return default


ATTITUDE_BANDS = ((80, "very friendly"), (60, "friendly"), (40, "neutral"), (20, "distant"))
TRUST_BANDS = ((80, "complete trust"), (60, "high trust"), (40, "moderate trust"), (20, "low trust"))


def would_be_present(character: Character, location_id: str) -> bool:
    """Rough guess of whether a character hangs around a location."""
    if "teacher" in character.reputation_tags:
        return location_id in TEACHER_LOCATIONS
    if "student" in character.reputation_tags:
        return location_id in STUDENT_LOCATIONS
    if character.abilities.athletic.sports:
        return location_id in ATHLETE_LOCATIONS
    return location_id in COMMON_LOCATIONS


class RelationshipPropagationEngine:
    """
    Turns a single witnessed action into relationship and reputation
    changes across the social graph of a session.

    All methods are synchronous and deterministic; the same inputs on the
    same session state always produce the same changes.
    """

    def __init__(self, registry: CharacterRegistry):
        self._registry = registry

    @staticmethod
    def _reaction_strength(actor: Character, witness_id: str) -> float:
        relationship = actor.relationships.get(witness_id)
        if relationship is None:
            return 1.0
        if relationship.affection_level > STRONG_BOND_AFFECTION:
            return STRONG_BOND_MULTIPLIER
        if relationship.affection_level < HOSTILE_BOND_AFFECTION:
            return HOSTILE_BOND_MULTIPLIER
        return 1.0

    def process_group_interaction(
        self,
        session: GameSession,
        actor_id: str,
        action: str,
        emotion: str,
        witness_ids: List[str],
        location: str,
    ) -> GroupInteractionResult:
        """
        Applies the social consequences of `action` performed by the actor in
        front of the witnesses. Raises CharacterNotFoundError if the actor
        does not exist; unknown witnesses are skipped.
        """
        actor = self._registry.require_character(session, actor_id)
        rule = classify_action(action)
        # Computed before any relationship changes.
        social_context = self.get_social_context(session, actor_id, location)

        witness_deltas: Dict[str, int] = {}
        for witness_id in witness_ids:
            if witness_id == actor_id:
                continue
            if self._registry.get_character(session, witness_id) is None:
                logger.warning("Skipping unknown witness '%s' of '%s'.", witness_id, actor_id)
                continue

            delta = math.floor(rule.base_impact * self._reaction_strength(actor, witness_id))
            self._registry.update_relationship(
                session, actor_id, witness_id,
                RelationshipDelta(affection_change=delta, new_memory=f"{actor.name} {action} in {location}"),
            )
            self._registry.update_relationship(
                session, witness_id, actor_id,
                RelationshipDelta(affection_change=delta, new_memory=f"Witnessed {actor.name} {action}"),
            )
            witness_deltas[witness_id] = delta

        reputation_change = 0
        if rule.reputation_sign:
            magnitude = math.floor((social_context.reputation_modifier + len(witness_ids)) / 2)
            reputation_change = rule.reputation_sign * magnitude
            social = actor.abilities.social
            social.reputation = clamp_score(social.reputation + reputation_change)

        memory = StoryMemory(
            participants=[actor_id, *witness_ids],
            location=location,
            summary=f"{actor.name} {action} in front of {len(witness_ids)} others",
            emotional_tone=emotion,
        )
        session.story_memory.append(memory)

        return GroupInteractionResult(
            impact_bucket=rule.bucket,
            witness_deltas=witness_deltas,
            reputation_change=reputation_change,
            memory=memory,
        )

    def get_social_context(self, session: GameSession, character_id: str, location: str) -> SocialContext:
        character = self._registry.get_character(session, character_id)
        if character is None:
            return SocialContext()

        present: List[str] = []
        pressure = 0
        friends = 0
        enemies = 0
        # Nobody is assumed present at a location the world does not define.
        candidates = self._registry.all_characters(session) if location in session.locations else []
        for other in candidates:
            if other.id == character_id or not would_be_present(other, location):
                continue
            present.append(other.id)

            relationship = character.relationships.get(other.id)
            if relationship is not None:
                if relationship.affection_level > FRIEND_AFFECTION:
                    friends += 1
                elif relationship.affection_level < ENEMY_AFFECTION:
                    enemies += 1

            if other.abilities.social.reputation > POPULAR_REPUTATION:
                pressure += POPULAR_PRESENCE_PRESSURE

        reputation = character.abilities.social.reputation
        modifier = 0
        if reputation > POPULAR_REPUTATION:
            modifier = 2
        elif reputation < UNPOPULAR_REPUTATION:
            modifier = -1

        dynamics = "neutral"
        if friends > enemies + 1:
            dynamics = "supportive"
        elif enemies > friends + 1:
            dynamics = "hostile"
        elif pressure > TENSE_PRESSURE:
            dynamics = "tense"

        return SocialContext(
            characters_present=present,
            social_pressure=pressure,
            reputation_modifier=modifier,
            group_dynamics=dynamics,
        )

    def _social_circle(self, witness: Character) -> List[str]:
        circle = list(witness.abilities.social.social_circle)
        circle.extend(
            other_id for other_id, rel in witness.relationships.items()
            if rel.affection_level > FRIEND_AFFECTION
        )
        return list(dict.fromkeys(circle))

    def update_player_reputation_from_witnesses(
        self,
        session: GameSession,
        action: str,
        witness_ids: List[str],
        base_delta: int,
    ) -> Dict[str, int]:
        """
        Direct witnesses change their view of the player by `base_delta`;
        members of each witness's social circle hear about it and change by
        half of that, rounded down, once per witness whose circle they are in.
        A direct witness can hear about it from another witness as well.
        Hearsay does not travel further.

        Returns the total affection change applied per character.
        """
        player_id = session.player_id
        direct = [w for w in dict.fromkeys(witness_ids) if w != player_id]
        hearsay_delta = math.floor(base_delta * HEARSAY_FACTOR)
        applied: Dict[str, int] = {}

        for witness_id in direct:
            witness = self._registry.get_character(session, witness_id)
            if witness is None:
                logger.warning("Skipping unknown witness '%s'.", witness_id)
                continue
            self._registry.update_relationship(
                session, witness_id, player_id,
                RelationshipDelta(affection_change=base_delta, new_memory=f"Witnessed player {action}"),
            )
            applied[witness_id] = applied.get(witness_id, 0) + base_delta

            for member_id in self._social_circle(witness):
                if member_id in (player_id, witness_id) or self._registry.get_character(session, member_id) is None:
                    continue
                self._registry.update_relationship(
                    session, member_id, player_id,
                    RelationshipDelta(
                        affection_change=hearsay_delta,
                        new_memory=f"Heard from {witness.name} that player {action}",
                    ),
                )
                applied[member_id] = applied.get(member_id, 0) + hearsay_delta

        return applied

    def get_character_reaction_to_player(self, session: GameSession, character_id: str) -> CharacterReaction:
        character = self._registry.get_character(session, character_id)
        if character is None:
            return CharacterReaction()

        relationship = character.relationships.get(session.player_id)
        affection = relationship.affection_level if relationship else 50
        trust = relationship.trust_level if relationship else 50

        player = self._registry.get_character(session, session.player_id)
        player_reputation = player.abilities.social.reputation if player else 50
        standing = "equal"
        if character.abilities.social.reputation > player_reputation + 20:
            standing = "looks down on player"
        elif character.abilities.social.reputation < player_reputation - 20:
            standing = "looks up to player"

        personality = character.personality
        style = "polite"
        if personality.social_style == "shy" and affection < 60:
            style = "nervous"
        elif "confident" in personality.traits and affection > 70:
            style = "warm and open"
        elif "aggressive" in personality.traits and affection < 40:
            style = "confrontational"

        return CharacterReaction(
            base_attitude=_banded(affection, ATTITUDE_BANDS, "hostile"),
            trust_level=_banded(trust, TRUST_BANDS, "no trust"),
            social_standing=standing,
            interaction_style=style,
        )

    def get_relationship_summary(self, session: GameSession, owner_id: str, other_id: str) -> Optional[str]:
        """One-line description of how the owner sees the other, or None if they have no history."""
        owner = self._registry.get_character(session, owner_id)
        if owner is None:
            return None
        relationship = owner.relationships.get(other_id)
        if relationship is None:
            return None
        return (
            f"{relationship.current_status.value} (affection {relationship.affection_level}, "
            f"trust {relationship.trust_level})"
        )
