from enum import Enum
from pydantic import BaseModel, Field, model_validator
from typing import NewType, List, Dict, Optional

from fukimori_engine.domain.value_objects import (
    Appearance,
    Background,
    DailyRoutine,
    ImmutableValueObject,
    Personality,
)
from fukimori_engine.domain.story_memory import StoryMemoryLog
from fukimori_engine.domain.reputation import ReputationStatus
from fukimori_engine.domain.progression import PlayerStats

# Using NewType for semantic clarity in the domain model.
CharacterId = NewType('CharacterId', str)
LocationId = NewType('LocationId', str)

PLAYER_ID = CharacterId("player")

SCORE_MIN = 0
SCORE_MAX = 100

# A brand new relationship starts neutral.
DEFAULT_RELATIONSHIP_TYPE = "acquaintance"
NEUTRAL_AFFECTION = 50
NEUTRAL_TRUST = 50

# Shared memories and conflicts are append-only but capped, oldest dropped first.
RELATIONSHIP_HISTORY_LIMIT = 50


def clamp_score(value: float) -> int:
    """Clamps any score (affection, trust, reputation, characteristic) into [0, 100]."""
    return int(max(SCORE_MIN, min(SCORE_MAX, value)))


class RelationshipStatus(str, Enum):
    CLOSE_FRIEND = "close friend"
    FRIEND = "friend"
    ACQUAINTANCE = "acquaintance"
    DISTANT = "distant"
    DISLIKE = "dislike"


# Evaluated top to bottom, affection must be strictly greater than the bound.
RELATIONSHIP_STATUS_THRESHOLDS = (
    (80, RelationshipStatus.CLOSE_FRIEND),
    (60, RelationshipStatus.FRIEND),
    (40, RelationshipStatus.ACQUAINTANCE),
    (20, RelationshipStatus.DISTANT),
)


def status_for_affection(affection: int) -> RelationshipStatus:
    for bound, status in RELATIONSHIP_STATUS_THRESHOLDS:
        if affection > bound:
            return status
    return RelationshipStatus.DISLIKE


def _append_capped(entries: List[str], entry: str, limit: int) -> None:
    entries.append(entry)
    if len(entries) > limit:
        del entries[:len(entries) - limit]


class Relationship(BaseModel):
    """
    How one character feels about another.
    This is a one-way relationship owned by the holder; A's view of B
    is never the same object as B's view of A.
    """
    type: str = DEFAULT_RELATIONSHIP_TYPE # free-form tag, e.g. "friend", "teacher-student"
    affection_level: int = Field(default=NEUTRAL_AFFECTION, ge=SCORE_MIN, le=SCORE_MAX)
    trust_level: int = Field(default=NEUTRAL_TRUST, ge=SCORE_MIN, le=SCORE_MAX)
    current_status: RelationshipStatus = RelationshipStatus.ACQUAINTANCE
    shared_memories: List[str] = Field(default_factory=list)
    conflict_history: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def derive_status(self) -> "Relationship":
        self.current_status = status_for_affection(self.affection_level)
        return self

    def apply(
        self,
        affection_change: int = 0,
        trust_change: int = 0,
        new_memory: Optional[str] = None,
        conflict_event: Optional[str] = None,
        history_limit: int = RELATIONSHIP_HISTORY_LIMIT,
    ) -> None:
        """Applies clamped deltas and recomputes the derived status."""
        self.affection_level = clamp_score(self.affection_level + affection_change)
        self.trust_level = clamp_score(self.trust_level + trust_change)
        if new_memory:
            _append_capped(self.shared_memories, new_memory, history_limit)
        if conflict_event:
            _append_capped(self.conflict_history, conflict_event, history_limit)
        self.current_status = status_for_affection(self.affection_level)


class AcademicAbility(BaseModel):
    subjects: List[str] = Field(default_factory=list)
    average_grade: str = "B"
    study_habits: str = "regular"
    score: int = Field(default=50, ge=SCORE_MIN, le=SCORE_MAX)


class AthleticAbility(BaseModel):
    sports: List[str] = Field(default_factory=list)
    physical_strength: int = 5 # 1-10
    endurance: int = 5 # 1-10
    score: int = Field(default=50, ge=SCORE_MIN, le=SCORE_MAX)


class ArtisticAbility(BaseModel):
    talents: List[str] = Field(default_factory=list)
    skill_level: str = "beginner"
    score: int = Field(default=50, ge=SCORE_MIN, le=SCORE_MAX)


class SocialAbility(BaseModel):
    # The character's standing in the school. Mutated by group interactions.
    reputation: int = Field(default=50, ge=SCORE_MIN, le=SCORE_MAX)
    popularity_level: str = "average"
    social_circle: List[CharacterId] = Field(default_factory=list)


class SupernaturalAbility(ImmutableValueObject):
    powers: List[str] = Field(default_factory=list)
    power_level: int = 1
    limitations: List[str] = Field(default_factory=list)
    awakening_story: str = ""
    control_level: str = "unstable"


class Abilities(BaseModel):
    academic: AcademicAbility = Field(default_factory=AcademicAbility)
    athletic: AthleticAbility = Field(default_factory=AthleticAbility)
    artistic: ArtisticAbility = Field(default_factory=ArtisticAbility)
    social: SocialAbility = Field(default_factory=SocialAbility)
    supernatural: Optional[SupernaturalAbility] = None


class Character(BaseModel):
    """
    Represents a persistent agent in the game world (player or NPC).
    Appearance, personality and background are frozen value objects;
    abilities and relationships change continuously through play.
    """
    id: CharacterId
    name: str = "Unknown Student"
    age: int = 16
    gender: str = "unknown"

    appearance: Appearance = Field(default_factory=Appearance)
    personality: Personality = Field(default_factory=Personality)
    background: Background = Field(default_factory=Background)
    abilities: Abilities = Field(default_factory=Abilities)

    relationships: Dict[CharacterId, Relationship] = Field(default_factory=dict)
    daily_routine: DailyRoutine = Field(default_factory=DailyRoutine)
    reputation_tags: List[str] = Field(default_factory=list) # e.g. "teacher", "student"

    def appearance_prompt(self, situation: str = "school") -> str:
        """Builds a stable description for the image generator."""
        outfits = self.appearance.outfits
        outfit = outfits.school_uniform
        if situation == "casual" and outfits.casual_wear:
            outfit = outfits.casual_wear[0]
        elif situation == "special" and outfits.special_outfits:
            outfit = outfits.special_outfits[0]

        accessories = ""
        if outfits.accessories:
            accessories = f", wearing {' and '.join(outfits.accessories)}"

        return (
            f"{self.name}: {self.age}-year-old {self.gender}, "
            f"{self.appearance.hair_color} {self.appearance.hair_style} hair, "
            f"{self.appearance.eye_color} eyes, {self.appearance.height} height, "
            f"{self.appearance.body_type} build, wearing {outfit}{accessories}. "
            f"Distinctive features: {', '.join(self.appearance.distinctive_features)}. "
            f"Physical marks: {', '.join(self.appearance.physical_marks)}"
        )

    def personality_prompt(self) -> str:
        p = self.personality
        return (
            f"Personality: {', '.join(p.traits)}, {p.social_style} social style, "
            f"{p.speech_pattern} speech pattern. Emotional state should reflect "
            f"their core values: {', '.join(p.core_values)}"
        )


class Location(BaseModel):
    """A place in the school. Loaded once from the world file and never mutated."""
    id: LocationId
    name: str
    type: str = "general"
    description: str = ""
    atmosphere: str = ""
    key_features: List[str] = Field(default_factory=list)
    connected_locations: List[LocationId] = Field(default_factory=list)
    typical_activities: List[str] = Field(default_factory=list)


class GameSession(BaseModel):
    """
    The aggregate root for one player's game.
    Every piece of mutable simulation state hangs off this object, so two
    players never share a registry, a memory log or a reputation.
    """
    id: str
    player_id: CharacterId = PLAYER_ID
    current_location_id: LocationId = LocationId("entrance")
    characters: Dict[CharacterId, Character] = Field(default_factory=dict)
    locations: Dict[LocationId, Location] = Field(default_factory=dict)
    story_memory: StoryMemoryLog = Field(default_factory=StoryMemoryLog)
    reputation: ReputationStatus = Field(default_factory=ReputationStatus)
    progression: PlayerStats = Field(default_factory=PlayerStats)
