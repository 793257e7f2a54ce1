from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List, Optional

# Note: Using str for IDs here to avoid circular dependencies with entities
CharacterId = str
LocationId = str


class DomainEvent(BaseModel, ABC):
    """
    An abstract base class for domain events.
    Represents something significant that has happened in the domain.
    """
    session_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    @abstractmethod
    def name(self) -> str:
        """A unique, machine-readable name for the event."""
        pass


class CharacterCreated(DomainEvent):
    character_id: CharacterId
    character_name: str

    @property
    def name(self) -> str:
        return "character.created"


class RelationshipChanged(DomainEvent):
    """Event triggered when one character's view of another changes."""
    owner_id: CharacterId
    other_id: CharacterId
    affection_change: int
    new_affection: int
    new_status: str

    @property
    def name(self) -> str:
        return "relationship.changed"


class GroupInteractionProcessed(DomainEvent):
    """Event triggered after an action witnessed by others has been propagated."""
    actor_id: CharacterId
    action: str
    location_id: LocationId
    witness_ids: List[CharacterId] = Field(default_factory=list)
    impact_bucket: str
    reputation_change: int = 0

    @property
    def name(self) -> str:
        return "interaction.group_processed"


class DialogueOccurred(DomainEvent):
    """Event triggered after the player spoke to a character and got a reply."""
    speaker_id: CharacterId
    listener_id: CharacterId
    dialogue_text: str
    emotion: str

    @property
    def name(self) -> str:
        return "dialogue.occurred"


class AchievementUnlocked(DomainEvent):
    achievement_id: str
    achievement_name: str
    new_title: str

    @property
    def name(self) -> str:
        return "achievement.unlocked"


class ExperienceAwarded(DomainEvent):
    amount: int
    source: str
    skill_category: Optional[str] = None

    @property
    def name(self) -> str:
        return "experience.awarded"


class PlayerLeveledUp(DomainEvent):
    new_level: int
    characteristics_improved: List[str] = Field(default_factory=list)
    actions_unlocked: List[str] = Field(default_factory=list)
    skills_unlocked: List[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return "player.leveled_up"
