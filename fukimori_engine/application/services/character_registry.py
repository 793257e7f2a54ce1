import logging
import uuid
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from fukimori_engine.domain.entities import (
    Character,
    CharacterId,
    GameSession,
    Relationship,
    RELATIONSHIP_HISTORY_LIMIT,
)
from fukimori_engine.domain.errors import CharacterNotFoundError

logger = logging.getLogger(__name__)


class RelationshipDelta(BaseModel):
    """A change to one character's view of another. Every field is optional."""
    type: Optional[str] = None # only used when the relationship is created
    affection_change: int = 0
    trust_change: int = 0
    new_memory: Optional[str] = None
    conflict_event: Optional[str] = None


class CharacterRegistry:
    """
    Owns character definitions and their relationship maps within a session.
    """

    def __init__(self, history_limit: int = RELATIONSHIP_HISTORY_LIMIT):
        self._history_limit = history_limit

    def create_character(self, session: GameSession, data: Dict[str, Any]) -> Character:
        """
        Creates a character from partial data, filling every omitted field with
        its default, and stores it. Reusing an existing id overwrites it.
        """
        data = dict(data)
        if not data.get("id"):
            data["id"] = f"char_{uuid.uuid4().hex[:12]}"

        character = Character.model_validate(data)
        if character.id in session.characters:
            logger.info("Overwriting character '%s'.", character.id)
        session.characters[character.id] = character
        return character

    def get_character(self, session: GameSession, character_id: str) -> Optional[Character]:
        return session.characters.get(CharacterId(character_id))

    def require_character(self, session: GameSession, character_id: str) -> Character:
        character = self.get_character(session, character_id)
        if character is None:
            raise CharacterNotFoundError(character_id)
        return character

    def all_characters(self, session: GameSession) -> List[Character]:
        return list(session.characters.values())

    def update_relationship(
        self,
        session: GameSession,
        owner_id: str,
        other_id: str,
        delta: RelationshipDelta,
    ) -> Relationship:
        """
        Updates how `owner_id` feels about `other_id`. Only the owner's map is
        touched; callers that want a symmetric change call this once per direction.
        """
        owner = self.require_character(session, owner_id)

        relationship = owner.relationships.get(CharacterId(other_id))
        if relationship is None:
            relationship = Relationship(type=delta.type) if delta.type else Relationship()
            owner.relationships[CharacterId(other_id)] = relationship

        relationship.apply(
            affection_change=delta.affection_change,
            trust_change=delta.trust_change,
            new_memory=delta.new_memory,
            conflict_event=delta.conflict_event,
            history_limit=self._history_limit,
        )
        return relationship

    def reset_world(self, session: GameSession) -> None:
        """Clears every character and the story memory of the session."""
        session.characters.clear()
        session.story_memory.clear()
