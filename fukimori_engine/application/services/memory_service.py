from typing import List, Optional

from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.story_memory import StoryMemory


class MemoryService:
    """
    Records story memories into a session's log and retrieves them
    as context for dialogue generation.
    """

    def __init__(self, relevant_memory_limit: int = 5):
        self._relevant_limit = relevant_memory_limit

    def record(
        self,
        session: GameSession,
        participants: List[str],
        location: str,
        summary: str,
        emotional_tone: str = "neutral",
        consequences: Optional[List[str]] = None,
        dialogue_highlights: Optional[List[str]] = None,
    ) -> StoryMemory:
        memory = StoryMemory(
            participants=list(participants),
            location=location,
            summary=summary,
            emotional_tone=emotional_tone,
            consequences=consequences or [],
            dialogue_highlights=dialogue_highlights or [],
        )
        session.story_memory.append(memory)
        return memory

    def relevant_memories(
        self,
        session: GameSession,
        character_id: str,
        context: str,
        limit: Optional[int] = None,
    ) -> List[StoryMemory]:
        return session.story_memory.query_relevant(
            character_id, context, limit if limit is not None else self._relevant_limit
        )

    def memories_of(self, session: GameSession, character_id: str, limit: int = 10) -> List[StoryMemory]:
        return session.story_memory.query_by_participant(character_id, limit)

    @staticmethod
    def format_for_prompt(memories: List[StoryMemory]) -> str:
        """Renders memories as one line each, the way the dialogue prompt expects them."""
        return "\n".join(
            f"- {memory.summary} (Location: {memory.location}, Tone: {memory.emotional_tone})"
            for memory in memories
        )
