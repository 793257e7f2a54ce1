import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List

from fukimori_engine.domain.value_objects import ImmutableValueObject

DEFAULT_MEMORY_CAPACITY = 1000


def new_event_id() -> str:
    return f"event_{uuid.uuid4().hex[:12]}"


class StoryMemory(ImmutableValueObject):
    """A single thing that happened in the story. Never changed once recorded."""
    event_id: str = Field(default_factory=new_event_id)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    participants: List[str] = Field(default_factory=list) # ordered character ids
    location: str
    summary: str # one line
    emotional_tone: str = "neutral"
    consequences: List[str] = Field(default_factory=list)
    dialogue_highlights: List[str] = Field(default_factory=list)

    def involves(self, character_id: str) -> bool:
        return character_id in self.participants

    def mentions_any(self, keywords: List[str]) -> bool:
        summary = self.summary.lower()
        highlights = [line.lower() for line in self.dialogue_highlights]
        return any(
            keyword in summary or any(keyword in line for line in highlights)
            for keyword in keywords
        )


class StoryMemoryLog(BaseModel):
    """
    Append-only, capacity-bounded log of story memories.

    Once the log grows past its capacity the oldest memories are dropped
    first. Retention depends only on when a memory was recorded, never on
    how often it is read.
    """
    capacity: int = Field(default=DEFAULT_MEMORY_CAPACITY, gt=0)
    memories: List[StoryMemory] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.memories)

    def append(self, memory: StoryMemory) -> None:
        self.memories.append(memory)
        overflow = len(self.memories) - self.capacity
        if overflow > 0:
            del self.memories[:overflow]

    def recent(self, count: int) -> List[StoryMemory]:
        """The last `count` memories in chronological order."""
        if count <= 0:
            return []
        return self.memories[-count:]

    def query_relevant(self, character_id: str, context: str, limit: int = 5) -> List[StoryMemory]:
        """
        Memories the character took part in, or whose summary or dialogue
        highlights contain any word of `context`. Only the most recent
        `limit` matches are returned, oldest first. Matches are not ranked.
        """
        if limit <= 0:
            return []
        keywords = context.lower().split()
        matches = [
            memory for memory in self.memories
            if memory.involves(character_id) or memory.mentions_any(keywords)
        ]
        return matches[-limit:]

    def query_by_participant(self, character_id: str, limit: int = 10) -> List[StoryMemory]:
        """Memories involving the character, most recent first."""
        matches: List[StoryMemory] = []
        for memory in reversed(self.memories):
            if len(matches) >= limit:
                break
            if memory.involves(character_id):
                matches.append(memory)
        return matches

    def clear(self) -> None:
        self.memories = []
