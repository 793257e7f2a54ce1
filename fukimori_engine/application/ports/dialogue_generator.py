from abc import ABC, abstractmethod
from pydantic import BaseModel, Field
from typing import List, Optional


# DTOs for the dialogue generation port.
# They keep the engine independent of any particular model provider.

class DialogueGenerationContext(BaseModel):
    """
    Everything the generator needs to voice one NPC reply.
    """
    character_id: str
    character_name: str
    personality_prompt: str
    location_name: str
    location_description: str = ""
    player_input: str
    relationship_summary: str = "no history with the player"
    relevant_memories: str = "" # one memory per line
    group_dynamics: str = "neutral"
    characters_present: List[str] = Field(default_factory=list)
    attitude_shift: str = "normal"
    dialogue_modifier: str = "treats you normally"
    player_title: str = ""


class DialogueGenerationResponse(BaseModel):
    """
    One generated NPC reply.
    """
    dialogue: str
    emotion: str = "neutral"
    action: str = ""
    thought_bubble: Optional[str] = None
    panel_description: Optional[str] = None
    choices: List[str] = Field(default_factory=list)


class IDialogueGenerator(ABC):
    """
    An interface (Port) for the external text generator that voices NPCs.
    """

    @abstractmethod
    async def generate_dialogue(self, context: DialogueGenerationContext) -> DialogueGenerationResponse:
        pass
