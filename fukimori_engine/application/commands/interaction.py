from pydantic import BaseModel, Field
from typing import List

CharacterId = str
LocationId = str


class ProcessInteractionCommand(BaseModel):
    """
    A Command DTO for one Interaction Event: the player says or does
    something to a character, possibly in front of witnesses.
    """
    session_id: str
    character_id: CharacterId # the responding NPC
    user_input: str = Field(min_length=1)
    location_id: LocationId
    witness_ids: List[CharacterId] = Field(default_factory=list)


class MovePlayerCommand(BaseModel):
    session_id: str
    target_location_id: LocationId
