from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class PlayerBackstory(BaseModel):
    transfer_student: bool = False
    previous_school: Optional[str] = None
    reason_for_transfer: Optional[str] = None
    personality: List[str] = Field(default_factory=lambda: ["friendly"])
    hobbies: List[str] = Field(default_factory=list)
    academic_strength: str = ""
    family_background: str = "middle class"
    secrets: List[str] = Field(default_factory=list)


class PlayerAppearance(BaseModel):
    photo_description: Optional[str] = None
    height: Literal["short", "average", "tall"] = "average"
    build: Literal["slim", "average", "athletic"] = "average"
    distinctive_features: List[str] = Field(default_factory=list)


class CreatePlayerCharacterCommand(BaseModel):
    """
    A Command DTO representing the player's choices on the character
    creation screen.
    """
    session_id: str
    name: str = Field(min_length=1)
    backstory: PlayerBackstory = Field(default_factory=PlayerBackstory)
    appearance: PlayerAppearance = Field(default_factory=PlayerAppearance)
    starting_date: Literal["current", "school_year_start", "transfer_mid_year"] = "current"
