from pydantic import BaseModel, Field
from typing import Optional


class TriggerAchievementCommand(BaseModel):
    """
    A Command DTO used by the admin and testing surface to force an
    achievement by its trigger-event key.
    """
    session_id: str
    event_key: str = Field(min_length=1)


class AwardExperienceCommand(BaseModel):
    """
    A Command DTO to award experience directly. Negative amounts are
    rejected when the command is built, before any state is touched.
    """
    session_id: str
    amount: int = Field(ge=0)
    source: str
    skill_category: Optional[str] = None
    description: str = ""
