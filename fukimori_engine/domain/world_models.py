from pydantic import BaseModel, Field
from typing import Any, Dict, List

from fukimori_engine.domain.entities import CharacterId, LocationId, PLAYER_ID
from fukimori_engine.domain.reputation import AchievementDefinition


class ConfigLocation(BaseModel):
    """Configuration model for a Location."""
    id: LocationId
    name: str
    type: str = "general"
    description: str = ""
    atmosphere: str = ""
    key_features: List[str] = Field(default_factory=list)
    connected_locations: List[LocationId] = Field(default_factory=list)
    typical_activities: List[str] = Field(default_factory=list)


class ConfigWorld(BaseModel):
    """
    Configuration model for a whole school world.
    Characters are kept as raw mappings and validated when a session is
    created, so every omitted field gets the Character default.
    """
    id: str
    name: str
    player_id: CharacterId = PLAYER_ID
    start_location: LocationId = LocationId("entrance")
    locations: List[ConfigLocation] = Field(default_factory=list)
    characters: List[Dict[str, Any]] = Field(default_factory=list)


class ConfigAchievements(BaseModel):
    achievements: List[AchievementDefinition] = Field(default_factory=list)
