import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

from fukimori_engine.application.services.character_registry import CharacterRegistry
from fukimori_engine.domain.entities import GameSession, Location, LocationId
from fukimori_engine.domain.reputation import AchievementCatalog
from fukimori_engine.domain.story_memory import DEFAULT_MEMORY_CAPACITY, StoryMemoryLog
from fukimori_engine.domain.world_models import ConfigAchievements, ConfigWorld

logger = logging.getLogger(__name__)


def _read_yaml(file_path: Path) -> dict:
    if not file_path.exists():
        raise FileNotFoundError(f"World file not found: {file_path}")
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


class WorldLoader:
    """
    Loads the static school world and achievement catalog from YAML and
    builds fresh game sessions from them.
    """

    def __init__(self, registry: Optional[CharacterRegistry] = None, memory_capacity: int = DEFAULT_MEMORY_CAPACITY):
        self._registry = registry or CharacterRegistry()
        self._memory_capacity = memory_capacity

    def load_world(self, file_path: Path) -> ConfigWorld:
        """Loads and validates a world configuration."""
        return ConfigWorld(**_read_yaml(Path(file_path)))

    def load_achievements(self, file_path: Path) -> AchievementCatalog:
        config = ConfigAchievements(**_read_yaml(Path(file_path)))
        trigger_keys = [a.trigger_event for a in config.achievements]
        if len(set(trigger_keys)) != len(trigger_keys):
            raise ValueError(f"Duplicate achievement trigger events in {file_path}")
        return AchievementCatalog(achievements=tuple(config.achievements))

    def create_session(self, config: ConfigWorld, session_id: str) -> GameSession:
        """
        Builds a new, independent game session from the world configuration.
        Nothing in the returned session is shared with other sessions.
        """
        known_ids = {loc.id for loc in config.locations}
        locations: Dict[LocationId, Location] = {}
        for loc_config in config.locations:
            unknown = [c for c in loc_config.connected_locations if c not in known_ids]
            if unknown:
                logger.warning("Location '%s' connects to unknown locations %s. Dropping them.", loc_config.id, unknown)
            data = loc_config.model_dump()
            data["connected_locations"] = [c for c in loc_config.connected_locations if c in known_ids]
            locations[loc_config.id] = Location(**data)

        start_location = config.start_location
        if start_location not in locations and locations:
            logger.warning("Start location '%s' not found. Using '%s'.", start_location, next(iter(locations)))
            start_location = next(iter(locations))

        session = GameSession(
            id=session_id,
            player_id=config.player_id,
            current_location_id=start_location,
            locations=locations,
            story_memory=StoryMemoryLog(capacity=self._memory_capacity),
        )

        for char_config in config.characters:
            self._registry.create_character(session, char_config)

        if config.player_id not in session.characters:
            logger.info("No player character in world '%s'. Creating a default one.", config.id)
            self._registry.create_character(session, {
                "id": config.player_id,
                "name": "Transfer Student",
                "age": 15,
                "gender": "player",
                "reputation_tags": ["first-year", "new student"],
            })
        return session
