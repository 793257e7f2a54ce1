from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

DATA_DIR = Path(__file__).resolve().parents[2] / "data"


class LLMSettings(BaseSettings):
    """
    Settings for the dialogue model.
    Loads from environment variables (prefixed with LLM_).
    """
    model_config = SettingsConfigDict(env_prefix='LLM_', env_file='.env', extra='ignore')

    api_key: str = "" # LiteLLM also picks keys up from the provider's own variables
    api_base: Optional[str] = None # e.g. a local model server
    model_name: str = "deepseek/deepseek-chat"
    temperature: float = 0.8
    max_tokens: int = 800


class SimulationSettings(BaseSettings):
    """
    Tunables of the simulation itself (prefixed with SIM_).
    """
    model_config = SettingsConfigDict(env_prefix='SIM_', env_file='.env', extra='ignore')

    memory_capacity: int = 1000
    relationship_history_limit: int = 50
    relevant_memory_limit: int = 5
    random_seed: Optional[int] = None # set for reproducible level-ups
    world_file: Path = DATA_DIR / "fukimori_high.yaml"
    achievements_file: Path = DATA_DIR / "achievements.yaml"


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='LOG_', env_file='.env', extra='ignore')

    file: str = "game.log"
    level: str = "INFO"


class Settings(BaseSettings):
    """
    Main application settings.
    """
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    llm: LLMSettings = LLMSettings()
    simulation: SimulationSettings = SimulationSettings()
    logging: LoggingSettings = LoggingSettings()

# A single instance shared by the container and the CLI.
settings = Settings()
