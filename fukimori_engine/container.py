import random
from typing import Optional

from dependency_injector import containers, providers

from fukimori_engine.application.services.character_registry import CharacterRegistry
from fukimori_engine.application.services.memory_service import MemoryService
from fukimori_engine.application.services.progression_engine import PlayerProgressionEngine
from fukimori_engine.application.services.relationship_engine import RelationshipPropagationEngine
from fukimori_engine.application.services.reputation_engine import ReputationEngine
from fukimori_engine.application.use_cases.award_experience import AwardExperienceHandler
from fukimori_engine.application.use_cases.create_player_character import CreatePlayerCharacterHandler
from fukimori_engine.application.use_cases.move_player import MovePlayerHandler
from fukimori_engine.application.use_cases.process_interaction import ProcessInteractionHandler
from fukimori_engine.application.use_cases.trigger_achievement import TriggerAchievementHandler
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry
from fukimori_engine.infrastructure.config.settings import settings
from fukimori_engine.infrastructure.config.world_loader import WorldLoader
from fukimori_engine.infrastructure.event_bus.local_event_bus import LocalEventBus
from fukimori_engine.infrastructure.llm.litellm_dialogue_generator import LitellmDialogueGenerator
from fukimori_engine.infrastructure.llm.mock_dialogue_generator import MockDialogueGenerator
from fukimori_engine.infrastructure.logging.event_handler import LoggingEventHandler
from fukimori_engine.infrastructure.logging.file_logger import FileLogger
from fukimori_engine.infrastructure.repositories.in_memory_session_repository import InMemoryGameSessionRepository


def _select_dialogue_generator() -> str:
    # Without an API key the game still runs, with canned replies.
    return "litellm" if settings.llm.api_key else "mock"


class Container(containers.DeclarativeContainer):
    """
    The Dependency Injection (DI) container for the application.
    It wires together the different components of the system.
    """

    # =====================================================================
    # Infrastructure Layer
    # =====================================================================
    session_repository = providers.Singleton(InMemoryGameSessionRepository)
    event_bus = providers.Singleton(LocalEventBus)
    session_locks = providers.Singleton(SessionLockRegistry)
    logger = providers.Singleton(FileLogger, log_file=settings.logging.file, level=settings.logging.level)
    logging_event_handler = providers.Singleton(LoggingEventHandler, logger=logger)

    dialogue_generator = providers.Selector(
        _select_dialogue_generator,
        litellm=providers.Singleton(LitellmDialogueGenerator, llm_settings=settings.llm),
        mock=providers.Singleton(MockDialogueGenerator),
    )

    # =====================================================================
    # Application Layer (Services)
    # =====================================================================
    # Engines hold no per-player state, so one instance serves every session.
    rng = providers.Singleton(random.Random, settings.simulation.random_seed)
    character_registry = providers.Singleton(
        CharacterRegistry,
        history_limit=settings.simulation.relationship_history_limit,
    )
    world_loader = providers.Singleton(
        WorldLoader,
        registry=character_registry,
        memory_capacity=settings.simulation.memory_capacity,
    )
    achievement_catalog = providers.Singleton(
        WorldLoader.load_achievements,
        world_loader,
        settings.simulation.achievements_file,
    )
    memory_service = providers.Singleton(
        MemoryService,
        relevant_memory_limit=settings.simulation.relevant_memory_limit,
    )
    relationship_engine = providers.Singleton(RelationshipPropagationEngine, registry=character_registry)
    reputation_engine = providers.Singleton(ReputationEngine, catalog=achievement_catalog)
    progression_engine = providers.Singleton(PlayerProgressionEngine, rng=rng)

    # =====================================================================
    # Application Layer (Use Case Handlers)
    # =====================================================================
    process_interaction_handler = providers.Factory(
        ProcessInteractionHandler,
        session_repository=session_repository,
        event_bus=event_bus,
        session_locks=session_locks,
        dialogue_generator=dialogue_generator,
        character_registry=character_registry,
        memory_service=memory_service,
        relationship_engine=relationship_engine,
        reputation_engine=reputation_engine,
        progression_engine=progression_engine,
    )

    trigger_achievement_handler = providers.Factory(
        TriggerAchievementHandler,
        session_repository=session_repository,
        event_bus=event_bus,
        session_locks=session_locks,
        reputation_engine=reputation_engine,
    )

    award_experience_handler = providers.Factory(
        AwardExperienceHandler,
        session_repository=session_repository,
        event_bus=event_bus,
        session_locks=session_locks,
        progression_engine=progression_engine,
    )

    create_player_character_handler = providers.Factory(
        CreatePlayerCharacterHandler,
        session_repository=session_repository,
        event_bus=event_bus,
        session_locks=session_locks,
        character_registry=character_registry,
        memory_service=memory_service,
    )

    move_player_handler = providers.Factory(
        MovePlayerHandler,
        session_repository=session_repository,
        session_locks=session_locks,
        logger=logger,
    )


def wire_dependencies(target: Optional[Container] = None) -> None:
    """Subscribes infrastructure listeners to the event bus."""
    target = target or container
    target.logging_event_handler().subscribe(target.event_bus())


# A global instance of the container
container = Container()
