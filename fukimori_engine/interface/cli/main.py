import asyncio
from typing import List, Optional

from fukimori_engine.application.commands.character import CreatePlayerCharacterCommand
from fukimori_engine.application.commands.interaction import MovePlayerCommand, ProcessInteractionCommand
from fukimori_engine.application.commands.progression import TriggerAchievementCommand
from fukimori_engine.container import container, wire_dependencies
from fukimori_engine.domain.entities import Character, GameSession
from fukimori_engine.domain.errors import EngineError
from fukimori_engine.infrastructure.config.settings import settings

SESSION_ID = "local"
COMMANDS = ["look", "move", "talk", "stats", "reputation", "achieve", "help", "quit"]


async def _setup_session(player_name: str) -> GameSession:
    """Loads the school from the world file and creates the player."""
    loader = container.world_loader()
    world = loader.load_world(settings.simulation.world_file)
    session = loader.create_session(world, SESSION_ID)
    await container.session_repository().save(session)

    await container.create_player_character_handler().execute(
        CreatePlayerCharacterCommand(session_id=SESSION_ID, name=player_name, starting_date="school_year_start")
    )
    print(f"World '{world.name}' loaded from {settings.simulation.world_file}.")
    return await container.session_repository().get_by_id(SESSION_ID)


def print_help():
    print("\n--- Help ---")
    print("  look                                  - See your surroundings.")
    print("  move <location>                       - Walk to a connected location.")
    print("  talk <character> <message>            - Say something to a character here.")
    print("  stats                                 - Show your level, characteristics and items.")
    print("  reputation                            - Show your reputation, title and achievements.")
    print("  achieve <event key>                   - Force an achievement (testing).")
    print("  quit                                  - Exit the game.")
    print("---")


def _find_character(session: GameSession, name: str) -> Optional[Character]:
    name = name.lower()
    return next(
        (c for c in session.characters.values()
         if c.id != session.player_id and (c.id == name or (c.name.lower().split() or [""])[0] == name)),
        None,
    )


def _present(session: GameSession) -> List[Character]:
    relationships = container.relationship_engine()
    context = relationships.get_social_context(session, session.player_id, session.current_location_id)
    return [session.characters[c] for c in context.characters_present if c in session.characters]


def _print_location(session: GameSession):
    location = session.locations[session.current_location_id]
    print("\n" + "=" * 40)
    print(f"You are in the {location.name}.")
    print(location.description)
    present = _present(session)
    if present:
        print(f"You see: {', '.join(c.name for c in present)}")
    print(f"Exits: {', '.join(location.connected_locations)}")


def _print_stats(session: GameSession):
    stats = container.progression_engine().get_player_stats(session)
    print(f"\nLevel {stats.level} ({stats.experience}/{stats.experience_to_next} XP)")
    for name, value in stats.characteristics.model_dump().items():
        print(f"  {name:<12} {value}")
    print(f"Items: {', '.join(stats.inventory.items)} ({len(stats.inventory.items)}/{stats.inventory.max_capacity})")
    print(f"Money: {stats.inventory.money} yen")
    print(f"Actions: {', '.join(stats.unlocked_actions)}")


def _print_reputation(session: GameSession):
    reputation = container.reputation_engine()
    status = reputation.get_reputation_status(session)
    print(f"\nTitle: {status.current_title}")
    print(f"  popularity {status.popularity}, respect {status.respect}, fear {status.fear}, "
          f"attractiveness {status.attractiveness}, notoriety {status.notoriety}")
    for achievement in reputation.get_recent_achievements(session):
        print(f"  * {achievement.name} ({achievement.rarity}): {achievement.description}")


async def main():
    wire_dependencies()
    repo = container.session_repository()
    interaction_handler = container.process_interaction_handler()
    move_handler = container.move_player_handler()
    achievement_handler = container.trigger_achievement_handler()

    print("\n--- Fukimori High ---")
    player_name = input("What is your name? ").strip() or "Transfer Student"
    await _setup_session(player_name)
    print("Welcome to Fukimori High. Type 'help' for commands.")

    while True:
        try:
            session = await repo.get_by_id(SESSION_ID)
            command_str = input("> ").strip()
            parts = command_str.split()
            if not parts:
                continue

            verb = parts[0].lower()
            if verb not in COMMANDS:
                print(f"Unknown command: '{verb}'. Type 'help' for a list of commands.")

            elif verb == "quit":
                print("Goodbye!")
                break

            elif verb == "help":
                print_help()

            elif verb == "look":
                _print_location(session)

            elif verb == "stats":
                _print_stats(session)

            elif verb == "reputation":
                _print_reputation(session)

            elif verb == "move":
                if len(parts) > 1:
                    target = "_".join(parts[1:]).lower()
                    session = await move_handler.execute(
                        MovePlayerCommand(session_id=SESSION_ID, target_location_id=target)
                    )
                    _print_location(session)
                else:
                    print("Usage: move <location>")

            elif verb == "achieve":
                if len(parts) > 1:
                    unlocked = await achievement_handler.execute(
                        TriggerAchievementCommand(session_id=SESSION_ID, event_key=parts[1])
                    )
                    print(f"Achievement unlocked: {unlocked.name}!" if unlocked else "Nothing happens.")
                else:
                    print("Usage: achieve <event key>")

            elif verb == "talk":
                if len(parts) > 2:
                    target = _find_character(session, parts[1])
                    if not target:
                        print(f"Character '{parts[1]}' not found.")
                        continue
                    witnesses = [c.id for c in _present(session) if c.id != target.id]
                    outcome = await interaction_handler.execute(ProcessInteractionCommand(
                        session_id=SESSION_ID,
                        character_id=target.id,
                        user_input=" ".join(parts[2:]),
                        location_id=session.current_location_id,
                        witness_ids=witnesses,
                    ))
                    reply = outcome.response
                    print(f"\n{target.name} ({reply.emotion}): \"{reply.dialogue}\"")
                    if reply.action:
                        print(f"  *{reply.action}*")
                    print(f"  +{outcome.experience_gained} XP")
                    if outcome.level_up:
                        print(f"  LEVEL UP! You are now level {outcome.level_up.new_level}.")
                    if outcome.achievement_unlocked:
                        print(f"  Achievement unlocked: {outcome.achievement_unlocked.name}!")
                    for i, choice in enumerate(reply.choices, 1):
                        print(f"  {i}. {choice}")
                else:
                    print("Usage: talk <character> <message>")

        except EngineError as e:
            print(f"{e}")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
