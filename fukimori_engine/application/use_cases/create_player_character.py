from fukimori_engine.application.commands.character import CreatePlayerCharacterCommand
from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.application.ports.session_repository import IGameSessionRepository
from fukimori_engine.application.services.character_registry import CharacterRegistry
from fukimori_engine.application.services.memory_service import MemoryService
from fukimori_engine.domain.entities import Character, LocationId
from fukimori_engine.domain.errors import SessionNotFoundError
from fukimori_engine.domain.events import CharacterCreated
from fukimori_engine.infrastructure.concurrency.session_locks import SessionLockRegistry

# Starting choice -> (location, scenario line).
STARTING_SCENARIOS = {
    "school_year_start": ("entrance", "First day of the new school year in April"),
    "transfer_mid_year": ("principal_office", "Transfer student arriving mid-year"),
    "current": ("classroom_1a", "Joining mid-semester"),
}
ARTISTIC_HOBBIES = ("art", "music", "writing", "photography")
HAIR_COLORS_IN_PHOTO = ("blonde", "brown")


def generate_backstory(command: CreatePlayerCharacterCommand, scenario: str) -> str:
    choices = command.backstory
    parts = [f"{command.name} is a 15-year-old student beginning their journey at Fukimori High School."]
    if choices.transfer_student:
        parts.append(
            f"As a transfer student from {choices.previous_school or 'another school'}, "
            f"they moved to Tokyo {choices.reason_for_transfer or 'for family reasons'}. "
            "This fresh start represents both an opportunity and a challenge."
        )
    else:
        parts.append(
            "Having grown up in the Tokyo area, they chose Fukimori High for its reputation and opportunities."
        )

    parts.append(f"Their personality is characterized by being {', '.join(choices.personality)}")
    if choices.hobbies:
        parts[-1] += f", and they have a passion for {' and '.join(choices.hobbies)}"
    parts[-1] += "."

    if choices.academic_strength:
        parts.append(f"Academically, they show particular strength in {choices.academic_strength}.")
    parts.append(
        f"Coming from a {choices.family_background} family background, they approach this new chapter "
        "with determination to make meaningful connections and succeed."
    )
    parts.append(f"{scenario} marks the beginning of what they hope will be an unforgettable high school experience.")
    return " ".join(parts)


class CreatePlayerCharacterHandler:
    """
    Handles the CreatePlayerCharacterCommand use case.
    Builds the `player` character from the creation-screen choices, puts
    the player at the starting location and records the opening memory.
    """
    def __init__(
        self,
        session_repository: IGameSessionRepository,
        event_bus: IEventBus,
        session_locks: SessionLockRegistry,
        character_registry: CharacterRegistry,
        memory_service: MemoryService,
    ):
        self._repo = session_repository
        self._bus = event_bus
        self._locks = session_locks
        self._registry = character_registry
        self._memory = memory_service

    async def execute(self, command: CreatePlayerCharacterCommand) -> Character:
        location_id, scenario = STARTING_SCENARIOS[command.starting_date]

        async with self._locks.hold(command.session_id):
            session = await self._repo.get_by_id(command.session_id)
            if not session:
                raise SessionNotFoundError(command.session_id)

            player = self._registry.create_character(session, self._character_data(command, session.player_id, scenario))
            if location_id in session.locations:
                session.current_location_id = LocationId(location_id)

            self._memory.record(
                session,
                participants=[player.id],
                location=location_id,
                summary=f"{player.name} begins their journey at Fukimori High School - {scenario}",
                emotional_tone="nervous but excited",
                consequences=["new chapter begins", "opportunities await"],
                dialogue_highlights=[f"{player.name} thinks: \"This is it... my new life at Fukimori High begins!\""],
            )
            await self._repo.save(session)

        await self._bus.publish(CharacterCreated(
            session_id=session.id, character_id=player.id, character_name=player.name,
        ), session)
        return player

    @staticmethod
    def _character_data(command: CreatePlayerCharacterCommand, player_id: str, scenario: str) -> dict:
        choices = command.backstory
        photo = (command.appearance.photo_description or "").lower()
        hair_color = next((color for color in HAIR_COLORS_IN_PHOTO if color in photo), "black")
        transfer_tag = "transfer student" if choices.transfer_student else "local student"

        return {
            "id": player_id,
            "name": command.name,
            "age": 15,
            "gender": "player",
            "appearance": {
                "hair_color": hair_color,
                "height": command.appearance.height,
                "body_type": command.appearance.build,
                "distinctive_features": command.appearance.distinctive_features,
                "outfits": {
                    "school_uniform": "Fukimori High School first-year uniform",
                    "casual_wear": ["comfortable student clothing"],
                },
            },
            "personality": {
                "traits": choices.personality,
                "likes": choices.hobbies,
                "dislikes": ["unfairness", "bullying"],
                "fears": ["not fitting in", "academic failure"],
                "goals": ["make friends", "succeed at Fukimori High", "discover my path"],
                "speech_pattern": "polite student speech",
                "core_values": ["friendship", "growth", "authenticity"],
                "behavior_patterns": ["eager to learn", "wants to fit in"],
                "social_style": "reserved" if "shy" in choices.personality else "friendly",
            },
            "background": {
                "family": {
                    "father": {"name": f"{command.name}'s Father", "occupation": "office worker", "personality": "supportive"},
                    "mother": {"name": f"{command.name}'s Mother", "occupation": "teacher", "personality": "caring"},
                },
                "home_address": "Recently moved to Tokyo area" if choices.transfer_student else "Tokyo residential area",
                "economic_status": choices.family_background,
                "backstory": generate_backstory(command, scenario),
                "secrets": choices.secrets,
            },
            "abilities": {
                "academic": {
                    "subjects": [choices.academic_strength] if choices.academic_strength else [],
                    "study_habits": "trying to establish good habits",
                },
                "artistic": {
                    "talents": [h for h in choices.hobbies if any(art in h for art in ARTISTIC_HOBBIES)],
                },
                "social": {"reputation": 50, "popularity_level": "new student"},
            },
            "daily_routine": {
                "morning": "arrives at school with mix of nervousness and excitement",
                "lunch": "looking for place to sit and people to talk to",
                "after_school": "exploring clubs and activities",
                "weekend": "getting used to new life in Tokyo",
            },
            "reputation_tags": ["first-year", "new student", transfer_tag],
        }
