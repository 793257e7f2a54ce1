class EngineError(Exception):
    """Base class for errors raised by the simulation engine."""


class CharacterNotFoundError(EngineError, LookupError):
    """
    Raised when an operation requires a character that was never created.
    This is a programming error in the caller, not a player-facing condition.
    """

    def __init__(self, character_id: str):
        super().__init__(f"Character with id '{character_id}' not found.")
        self.character_id = character_id


class SessionNotFoundError(EngineError, LookupError):
    """Raised by use-case handlers when no game session exists for an id."""

    def __init__(self, session_id: str):
        super().__init__(f"Game session with id '{session_id}' not found.")
        self.session_id = session_id
