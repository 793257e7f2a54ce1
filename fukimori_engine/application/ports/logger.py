from abc import ABC, abstractmethod


class ILogger(ABC):
    """Abstract interface for the game's narrative log."""

    @abstractmethod
    def debug(self, message: str):
        pass

    @abstractmethod
    def info(self, message: str):
        pass

    @abstractmethod
    def warning(self, message: str):
        pass

    @abstractmethod
    def error(self, message: str):
        pass
