import logging

from fukimori_engine.application.ports.logger import ILogger


class FileLogger(ILogger):
    """ILogger that writes the game's narrative log to a file."""

    def __init__(self, log_file: str = "game.log", level: str = "INFO"):
        self.logger = logging.getLogger("fukimori_engine.game")
        self.logger.setLevel(level.upper())

        # The container may build more than one FileLogger.
        if not self.logger.handlers:
            handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
            self.logger.addHandler(handler)

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)
