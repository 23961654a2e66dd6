import logging
import sys
from pathlib import Path


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("consolidator")
    _format = "%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s"

    @classmethod
    def configure(cls, log_level: str, log_path: Path | None = None) -> None:
        """Configure the logger with the specified level, a stdout handler and an optional file."""
        cls._logger.setLevel(log_level.upper())
        if cls._logger.handlers:
            return
        formatter = logging.Formatter(cls._format)
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        cls._logger.addHandler(handler)
        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setFormatter(formatter)
            cls._logger.addHandler(file_handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def critical(cls, message: str, **kwargs: object) -> None:
        """Log a critical message. Used when recorded state falls behind the filesystem."""
        cls._logger.critical(message, extra=kwargs)
