import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Log:
    """Service-wide logging facade.

    Keyword fields passed to any level are appended to the message as
    ``key=value`` pairs, so log lines stay greppable without a JSON formatter.
    """

    _logger: logging.Logger = logging.getLogger("clash")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and attach a single stream handler (stdout by default)."""
        cls._logger.setLevel(log_level.upper())
        if cls._logger.handlers:
            return
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        cls._logger.addHandler(handler)

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        cls._log(logging.DEBUG, message, fields)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        cls._log(logging.INFO, message, fields)

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        cls._log(logging.WARNING, message, fields)

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        cls._log(logging.ERROR, message, fields)

    @classmethod
    def event(cls, name: str, **fields: object) -> None:
        """Emit a named diagnostic event at DEBUG level.

        Fields are only formatted when DEBUG is enabled, so callers may pass
        sizes and counts on hot paths.
        """
        cls._log(logging.DEBUG, f"event={name}", fields)

    @classmethod
    def _log(cls, level: int, message: str, fields: dict[str, object]) -> None:
        if not cls._logger.isEnabledFor(level):
            return
        if fields:
            pairs = " ".join(f"{key}={value!r}" for key, value in fields.items())
            message = f"{message} {pairs}"
        cls._logger.log(level, message)
