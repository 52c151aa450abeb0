import logging
import os

from rich.logging import RichHandler


class PaddedNameFormatter(logging.Formatter):
    """Centers logger names in a column that grows to fit the longest one seen."""

    width = 12

    def format(self, record):
        PaddedNameFormatter.width = max(PaddedNameFormatter.width, len(record.name))
        record.name = record.name.center(PaddedNameFormatter.width)
        return super().format(record)


def _resolve_level() -> int:
    if os.getenv("DEBUG"):
        return logging.DEBUG
    level_name = os.getenv("EMS_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name=None) -> logging.Logger:
    """
    Return a logger writing through rich.

    DEBUG in the environment turns on debug output, otherwise EMS_LOG_LEVEL
    picks the level (INFO by default).
    """
    logger = logging.getLogger(name or "ems")
    level = _resolve_level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(PaddedNameFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.propagate = False
        logger.debug(f"Logger '{logger.name}' ready.")

    return logger
