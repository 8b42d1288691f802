"""
Logging setup for nodehub, built on loguru.
"""

import sys

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for all sinks.
        log_file: Optional path for an additional rotating file sink.
    """
    logger.remove()
    logger.configure(extra={"name": "nodehub"})
    logger.add(sys.stderr, level=level.upper(), format=_FORMAT)

    if log_file:
        logger.add(
            log_file,
            level=level.upper(),
            format=_FORMAT,
            rotation="10 MB",
            retention=2,
            encoding="utf-8",
        )


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return logger.bind(name=name)
