# infrastructure/logging/log_setup.py
import sys

from loguru import logger

_FORMAT = "{time:HH:mm:ss.SSS} | {level: <7} | {message} | {extra}"


def setup_console_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_FORMAT)
