import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "CAVES_LOG_LEVEL"


def resolve_level(default_level: int, env_value: Optional[str] = None) -> int:
    """Level named by ``CAVES_LOG_LEVEL`` (a name like ``debug`` or a number), else the default."""
    if env_value is None:
        env_value = os.getenv(LOG_LEVEL_ENV)
    if not env_value:
        return default_level
    if env_value.isdigit():
        return int(env_value)
    level = logging.getLevelName(env_value.upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.WARNING) -> None:
    """Send the ``caves.*`` loggers to stderr.

    Per-level phase failures and regenerated batches are reported there,
    keeping stdout free for the rendered map.
    """
    logging.basicConfig(
        level=resolve_level(default_level),
        stream=sys.stderr,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
