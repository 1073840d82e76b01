import logging
import os
from typing import Optional

ENV_LOG_LEVEL = "MSEREADER_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_from_env(default_level: int) -> int:
    name = os.getenv(ENV_LOG_LEVEL)
    if not name:
        return default_level
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO, package_level: Optional[int] = None) -> None:
    """Set up the root logger for command line use.

    MSEREADER_LOG_LEVEL overrides ``default_level``. ``package_level`` only
    applies to the ``msereader`` loggers, e.g. to see per-line warnings
    (logged at DEBUG) without debug output from other libraries.
    """
    level = level_from_env(default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if package_level is not None:
        logging.getLogger("msereader").setLevel(package_level)
