import logging
import os

LOG_LEVEL_ENV = "NODESCRIPT_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(default_level: int = logging.INFO) -> int:
    """Configure the root logger for hosts and the command line tool.

    Respects NODESCRIPT_LOG_LEVEL if present. Returns the level applied.
    """
    level_name = os.getenv(LOG_LEVEL_ENV)
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
        if not isinstance(level, int):
            level = default_level
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("nodescript").setLevel(level)
    return level
