"""Logging for processes hosting the work-profile core.

Services log through module loggers from get_logger(); execution skips,
tenure transitions and check-in completions land here at INFO.
"""

import logging
import sys

from workprofile.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings | None = None) -> None:
    """Send workprofile logs to stdout.

    DEBUG when settings.debug is set, INFO otherwise. SQLAlchemy engine logs
    stay at WARNING unless settings.database_echo hands them to the engine.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
