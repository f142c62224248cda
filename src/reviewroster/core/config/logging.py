"""Logging setup driven by ReviewRosterConfig."""
import logging
from typing import Optional

from .settings import ReviewRosterConfig, get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: Optional[ReviewRosterConfig] = None) -> None:
    """Configure root logging from the given (or global) configuration.

    Calling this more than once is harmless: handlers are only installed
    on the first call, later calls just adjust the level.
    """
    config = config or get_config()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
    logging.getLogger("reviewroster").setLevel(level)
