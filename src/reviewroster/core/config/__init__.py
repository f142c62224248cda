"""Configuration for reviewroster."""
from .logging import configure_logging
from .settings import ReviewRosterConfig, get_config, init_config

__all__ = [
    "ReviewRosterConfig",
    "get_config",
    "init_config",
    "configure_logging",
]
