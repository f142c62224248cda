"""API route modules."""
from . import pull_requests, stats, teams, users

__all__ = [
    "teams",
    "users",
    "pull_requests",
    "stats",
]
