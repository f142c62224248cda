"""Storage layer: async engine, units of work and repositories."""
from .database import Database, get_db, init_db
from .repositories import (
    AssignmentRepository,
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)
from .unit_of_work import UnitOfWork

__all__ = [
    "Database",
    "get_db",
    "init_db",
    "UnitOfWork",
    "TeamRepository",
    "UserRepository",
    "PullRequestRepository",
    "AssignmentRepository",
]
