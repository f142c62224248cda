"""reviewroster - reviewer assignment for team pull requests.

Keeps code-review responsibility spread across a team roster: picks
reviewers when a pull request is opened, swaps them on request, and hands
reviews over when people are deactivated.
"""
__version__ = "0.1.0"

from .core.config import ReviewRosterConfig, configure_logging, get_config, init_config
from .core.storage import Database, UnitOfWork, get_db, init_db
from .core.models import (
    AssignmentState,
    PullRequest,
    PullRequestStatus,
    ReviewAssignment,
    Team,
    User,
)
from .core.errors import (
    AlreadyExistsError,
    AlreadyMergedError,
    ConflictError,
    ConflictKind,
    InternalError,
    InvalidInputError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    ReviewRosterError,
    TeamExistsError,
)
from .core.assignment import (
    AssignmentEngine,
    AssignmentResult,
    CandidateSelector,
    ReassignmentResult,
)
from .core.roster import RosterService
from .core.stats import StatsAggregator

from . import core

__all__ = [
    # Version
    "__version__",
    # Config
    "ReviewRosterConfig",
    "init_config",
    "get_config",
    "configure_logging",
    # Database
    "Database",
    "UnitOfWork",
    "init_db",
    "get_db",
    # Models
    "Team",
    "User",
    "PullRequest",
    "PullRequestStatus",
    "ReviewAssignment",
    "AssignmentState",
    # Errors
    "ReviewRosterError",
    "InvalidInputError",
    "NotFoundError",
    "ConflictError",
    "ConflictKind",
    "AlreadyExistsError",
    "TeamExistsError",
    "PullRequestExistsError",
    "AlreadyMergedError",
    "NotAssignedError",
    "NoCandidateError",
    "InternalError",
    # Services
    "AssignmentEngine",
    "AssignmentResult",
    "ReassignmentResult",
    "CandidateSelector",
    "RosterService",
    "StatsAggregator",
    # Core module
    "core",
]
