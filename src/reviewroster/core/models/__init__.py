"""Core data models for teams, users, pull requests and assignments."""
# Import all models to ensure relationships work correctly
from .base import Base
from .team import Team, User
from .pull_request import PullRequest, PullRequestStatus, UNKNOWN_STATUS, status_label
from .assignment import AssignmentState, ReviewAssignment

__all__ = [
    "Base",
    # Roster models
    "Team",
    "User",
    # Pull request models
    "PullRequest",
    "PullRequestStatus",
    "UNKNOWN_STATUS",
    "status_label",
    # Assignment models
    "ReviewAssignment",
    "AssignmentState",
]
