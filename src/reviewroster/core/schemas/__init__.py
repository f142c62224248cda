"""Pydantic schemas for API validation and serialization."""
from .team import (
    DeactivateUsersRequest,
    SetUserActiveRequest,
    SetUserActiveResponse,
    TeamCreate,
    TeamCreateResponse,
    TeamMember,
    TeamResponse,
    UserResponse,
)
from .pull_request import (
    DeactivateUsersResponse,
    PullRequestCreate,
    PullRequestMerge,
    PullRequestResponse,
    PullRequestShort,
    PullRequestWithReviewers,
    ReassignRequest,
    ReassignResponse,
    UserReviewsResponse,
)
from .stats import ReviewerStat, StatsResponse, StatusStat

__all__ = [
    # Team schemas
    "TeamMember",
    "TeamCreate",
    "TeamResponse",
    "TeamCreateResponse",
    # User schemas
    "UserResponse",
    "SetUserActiveRequest",
    "SetUserActiveResponse",
    "DeactivateUsersRequest",
    "DeactivateUsersResponse",
    # Pull request schemas
    "PullRequestCreate",
    "PullRequestMerge",
    "ReassignRequest",
    "PullRequestShort",
    "PullRequestWithReviewers",
    "PullRequestResponse",
    "ReassignResponse",
    "UserReviewsResponse",
    # Statistics schemas
    "ReviewerStat",
    "StatusStat",
    "StatsResponse",
]
