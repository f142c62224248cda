"""Pull request schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..models import PullRequest, PullRequestStatus


class PullRequestCreate(BaseModel):
    """Schema for creating a pull request."""
    pull_request_id: str
    pull_request_name: str
    author_id: str


class PullRequestMerge(BaseModel):
    pull_request_id: str


class ReassignRequest(BaseModel):
    pull_request_id: str
    old_user_id: str


class PullRequestShort(BaseModel):
    """A pull request without its reviewers."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus

    @classmethod
    def from_model(cls, pull_request: PullRequest) -> "PullRequestShort":
        return cls(
            pull_request_id=pull_request.id,
            pull_request_name=pull_request.name,
            author_id=pull_request.author_id,
            status=PullRequestStatus.from_storage(pull_request.status),
        )


class PullRequestWithReviewers(PullRequestShort):
    """A pull request with its current reviewers."""
    assigned_reviewers: list[str]
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    @classmethod
    def build(cls, pull_request: PullRequest, reviewers: list[str]) -> "PullRequestWithReviewers":
        return cls(
            pull_request_id=pull_request.id,
            pull_request_name=pull_request.name,
            author_id=pull_request.author_id,
            status=PullRequestStatus.from_storage(pull_request.status),
            assigned_reviewers=list(reviewers),
            created_at=pull_request.created_at,
            merged_at=pull_request.merged_at,
        )


class PullRequestResponse(BaseModel):
    pr: PullRequestWithReviewers


class ReassignResponse(BaseModel):
    pr: PullRequestWithReviewers
    replaced_by: str


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShort]


class DeactivateUsersResponse(BaseModel):
    updated_prs: list[PullRequestWithReviewers]
