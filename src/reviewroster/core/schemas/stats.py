"""Statistics schemas"""
from pydantic import BaseModel


class ReviewerStat(BaseModel):
    reviewer_id: str
    assignment_count: int


class StatusStat(BaseModel):
    status: str
    count: int


class StatsResponse(BaseModel):
    """Schema for the statistics rollup."""
    top_reviewers: list[ReviewerStat]
    pr_status_distribution: list[StatusStat]
    total_active_users: int
