"""Pull request endpoints"""
from fastapi import APIRouter, Depends

from ...core.assignment import AssignmentEngine
from ...core.schemas import (
    PullRequestCreate,
    PullRequestMerge,
    PullRequestResponse,
    PullRequestWithReviewers,
    ReassignRequest,
    ReassignResponse,
)
from ..dependencies import get_engine

router = APIRouter()


@router.post("/pullRequest/create", response_model=PullRequestResponse, status_code=201)
async def create_pull_request(
    pr_data: PullRequestCreate,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Create a pull request and assign up to two reviewers from the author's team."""
    result = await engine.create_pull_request(
        pr_data.pull_request_id, pr_data.pull_request_name, pr_data.author_id
    )
    return PullRequestResponse(pr=PullRequestWithReviewers.build(result.pull_request, result.reviewers))


@router.post("/pullRequest/merge", response_model=PullRequestResponse)
async def merge_pull_request(
    pr_data: PullRequestMerge,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Mark a pull request merged. Merging twice is not an error."""
    result = await engine.merge_pull_request(pr_data.pull_request_id)
    return PullRequestResponse(pr=PullRequestWithReviewers.build(result.pull_request, result.reviewers))


@router.post("/pullRequest/reassign", response_model=ReassignResponse)
async def reassign_reviewer(
    request_data: ReassignRequest,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Replace a reviewer with another active member of their team."""
    result = await engine.reassign_reviewer(request_data.pull_request_id, request_data.old_user_id)
    return ReassignResponse(
        pr=PullRequestWithReviewers.build(result.pull_request, result.reviewers),
        replaced_by=result.replaced_by,
    )
