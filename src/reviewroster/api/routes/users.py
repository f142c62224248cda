"""User endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.assignment import AssignmentEngine
from ...core.schemas import (
    PullRequestShort,
    SetUserActiveRequest,
    SetUserActiveResponse,
    UserResponse,
    UserReviewsResponse,
)
from ..dependencies import get_engine

router = APIRouter()


@router.post("/users/setIsActive", response_model=SetUserActiveResponse)
async def set_user_active(
    request_data: SetUserActiveRequest,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Activate or deactivate a single user."""
    user = await engine.set_user_active(request_data.user_id, request_data.is_active)
    return SetUserActiveResponse(user=UserResponse.model_validate(user))


@router.get("/users/getReview", response_model=UserReviewsResponse)
async def get_user_reviews(
    user_id: str = Query("", description="Reviewer id"),
    engine: AssignmentEngine = Depends(get_engine),
):
    """List the pull requests a user currently reviews."""
    pull_requests = await engine.list_reviews_for_user(user_id)
    return UserReviewsResponse(
        user_id=user_id,
        pull_requests=[PullRequestShort.from_model(pr) for pr in pull_requests],
    )
