"""Team endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.assignment import AssignmentEngine
from ...core.roster import RosterService
from ...core.schemas import (
    DeactivateUsersRequest,
    DeactivateUsersResponse,
    PullRequestWithReviewers,
    TeamCreate,
    TeamCreateResponse,
    TeamMember,
    TeamResponse,
)
from ..dependencies import get_engine, get_roster

router = APIRouter()


@router.post("/team/add", response_model=TeamCreateResponse, status_code=201)
async def create_team(
    team_data: TeamCreate,
    roster: RosterService = Depends(get_roster),
):
    """Create a team together with its members."""
    team = await roster.create_team(team_data.team_name, team_data.members)
    return TeamCreateResponse(
        team=TeamResponse(
            team_name=team.team_name,
            members=[TeamMember.from_user(user) for user in team.members],
        )
    )


@router.get("/team/get", response_model=TeamResponse)
async def get_team(
    team_name: str = Query("", description="Team name"),
    roster: RosterService = Depends(get_roster),
):
    """Get a team and its members."""
    team = await roster.get_team(team_name)
    return TeamResponse(
        team_name=team.team_name,
        members=[TeamMember.from_user(user) for user in team.members],
    )


@router.post("/team/deactivateUsers", response_model=DeactivateUsersResponse)
async def deactivate_users(
    request_data: DeactivateUsersRequest,
    engine: AssignmentEngine = Depends(get_engine),
):
    """Deactivate users in bulk and hand their open reviews over to teammates."""
    results = await engine.deactivate_users(request_data.users)
    return DeactivateUsersResponse(
        updated_prs=[
            PullRequestWithReviewers.build(result.pull_request, result.reviewers)
            for result in results
        ]
    )
