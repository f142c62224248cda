"""Team and user schemas"""
from pydantic import BaseModel, ConfigDict, Field

from ..models import User


class TeamMember(BaseModel):
    """A member as listed in team requests and responses."""
    user_id: str
    username: str
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> "TeamMember":
        return cls(user_id=user.id, username=user.username, is_active=user.is_active)


class TeamCreate(BaseModel):
    """Schema for creating a team together with its members."""
    team_name: str
    members: list[TeamMember] = Field(default_factory=list)


class TeamResponse(BaseModel):
    team_name: str
    members: list[TeamMember]


class TeamCreateResponse(BaseModel):
    team: TeamResponse


class UserResponse(BaseModel):
    """Schema for a single user."""
    user_id: str = Field(validation_alias="id")
    username: str
    team_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SetUserActiveRequest(BaseModel):
    user_id: str
    is_active: bool


class SetUserActiveResponse(BaseModel):
    user: UserResponse


class DeactivateUsersRequest(BaseModel):
    users: list[str] = Field(default_factory=list)
