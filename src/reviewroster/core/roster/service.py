"""Team creation and lookup."""
import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.exc import IntegrityError

from ..errors import InvalidInputError, NotFoundError, TeamExistsError
from ..models import Team, User
from ..schemas.team import TeamMember
from ..storage.database import Database
from ..storage.repositories import TeamRepository

logger = logging.getLogger(__name__)


@dataclass
class TeamResult:
    team_name: str
    members: list[User]


class RosterService:
    """Creates teams with their members and reads them back."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _validate(team_name: str, members: Sequence[TeamMember]) -> None:
        if not team_name or not members:
            raise InvalidInputError()

        seen: set[str] = set()
        for member in members:
            if not member.user_id or not member.username:
                raise InvalidInputError()
            if member.user_id in seen:
                raise InvalidInputError(f"user {member.user_id} listed twice")
            seen.add(member.user_id)

    async def create_team(self, team_name: str, members: Sequence[TeamMember]) -> TeamResult:
        """Create a team and all of its members atomically.

        Raises:
            InvalidInputError: If the name is empty, there are no members, a
                member lacks an id or username, or an id is listed twice
            TeamExistsError: If the team or any member id already exists
        """
        self._validate(team_name, members)

        async with self.db.unit_of_work() as uow:
            if await uow.teams.exists(team_name):
                raise TeamExistsError()

            taken = await uow.users.existing_ids(m.user_id for m in members)
            if taken:
                raise TeamExistsError(f"users already registered: {', '.join(sorted(taken))}")

            try:
                await uow.teams.create(Team(name=team_name))
                created = [
                    await uow.users.create(
                        User(
                            id=member.user_id,
                            username=member.username,
                            is_active=member.is_active,
                            team_name=team_name,
                        )
                    )
                    for member in members
                ]
            except IntegrityError as e:
                raise TeamExistsError() from e

        logger.info(f"Created team {team_name} with {len(created)} members")
        return TeamResult(team_name=team_name, members=created)

    async def get_team(self, team_name: str) -> TeamResult:
        """Get a team and its members.

        Raises:
            NotFoundError: If the team does not exist
        """
        if not team_name:
            raise NotFoundError("team not found")

        async with self.db.session() as session:
            teams = TeamRepository(session)
            if not await teams.exists(team_name):
                raise NotFoundError("team not found")
            members = await teams.list_members(team_name)

        return TeamResult(team_name=team_name, members=members)
