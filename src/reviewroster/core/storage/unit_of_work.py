"""Unit of work: one session, one transaction, all repositories."""
from sqlalchemy.ext.asyncio import AsyncSession

from .repositories import (
    AssignmentRepository,
    PullRequestRepository,
    TeamRepository,
    UserRepository,
)


class UnitOfWork:
    """Repositories bound to a single session.

    Instances are handed out by ``Database.unit_of_work()``, which owns the
    commit/rollback. Don't construct one directly outside tests.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.teams = TeamRepository(session)
        self.users = UserRepository(session)
        self.pull_requests = PullRequestRepository(session)
        self.assignments = AssignmentRepository(session)

    async def flush(self) -> None:
        await self.session.flush()
