"""Repositories over the roster and review-unit tables.

Repositories only read and write rows; they never decide who reviews what.
All of them work against the session they were constructed with, so several
repositories sharing one session take part in the same transaction.
"""
from typing import Iterable, Optional

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import PullRequest, PullRequestStatus, ReviewAssignment, Team, User


class TeamRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, name: str) -> Optional[Team]:
        return await self.session.get(Team, name)

    async def exists(self, name: str) -> bool:
        result = await self.session.execute(select(Team.name).where(Team.name == name))
        return result.scalar_one_or_none() is not None

    async def create(self, team: Team) -> Team:
        self.session.add(team)
        await self.session.flush()
        return team

    async def list_members(self, name: str) -> list[User]:
        result = await self.session.execute(
            select(User).where(User.team_name == name).order_by(User.id)
        )
        return list(result.scalars().all())


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str, for_update: bool = False) -> Optional[User]:
        query = select(User).where(User.id == user_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def existing_ids(self, user_ids: Iterable[str]) -> set[str]:
        ids = list(user_ids)
        if not ids:
            return set()
        result = await self.session.execute(select(User.id).where(User.id.in_(ids)))
        return set(result.scalars().all())

    async def set_active(self, user: User, active: bool) -> User:
        user.is_active = active
        await self.session.flush()
        return user

    @staticmethod
    def active_team_members_query(team_name: str, for_update: bool = False) -> Select:
        query = (
            select(User.id)
            .where(User.team_name == team_name, User.is_active.is_(True))
            .order_by(User.id)
        )
        if for_update:
            query = query.with_for_update()
        return query

    async def active_team_member_ids(
        self, team_name: str, exclude: Iterable[str] = (), for_update: bool = False
    ) -> list[str]:
        """Ids of active members of a team, minus ``exclude``.

        With ``for_update`` the matching rows stay locked until the
        transaction ends, so nobody can be deactivated between being picked
        and being assigned.
        """
        excluded = set(exclude)
        result = await self.session.execute(
            self.active_team_members_query(team_name, for_update=for_update)
        )
        return [user_id for user_id in result.scalars().all() if user_id not in excluded]

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.is_active.is_(True))
        )
        return result.scalar_one()


class PullRequestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, pull_request_id: str, for_update: bool = False) -> Optional[PullRequest]:
        query = select(PullRequest).where(PullRequest.id == pull_request_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, pull_request_id: str) -> bool:
        result = await self.session.execute(
            select(PullRequest.id).where(PullRequest.id == pull_request_id)
        )
        return result.scalar_one_or_none() is not None

    async def create(self, pull_request: PullRequest) -> PullRequest:
        self.session.add(pull_request)
        await self.session.flush()
        return pull_request

    async def mark_merged(self, pull_request: PullRequest) -> PullRequest:
        pull_request.status = PullRequestStatus.MERGED.value
        pull_request.merged_at = func.now()
        await self.session.flush()
        await self.session.refresh(pull_request)
        return pull_request

    async def list_by_reviewer(self, reviewer_id: str) -> list[PullRequest]:
        """Pull requests on which ``reviewer_id`` is a current reviewer."""
        result = await self.session.execute(
            select(PullRequest)
            .join(ReviewAssignment, ReviewAssignment.pull_request_id == PullRequest.id)
            .where(
                ReviewAssignment.reviewer_id == reviewer_id,
                ReviewAssignment.replaced_by.is_(None),
            )
            .order_by(PullRequest.created_at, PullRequest.id)
        )
        return list(result.scalars().unique().all())

    async def count_by_status(self) -> list[tuple[Optional[str], int]]:
        result = await self.session.execute(
            select(PullRequest.status, func.count())
            .group_by(PullRequest.status)
        )
        return [(status, count) for status, count in result.all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(PullRequest))
        return result.scalar_one()


class AssignmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def assign(self, pull_request_id: str, reviewer_id: str) -> ReviewAssignment:
        assignment = ReviewAssignment(pull_request_id=pull_request_id, reviewer_id=reviewer_id)
        self.session.add(assignment)
        await self.session.flush()
        return assignment

    async def current_reviewer_ids(self, pull_request_id: str) -> list[str]:
        """Current reviewers of a pull request, in assignment order."""
        result = await self.session.execute(
            select(ReviewAssignment.reviewer_id)
            .where(
                ReviewAssignment.pull_request_id == pull_request_id,
                ReviewAssignment.replaced_by.is_(None),
            )
            .order_by(ReviewAssignment.id)
        )
        return list(result.scalars().all())

    async def is_current_reviewer(self, pull_request_id: str, reviewer_id: str) -> bool:
        result = await self.session.execute(
            select(ReviewAssignment.id).where(
                ReviewAssignment.pull_request_id == pull_request_id,
                ReviewAssignment.reviewer_id == reviewer_id,
                ReviewAssignment.replaced_by.is_(None),
            )
        )
        return result.first() is not None

    async def history(self, pull_request_id: str) -> list[ReviewAssignment]:
        """Every edge of a pull request, current and replaced."""
        result = await self.session.execute(
            select(ReviewAssignment)
            .where(ReviewAssignment.pull_request_id == pull_request_id)
            .order_by(ReviewAssignment.id)
        )
        return list(result.scalars().all())

    async def replace(
        self, pull_request_id: str, reviewer_id: str, replacement_id: str
    ) -> Optional[ReviewAssignment]:
        """Mark the current edge of ``reviewer_id`` as replaced and add one for
        ``replacement_id``.

        Returns the new edge, or None when ``reviewer_id`` had no current edge
        (nothing is written in that case).
        """
        result = await self.session.execute(
            update(ReviewAssignment)
            .where(
                ReviewAssignment.pull_request_id == pull_request_id,
                ReviewAssignment.reviewer_id == reviewer_id,
                ReviewAssignment.replaced_by.is_(None),
            )
            .values(replaced_by=replacement_id, replaced_at=func.now())
        )
        if result.rowcount == 0:
            return None
        return await self.assign(pull_request_id, replacement_id)

    async def remove(self, pull_request_id: str, reviewer_id: str) -> bool:
        """Delete the current edge of ``reviewer_id`` outright."""
        result = await self.session.execute(
            delete(ReviewAssignment)
            .where(
                ReviewAssignment.pull_request_id == pull_request_id,
                ReviewAssignment.reviewer_id == reviewer_id,
                ReviewAssignment.replaced_by.is_(None),
            )
        )
        return result.rowcount > 0

    async def count_by_reviewer(self, limit: Optional[int] = None) -> list[tuple[str, int]]:
        """Assignment edges per reviewer, busiest first."""
        assignment_count = func.count(ReviewAssignment.id).label("assignment_count")
        query = (
            select(ReviewAssignment.reviewer_id, assignment_count)
            .group_by(ReviewAssignment.reviewer_id)
            .order_by(assignment_count.desc(), ReviewAssignment.reviewer_id)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [(reviewer_id, count) for reviewer_id, count in result.all()]
