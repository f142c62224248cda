"""Assignment engine: who reviews which pull request.

The engine is the only writer of review assignments, pull request status and
user activity. Each mutating operation acquires exactly one unit of work from
the database; everything it reads to make a decision and everything it writes
as a result happen inside that single transaction.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from ..errors import (
    AlreadyMergedError,
    InvalidInputError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
)
from ..models import PullRequest, PullRequestStatus, User
from ..storage.database import Database
from ..storage.repositories import PullRequestRepository
from ..storage.unit_of_work import UnitOfWork
from .selector import CandidateSelector

logger = logging.getLogger(__name__)

DEFAULT_REVIEWERS_PER_PULL_REQUEST = 2


@dataclass
class AssignmentResult:
    """A pull request together with its current reviewers."""
    pull_request: PullRequest
    reviewers: list[str] = field(default_factory=list)


@dataclass
class ReassignmentResult(AssignmentResult):
    """Outcome of replacing one reviewer."""
    replaced_by: str = ""


def _require(*values: Optional[str]) -> None:
    if any(not value for value in values):
        raise InvalidInputError()


class AssignmentEngine:
    """Assigns, reassigns and withdraws reviewers.

    Args:
        db: Database handing out units of work
        selector: Candidate selector; defaults to one seeded from system entropy
        reviewers_per_pull_request: Reviewers picked when a pull request is created
    """

    def __init__(
        self,
        db: Database,
        selector: Optional[CandidateSelector] = None,
        reviewers_per_pull_request: int = DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    ):
        if reviewers_per_pull_request < 0:
            raise ValueError("reviewers_per_pull_request must be non-negative")
        self.db = db
        self.selector = selector or CandidateSelector()
        self.reviewers_per_pull_request = reviewers_per_pull_request

    async def _eligible_pool(
        self, uow: UnitOfWork, team_name: str, exclude: Iterable[str]
    ) -> list[str]:
        return await uow.users.active_team_member_ids(
            team_name, exclude=exclude, for_update=True
        )

    async def _get_pull_request(self, uow: UnitOfWork, pull_request_id: str) -> PullRequest:
        pull_request = await uow.pull_requests.get(pull_request_id, for_update=True)
        if pull_request is None:
            raise NotFoundError(f"pull request {pull_request_id} not found")
        return pull_request

    async def _get_user(self, uow: UnitOfWork, user_id: str, for_update: bool = False) -> User:
        user = await uow.users.get(user_id, for_update=for_update)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    async def create_pull_request(
        self, pull_request_id: str, name: str, author_id: str
    ) -> AssignmentResult:
        """Create a pull request and assign its initial reviewers.

        Reviewers are drawn from the active members of the author's team,
        never the author. Fewer than the configured number are assigned when
        the team is small; none at all is not an error.

        Raises:
            InvalidInputError: If any argument is empty
            PullRequestExistsError: If the id is taken, including by a
                concurrent creator
            NotFoundError: If the author does not exist
        """
        _require(pull_request_id, name, author_id)

        async with self.db.unit_of_work() as uow:
            if await uow.pull_requests.exists(pull_request_id):
                raise PullRequestExistsError()

            author = await self._get_user(uow, author_id)
            pool = await self._eligible_pool(uow, author.team_name, exclude={author.id})

            pull_request = PullRequest(
                id=pull_request_id,
                name=name,
                author_id=author.id,
                status=PullRequestStatus.OPEN.value,
            )
            try:
                await uow.pull_requests.create(pull_request)
            except IntegrityError as e:
                raise PullRequestExistsError() from e

            reviewers = self.selector.select(pool, self.reviewers_per_pull_request)
            for reviewer_id in reviewers:
                await uow.assignments.assign(pull_request.id, reviewer_id)

        logger.info(
            f"Created pull request {pull_request_id} by {author_id}, reviewers={reviewers}"
        )
        return AssignmentResult(pull_request=pull_request, reviewers=reviewers)

    async def merge_pull_request(self, pull_request_id: str) -> AssignmentResult:
        """Mark a pull request MERGED.

        Merging an already merged pull request writes nothing and returns
        its current state.
        """
        _require(pull_request_id)

        async with self.db.unit_of_work() as uow:
            pull_request = await self._get_pull_request(uow, pull_request_id)
            if not pull_request.is_merged:
                await uow.pull_requests.mark_merged(pull_request)
                logger.info(f"Merged pull request {pull_request_id}")
            reviewers = await uow.assignments.current_reviewer_ids(pull_request_id)

        return AssignmentResult(pull_request=pull_request, reviewers=reviewers)

    async def reassign_reviewer(
        self, pull_request_id: str, old_reviewer_id: str
    ) -> ReassignmentResult:
        """Replace one current reviewer with a random teammate.

        The replacement comes from the old reviewer's team and is active, is
        not the author and is not already reviewing this pull request.

        A second call with the same ``old_reviewer_id`` fails with
        ``NotAssignedError``: the old reviewer is no longer current, so the
        work is already done.

        Raises:
            InvalidInputError: If any argument is empty
            NotFoundError: If the pull request does not exist
            AlreadyMergedError: If the pull request is merged
            NotAssignedError: If old_reviewer_id is not a current reviewer
            NoCandidateError: If nobody is eligible to take over
        """
        _require(pull_request_id, old_reviewer_id)

        async with self.db.unit_of_work() as uow:
            pull_request = await self._get_pull_request(uow, pull_request_id)
            if pull_request.is_merged:
                raise AlreadyMergedError()

            current = await uow.assignments.current_reviewer_ids(pull_request_id)
            if old_reviewer_id not in current:
                raise NotAssignedError()

            old_reviewer = await self._get_user(uow, old_reviewer_id)
            pool = await self._eligible_pool(
                uow,
                old_reviewer.team_name,
                exclude={pull_request.author_id, old_reviewer_id, *current},
            )
            replacement_id = self.selector.select_one(pool)
            if replacement_id is None:
                logger.info(
                    f"No candidate to replace {old_reviewer_id} on {pull_request_id}"
                )
                raise NoCandidateError()

            await uow.assignments.replace(pull_request_id, old_reviewer_id, replacement_id)
            reviewers = await uow.assignments.current_reviewer_ids(pull_request_id)

        logger.info(
            f"Reassigned {pull_request_id}: {old_reviewer_id} -> {replacement_id}"
        )
        return ReassignmentResult(
            pull_request=pull_request, reviewers=reviewers, replaced_by=replacement_id
        )

    async def deactivate_users(self, user_ids: Iterable[str]) -> list[AssignmentResult]:
        """Deactivate a batch of users and hand their reviews over.

        The whole batch is one unit of work: an unknown id aborts everything
        and nobody is deactivated. Repeated ids are processed once.

        Every open assignment of a deactivated user goes to a random active
        member of the author's team who is not the author, not already a
        reviewer and not part of this batch. When nobody qualifies the
        assignment is dropped instead.

        Returns:
            One result per distinct pull request touched, in the order first
            touched, reflecting the state after the whole batch.

        Raises:
            NotFoundError: If any user id does not exist
        """
        batch = list(dict.fromkeys(user_ids))
        in_batch = set(batch)
        touched: dict[str, PullRequest] = {}
        replaced = dropped = 0

        async with self.db.unit_of_work() as uow:
            for user_id in batch:
                user = await self._get_user(uow, user_id, for_update=True)
                await uow.users.set_active(user, False)

                for pull_request in await uow.pull_requests.list_by_reviewer(user_id):
                    touched.setdefault(pull_request.id, pull_request)

                    author = await self._get_user(uow, pull_request.author_id)
                    current = await uow.assignments.current_reviewer_ids(pull_request.id)
                    pool = await self._eligible_pool(
                        uow,
                        author.team_name,
                        exclude={pull_request.author_id, *current, *in_batch},
                    )

                    replacement_id = self.selector.select_one(pool)
                    if replacement_id is not None:
                        await uow.assignments.replace(pull_request.id, user_id, replacement_id)
                        replaced += 1
                    else:
                        await uow.assignments.remove(pull_request.id, user_id)
                        dropped += 1

            results = [
                AssignmentResult(
                    pull_request=pull_request,
                    reviewers=await uow.assignments.current_reviewer_ids(pull_request.id),
                )
                for pull_request in touched.values()
            ]

        logger.info(
            f"Deactivated {len(batch)} users: {len(touched)} pull requests touched, "
            f"{replaced} assignments replaced, {dropped} dropped"
        )
        return results

    async def set_user_active(self, user_id: str, active: bool) -> User:
        """Set a single user's active flag. Existing assignments are left alone."""
        _require(user_id)

        async with self.db.unit_of_work() as uow:
            user = await self._get_user(uow, user_id, for_update=True)
            await uow.users.set_active(user, active)

        logger.info(f"Set user {user_id} active={active}")
        return user

    async def list_reviews_for_user(self, user_id: str) -> list[PullRequest]:
        """Pull requests on which the user is a current reviewer."""
        _require(user_id)

        async with self.db.session() as session:
            return await PullRequestRepository(session).list_by_reviewer(user_id)
