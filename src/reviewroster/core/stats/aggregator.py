"""Read-only statistics over assignments, pull requests and users."""
from collections import Counter

from ..models import PullRequestStatus, UNKNOWN_STATUS, status_label
from ..schemas.stats import ReviewerStat, StatsResponse, StatusStat
from ..storage.database import Database
from ..storage.repositories import AssignmentRepository, PullRequestRepository, UserRepository

# Known statuses first, UNKNOWN last
_STATUS_ORDER = [status.value for status in PullRequestStatus] + [UNKNOWN_STATUS]


class StatsAggregator:
    """Computes the statistics rollup in a single read session."""

    def __init__(self, db: Database, top_reviewers_limit: int = 10):
        self.db = db
        self.top_reviewers_limit = top_reviewers_limit

    async def get_stats(self) -> StatsResponse:
        async with self.db.session() as session:
            reviewer_counts = await AssignmentRepository(session).count_by_reviewer(
                limit=self.top_reviewers_limit
            )
            status_counts = await PullRequestRepository(session).count_by_status()
            active_users = await UserRepository(session).count_active()

        # Several unrecognized raw values all collapse into UNKNOWN
        by_label: Counter[str] = Counter()
        for status, count in status_counts:
            by_label[status_label(status)] += count

        return StatsResponse(
            top_reviewers=[
                ReviewerStat(reviewer_id=reviewer_id, assignment_count=count)
                for reviewer_id, count in reviewer_counts
            ],
            pr_status_distribution=[
                StatusStat(status=label, count=by_label[label])
                for label in _STATUS_ORDER
                if label in by_label
            ],
            total_active_users=active_users,
        )
