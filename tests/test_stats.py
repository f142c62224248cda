"""Tests for the statistics rollup."""
import pytest
from sqlalchemy import update

from reviewroster.core.assignment import AssignmentEngine
from reviewroster.core.models import PullRequest, PullRequestStatus
from reviewroster.core.schemas import PullRequestShort
from reviewroster.core.stats import StatsAggregator
from reviewroster.core.storage.database import Database


@pytest.fixture
async def backend(make_team):
    return await make_team("backend", {"u1": True, "u2": True, "u3": True, "u4": False})


@pytest.mark.asyncio
async def test_stats_empty_database(aggregator: StatsAggregator):
    stats = await aggregator.get_stats()

    assert stats.top_reviewers == []
    assert stats.pr_status_distribution == []
    assert stats.total_active_users == 0


@pytest.mark.asyncio
async def test_stats_counts_reviewers_and_statuses(
    aggregator: StatsAggregator, engine: AssignmentEngine, backend
):
    await engine.create_pull_request("pr-1", "Add search", "u1")  # u2, u3
    await engine.create_pull_request("pr-2", "Fix login", "u2")  # u1, u3
    await engine.create_pull_request("pr-3", "Tidy", "u3")  # u1, u2
    await engine.merge_pull_request("pr-3")

    stats = await aggregator.get_stats()

    assert [(s.reviewer_id, s.assignment_count) for s in stats.top_reviewers] == [
        ("u1", 2),
        ("u2", 2),
        ("u3", 2),
    ]
    assert [(s.status, s.count) for s in stats.pr_status_distribution] == [
        ("OPEN", 2),
        ("MERGED", 1),
    ]
    assert stats.total_active_users == 3


@pytest.mark.asyncio
async def test_stats_counts_replaced_assignments(
    aggregator: StatsAggregator, engine: AssignmentEngine, make_team
):
    await make_team("core", {"c1": True, "c2": True, "c3": True, "c4": True})
    await engine.create_pull_request("pr-1", "Add search", "c1")  # c2, c3
    await engine.reassign_reviewer("pr-1", "c2")  # c2 -> c4

    stats = await aggregator.get_stats()

    assert {s.reviewer_id: s.assignment_count for s in stats.top_reviewers} == {
        "c2": 1,
        "c3": 1,
        "c4": 1,
    }


@pytest.mark.asyncio
async def test_stats_limits_top_reviewers(db: Database, engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.create_pull_request("pr-2", "Fix login", "u2")

    stats = await StatsAggregator(db, top_reviewers_limit=1).get_stats()

    assert [(s.reviewer_id, s.assignment_count) for s in stats.top_reviewers] == [("u3", 2)]


@pytest.mark.asyncio
async def test_stats_reports_unrecognized_status_as_unknown(
    aggregator: StatsAggregator, engine: AssignmentEngine, db: Database, backend
):
    """Test that corrupt or missing statuses are counted as UNKNOWN."""
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.create_pull_request("pr-2", "Fix login", "u1")
    await engine.create_pull_request("pr-3", "Tidy", "u1")

    async with db.unit_of_work() as uow:
        await uow.session.execute(
            update(PullRequest).where(PullRequest.id == "pr-2").values(status=None)
        )
        await uow.session.execute(
            update(PullRequest).where(PullRequest.id == "pr-3").values(status="DRAFT")
        )

    stats = await aggregator.get_stats()

    assert [(s.status, s.count) for s in stats.pr_status_distribution] == [
        ("OPEN", 1),
        ("UNKNOWN", 2),
    ]

    # The same rows still read as OPEN when listed
    reviews = await engine.list_reviews_for_user("u2")
    assert [PullRequestShort.from_model(pr).status for pr in reviews] == [
        PullRequestStatus.OPEN,
        PullRequestStatus.OPEN,
        PullRequestStatus.OPEN,
    ]
