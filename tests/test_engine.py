"""Tests for pull request creation, merge and reviewer reassignment."""
import pytest

from reviewroster.core.assignment import AssignmentEngine, CandidateSelector
from reviewroster.core.errors import (
    AlreadyMergedError,
    InvalidInputError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
)
from reviewroster.core.models import PullRequestStatus
from reviewroster.core.storage.database import Database
from reviewroster.core.storage.repositories import AssignmentRepository, PullRequestRepository


async def current_reviewers(db: Database, pull_request_id: str) -> list[str]:
    async with db.session() as session:
        return await AssignmentRepository(session).current_reviewer_ids(pull_request_id)


async def edges(db: Database, pull_request_id: str) -> list[tuple[int, str, str | None]]:
    async with db.session() as session:
        history = await AssignmentRepository(session).history(pull_request_id)
    return [(edge.id, edge.reviewer_id, edge.replaced_by) for edge in history]


@pytest.fixture
async def backend(make_team):
    return await make_team("backend", {"u1": True, "u2": True, "u3": True, "u4": True})


@pytest.mark.asyncio
async def test_create_assigns_two_teammates(engine: AssignmentEngine, backend):
    """Test that creation picks two active teammates other than the author."""
    result = await engine.create_pull_request("pr-1", "Add search", "u1")

    assert result.reviewers == ["u2", "u3"]
    assert result.pull_request.id == "pr-1"
    assert result.pull_request.status == PullRequestStatus.OPEN.value
    assert result.pull_request.created_at is not None
    assert result.pull_request.merged_at is None
    assert await current_reviewers(engine.db, "pr-1") == ["u2", "u3"]


@pytest.mark.asyncio
async def test_create_with_random_selection_never_picks_author(
    random_engine: AssignmentEngine, backend
):
    for i in range(10):
        result = await random_engine.create_pull_request(f"pr-{i}", "Change", "u3")
        assert len(result.reviewers) == 2
        assert len(set(result.reviewers)) == 2
        assert "u3" not in result.reviewers


@pytest.mark.asyncio
async def test_create_skips_inactive_members(engine: AssignmentEngine, make_team):
    await make_team("payments", {"p1": True, "p2": False, "p3": True})

    result = await engine.create_pull_request("pr-1", "Refund flow", "p1")

    assert result.reviewers == ["p3"]


@pytest.mark.asyncio
async def test_create_single_member_team_gets_no_reviewers(engine: AssignmentEngine, make_team):
    await make_team("solo", {"s1": True})

    result = await engine.create_pull_request("pr-1", "Lonely change", "s1")

    assert result.reviewers == []
    assert result.pull_request.status == PullRequestStatus.OPEN.value


@pytest.mark.asyncio
async def test_create_by_inactive_author_is_allowed(engine: AssignmentEngine, make_team):
    await make_team("infra", {"i1": False, "i2": True})

    result = await engine.create_pull_request("pr-1", "Terraform bump", "i1")

    assert result.reviewers == ["i2"]


@pytest.mark.asyncio
async def test_create_respects_configured_reviewer_count(
    db: Database, selector: CandidateSelector, backend
):
    engine = AssignmentEngine(db, selector=selector, reviewers_per_pull_request=3)

    result = await engine.create_pull_request("pr-1", "Big change", "u1")

    assert result.reviewers == ["u2", "u3", "u4"]


def test_negative_reviewer_count_rejected(db: Database):
    with pytest.raises(ValueError):
        AssignmentEngine(db, reviewers_per_pull_request=-1)


@pytest.mark.asyncio
async def test_create_duplicate_id(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "First", "u1")
    before = await edges(engine.db, "pr-1")

    with pytest.raises(PullRequestExistsError) as exc_info:
        await engine.create_pull_request("pr-1", "Second", "u2")

    assert exc_info.value.code == "PR_EXISTS"
    async with engine.db.session() as session:
        pull_request = await PullRequestRepository(session).get("pr-1")
    assert pull_request.name == "First"
    assert pull_request.author_id == "u1"
    assert await edges(engine.db, "pr-1") == before


@pytest.mark.asyncio
async def test_create_unknown_author(engine: AssignmentEngine, backend):
    with pytest.raises(NotFoundError):
        await engine.create_pull_request("pr-1", "Orphan", "ghost")

    async with engine.db.session() as session:
        assert not await PullRequestRepository(session).exists("pr-1")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "pull_request_id, name, author_id",
    [("", "Name", "u1"), ("pr-1", "", "u1"), ("pr-1", "Name", "")],
)
async def test_create_rejects_empty_fields(
    engine: AssignmentEngine, backend, pull_request_id, name, author_id
):
    with pytest.raises(InvalidInputError):
        await engine.create_pull_request(pull_request_id, name, author_id)


@pytest.mark.asyncio
async def test_merge_sets_status_and_timestamp(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")

    result = await engine.merge_pull_request("pr-1")

    assert result.pull_request.status == PullRequestStatus.MERGED.value
    assert result.pull_request.merged_at is not None
    assert result.reviewers == ["u2", "u3"]


@pytest.mark.asyncio
async def test_merge_is_idempotent(engine: AssignmentEngine, backend):
    """Test that a second merge succeeds and leaves the merge time alone."""
    await engine.create_pull_request("pr-1", "Add search", "u1")
    first = await engine.merge_pull_request("pr-1")

    second = await engine.merge_pull_request("pr-1")

    assert second.pull_request.status == PullRequestStatus.MERGED.value
    assert second.pull_request.merged_at == first.pull_request.merged_at
    assert second.reviewers == first.reviewers


@pytest.mark.asyncio
async def test_merge_unknown_pull_request(engine: AssignmentEngine, backend):
    with pytest.raises(NotFoundError):
        await engine.merge_pull_request("missing")


@pytest.mark.asyncio
async def test_reassign_replaces_reviewer(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")

    result = await engine.reassign_reviewer("pr-1", "u2")

    assert result.replaced_by == "u4"
    assert result.reviewers == ["u3", "u4"]
    assert await current_reviewers(engine.db, "pr-1") == ["u3", "u4"]


@pytest.mark.asyncio
async def test_reassign_keeps_history(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.reassign_reviewer("pr-1", "u2")

    async with engine.db.session() as session:
        history = await AssignmentRepository(session).history("pr-1")

    edges = [(edge.reviewer_id, edge.replaced_by) for edge in history]
    assert edges == [("u2", "u4"), ("u3", None), ("u4", None)]
    assert history[0].replaced_at is not None
    assert not history[0].is_current
    assert history[2].is_current


@pytest.mark.asyncio
async def test_reassign_twice_reports_not_assigned(engine: AssignmentEngine, backend):
    """Test that repeating a reassignment fails instead of replacing again."""
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.reassign_reviewer("pr-1", "u2")

    with pytest.raises(NotAssignedError):
        await engine.reassign_reviewer("pr-1", "u2")

    assert await current_reviewers(engine.db, "pr-1") == ["u3", "u4"]


@pytest.mark.asyncio
async def test_reassign_without_candidate_changes_nothing(engine: AssignmentEngine, make_team):
    await make_team("small", {"a": True, "b": True, "c": True})
    await engine.create_pull_request("pr-1", "Tweak", "a")

    with pytest.raises(NoCandidateError) as exc_info:
        await engine.reassign_reviewer("pr-1", "b")

    assert exc_info.value.code == "NO_CANDIDATE"
    assert await current_reviewers(engine.db, "pr-1") == ["b", "c"]
    async with engine.db.session() as session:
        history = await AssignmentRepository(session).history("pr-1")
    assert all(edge.replaced_by is None for edge in history)


@pytest.mark.asyncio
async def test_reassign_merged_pull_request(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.merge_pull_request("pr-1")

    with pytest.raises(AlreadyMergedError) as exc_info:
        await engine.reassign_reviewer("pr-1", "u2")

    assert exc_info.value.code == "PR_MERGED"


@pytest.mark.asyncio
async def test_reassign_check_order(engine: AssignmentEngine, backend):
    """Test that NOT_FOUND beats PR_MERGED, which beats NOT_ASSIGNED."""
    with pytest.raises(NotFoundError):
        await engine.reassign_reviewer("missing", "u2")

    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.merge_pull_request("pr-1")
    with pytest.raises(AlreadyMergedError):
        await engine.reassign_reviewer("pr-1", "u4")


@pytest.mark.asyncio
async def test_reassign_non_reviewer(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    before = await edges(engine.db, "pr-1")

    with pytest.raises(NotAssignedError):
        await engine.reassign_reviewer("pr-1", "u4")
    with pytest.raises(NotAssignedError):
        await engine.reassign_reviewer("pr-1", "ghost")

    assert await current_reviewers(engine.db, "pr-1") == ["u2", "u3"]
    assert await edges(engine.db, "pr-1") == before


@pytest.mark.asyncio
async def test_reassign_draws_from_old_reviewers_team(
    engine: AssignmentEngine, backend, make_team, db: Database
):
    """Test that the replacement comes from the replaced reviewer's team."""
    await make_team("frontend", {"f1": True, "f2": True})
    await engine.create_pull_request("pr-1", "Add search", "u1")

    # Move u2 to frontend behind the engine's back
    async with db.unit_of_work() as uow:
        user = await uow.users.get("u2")
        user.team_name = "frontend"
        await uow.flush()

    result = await engine.reassign_reviewer("pr-1", "u2")

    assert result.replaced_by == "f1"
    assert result.reviewers == ["u3", "f1"]


@pytest.mark.asyncio
async def test_reassign_skips_inactive_teammates(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.set_user_active("u4", False)

    with pytest.raises(NoCandidateError):
        await engine.reassign_reviewer("pr-1", "u2")


@pytest.mark.asyncio
async def test_set_user_active_leaves_assignments(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")

    user = await engine.set_user_active("u2", False)

    assert user.is_active is False
    assert user.team_name == "backend"
    assert await current_reviewers(engine.db, "pr-1") == ["u2", "u3"]

    user = await engine.set_user_active("u2", True)
    assert user.is_active is True


@pytest.mark.asyncio
async def test_set_user_active_unknown_user(engine: AssignmentEngine, backend):
    with pytest.raises(NotFoundError):
        await engine.set_user_active("ghost", False)


@pytest.mark.asyncio
async def test_list_reviews_for_user(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "First", "u1")
    await engine.create_pull_request("pr-2", "Second", "u2")
    await engine.create_pull_request("pr-3", "Third", "u2")

    reviews = await engine.list_reviews_for_user("u3")

    assert [pr.id for pr in reviews] == ["pr-1", "pr-2", "pr-3"]
    assert await engine.list_reviews_for_user("ghost") == []


@pytest.mark.asyncio
async def test_list_reviews_follows_reassignment(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.reassign_reviewer("pr-1", "u2")

    assert await engine.list_reviews_for_user("u2") == []
    assert [pr.id for pr in await engine.list_reviews_for_user("u4")] == ["pr-1"]


@pytest.mark.asyncio
async def test_list_reviews_includes_merged(engine: AssignmentEngine, backend):
    await engine.create_pull_request("pr-1", "Add search", "u1")
    await engine.merge_pull_request("pr-1")

    reviews = await engine.list_reviews_for_user("u2")

    assert [pr.id for pr in reviews] == ["pr-1"]
    assert reviews[0].status == PullRequestStatus.MERGED.value
