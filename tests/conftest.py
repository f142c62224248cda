"""Shared fixtures: a fresh SQLite database per test and services bound to it."""
import random

import pytest

from reviewroster.core.assignment import AssignmentEngine, CandidateSelector
from reviewroster.core.config.settings import init_config
from reviewroster.core.roster import RosterService
from reviewroster.core.schemas import TeamMember
from reviewroster.core.stats import StatsAggregator
from reviewroster.core.storage.database import Database, init_db


class FirstPicks(random.Random):
    """Random source that always picks the first ``k`` of the (sorted) population."""

    def sample(self, population, k, *, counts=None):
        return list(population)[:k]


@pytest.fixture
def config(tmp_path):
    config = init_config()
    config.db_path = str(tmp_path / "reviewroster.db")
    config.request_timeout = 0
    return config


@pytest.fixture
async def db(config):
    """Create test database."""
    db = init_db(config.get_database_url(), busy_timeout=config.sqlite_busy_timeout)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def selector():
    """Selector that always takes the lowest ids of the pool."""
    return CandidateSelector(rng=FirstPicks())


@pytest.fixture
def engine(db: Database, selector: CandidateSelector):
    """Assignment engine with deterministic selection."""
    return AssignmentEngine(db, selector=selector)


@pytest.fixture
def random_engine(db: Database):
    """Assignment engine with seeded random selection."""
    return AssignmentEngine(db, selector=CandidateSelector(seed=1234))


@pytest.fixture
def roster(db: Database):
    return RosterService(db)


@pytest.fixture
def aggregator(db: Database):
    return StatsAggregator(db)


@pytest.fixture
def make_team(roster: RosterService):
    """Create a team from ``{user_id: is_active}``; usernames are derived from ids."""

    async def _make_team(team_name: str, members: dict[str, bool]):
        return await roster.create_team(
            team_name,
            [
                TeamMember(user_id=user_id, username=f"name-{user_id}", is_active=active)
                for user_id, active in members.items()
            ],
        )

    return _make_team
