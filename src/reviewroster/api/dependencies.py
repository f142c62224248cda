"""FastAPI dependencies resolving services from application state."""
from fastapi import Request

from ..core.assignment import AssignmentEngine
from ..core.roster import RosterService
from ..core.stats import StatsAggregator


def get_engine(request: Request) -> AssignmentEngine:
    return request.app.state.engine


def get_roster(request: Request) -> RosterService:
    return request.app.state.roster


def get_stats_aggregator(request: Request) -> StatsAggregator:
    return request.app.state.stats
