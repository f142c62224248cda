"""Statistics endpoints"""
from fastapi import APIRouter, Depends

from ...core.schemas import StatsResponse
from ...core.stats import StatsAggregator
from ..dependencies import get_stats_aggregator

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_statistics(
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
):
    """Get reviewer load, pull request status distribution and active user count."""
    return await aggregator.get_stats()
