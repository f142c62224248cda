"""Statistics rollups."""
from .aggregator import StatsAggregator

__all__ = ["StatsAggregator"]
