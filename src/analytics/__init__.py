from .counts import Aggregator, AggregateCounts

__all__ = ["Aggregator", "AggregateCounts"]
