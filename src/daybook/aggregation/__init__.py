from daybook.aggregation.aggregator import (
    AggregationResult,
    AttributionPolicy,
    aggregate,
)

__all__ = ["AggregationResult", "AttributionPolicy", "aggregate"]
