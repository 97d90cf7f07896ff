"""Summary aggregation and message formatting."""

from statement_summary.summary_generator.aggregator import (
    MonthlyCounts,
    Summary,
    TransactionAggregator,
)
from statement_summary.summary_generator.formatter import SummaryFormatter

__all__ = ["MonthlyCounts", "Summary", "TransactionAggregator", "SummaryFormatter"]
