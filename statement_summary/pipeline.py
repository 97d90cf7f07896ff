"""Statement processing pipeline: rows, transactions, summary, message."""

from typing import Optional, Tuple

from statement_summary.csv_processor.extractor import RowExtractor, StatementSource
from statement_summary.csv_processor.parser import TransactionParser
from statement_summary.summary_generator.aggregator import Summary, TransactionAggregator
from statement_summary.summary_generator.formatter import SummaryFormatter
from statement_summary.utils.logger import get_logger


class StatementPipeline:
    """Runs extraction, parsing, aggregation and formatting in order.

    Holds no per-run state, so one instance can serve any number of
    statements, including concurrently. A failing stage raises its
    ``StatementProcessingError`` subclass, whose ``stage`` attribute names
    where processing stopped; nothing partial is returned.
    """

    def __init__(
        self,
        extractor: Optional[RowExtractor] = None,
        parser: Optional[TransactionParser] = None,
        aggregator: Optional[TransactionAggregator] = None,
        formatter: Optional[SummaryFormatter] = None
    ) -> None:
        self.logger = get_logger(__name__)
        self.extractor = extractor or RowExtractor()
        self.parser = parser or TransactionParser()
        self.aggregator = aggregator or TransactionAggregator()
        self.formatter = formatter or SummaryFormatter()

    def summarize(self, source: StatementSource) -> Summary:
        """Compute the summary for a statement without formatting it.

        Args:
            source: Path to a CSV statement or an open text stream.

        Returns:
            Aggregated summary.
        """
        rows = self.extractor.extract_rows(source)
        transactions = self.parser.parse_transactions(rows)
        return self.aggregator.summarize(transactions)

    def process(self, source: StatementSource) -> Tuple[Summary, str]:
        """Compute the summary and its formatted message.

        Args:
            source: Path to a CSV statement or an open text stream.

        Returns:
            Tuple of the summary and the message rendered from it.
        """
        summary = self.summarize(source)
        message = self.formatter.format_message(summary)
        self.logger.debug(f"Formatted summary message ({len(message)} characters)")
        return summary, message

    def run(self, source: StatementSource) -> str:
        """Produce the summary message for a statement.

        Args:
            source: Path to a CSV statement or an open text stream.

        Returns:
            Formatted message ready for delivery.
        """
        return self.process(source)[1]
