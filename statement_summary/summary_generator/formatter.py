"""Plain-text email rendering of statement summaries."""

import math
from typing import Optional

from statement_summary.config.settings import DEFAULT_EMAIL_SUBJECT
from statement_summary.summary_generator.aggregator import Summary

NOT_AVAILABLE = "N/A"

MESSAGE_TEMPLATE = (
    "Subject: {subject}\n"
    "\n"
    "Hi customer, here's your transactions summary:\n"
    "\tTotal Balance: {total_balance}\n"
    "\tAverage debit amount: {average_debit}\n"
    "\tAverage credit amount: {average_credit}\n"
    "\tNumber of transactions by month:\n"
    "{months}"
)


def format_amount(amount: Optional[float]) -> str:
    """Render an amount with two decimals, or ``N/A`` when unavailable.

    Missing and non-finite values (an overflowed sum, for instance) both
    render as ``N/A``.
    """
    if amount is None or not math.isfinite(amount):
        return NOT_AVAILABLE
    text = f"{amount:.2f}"
    # Values that round to zero print without a sign
    return "0.00" if text == "-0.00" else text


class SummaryFormatter:
    """Renders a ``Summary`` into the summary email body."""

    def __init__(self, subject: str = DEFAULT_EMAIL_SUBJECT) -> None:
        """Initialize summary formatter.

        Args:
            subject: Subject line placed at the top of the message.
        """
        self.subject = subject

    def format_monthly_counts(self, summary: Summary) -> str:
        lines = [
            f"\t\t{month}: {count}\n"
            for month, count in summary.monthly_counts.sparse().items()
        ]
        return "".join(lines)

    def format_message(self, summary: Summary) -> str:
        """Render the summary message.

        Args:
            summary: Aggregated statement figures.

        Returns:
            Message text starting with a ``Subject:`` header line.
        """
        return MESSAGE_TEMPLATE.format(
            subject=self.subject,
            total_balance=format_amount(summary.total_balance),
            average_debit=format_amount(summary.average_debit_amount),
            average_credit=format_amount(summary.average_credit_amount),
            months=self.format_monthly_counts(summary),
        )
