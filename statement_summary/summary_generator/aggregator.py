"""Aggregate statistics calculation for statement transactions."""

import calendar
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from statement_summary.csv_processor.models import Transaction
from statement_summary.utils.logger import get_logger

MONTHS_IN_YEAR = 12


@dataclass(frozen=True)
class MonthlyCounts:
    """Transaction counts for each calendar month.

    Holds twelve counters indexed by month number. Months with no
    transactions stay at zero and are left out of ``sparse()``.
    """

    counts: Tuple[int, ...] = (0,) * MONTHS_IN_YEAR

    def __post_init__(self) -> None:
        if len(self.counts) != MONTHS_IN_YEAR:
            raise ValueError(f"expected {MONTHS_IN_YEAR} month counters, got {len(self.counts)}")
        if any(count < 0 for count in self.counts):
            raise ValueError("month counts cannot be negative")

    @classmethod
    def from_months(cls, months: Iterable[int]) -> "MonthlyCounts":
        """Build counts from an iterable of month numbers (1-12)."""
        counts = [0] * MONTHS_IN_YEAR
        for month in months:
            counts[int(month) - 1] += 1
        return cls(tuple(counts))

    def sparse(self) -> Dict[str, int]:
        """Non-zero counts keyed by month name, January to December."""
        return {
            calendar.month_name[index + 1]: count
            for index, count in enumerate(self.counts)
            if count
        }

    def total(self) -> int:
        return sum(self.counts)


@dataclass(frozen=True)
class Summary:
    """Aggregate figures for one statement.

    Attributes:
        total_balance: Sum of every transaction amount.
        average_debit_amount: Mean of negative amounts, None without debits.
        average_credit_amount: Mean of positive amounts, None without credits.
        monthly_counts: Number of transactions per month.
        transaction_count: Number of transactions summarized.
    """

    total_balance: float
    average_debit_amount: Optional[float]
    average_credit_amount: Optional[float]
    monthly_counts: MonthlyCounts
    transaction_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to a JSON-serializable dictionary."""
        return {
            "total_balance": self.total_balance,
            "average_debit_amount": self.average_debit_amount,
            "average_credit_amount": self.average_credit_amount,
            "transactions_by_month": self.monthly_counts.sparse(),
            "transaction_count": self.transaction_count,
        }


class TransactionAggregator:
    """Computes balance, average and per-month figures for transactions."""

    def __init__(self) -> None:
        """Initialize transaction aggregator."""
        self.logger = get_logger(__name__)

    def to_frame(self, transactions: Sequence[Transaction]) -> pd.DataFrame:
        """Build a frame with one row per transaction.

        Args:
            transactions: Parsed transactions.

        Returns:
            DataFrame with ``id``, ``month``, ``amount``, ``is_credit`` and
            ``is_debit`` columns in input order.
        """
        return pd.DataFrame({
            "id": pd.Series([t.id for t in transactions], dtype="object"),
            "month": pd.Series([t.date.month for t in transactions], dtype="int64"),
            "amount": pd.Series([t.amount for t in transactions], dtype="float64"),
            "is_credit": pd.Series([t.is_credit for t in transactions], dtype="bool"),
            "is_debit": pd.Series([t.is_debit for t in transactions], dtype="bool"),
        })

    def calculate_total_balance(self, frame: pd.DataFrame) -> float:
        """Sum every amount, credits and debits alike."""
        return float(frame["amount"].sum())

    def calculate_average_amount(self, frame: pd.DataFrame, transaction_type: str) -> Optional[float]:
        """Calculate the mean amount of one sign partition.

        Zero amounts belong to neither partition.

        Args:
            frame: Transaction frame from ``to_frame``.
            transaction_type: Either "credit" or "debit".

        Returns:
            Mean amount, or None when the partition is empty.
        """
        if transaction_type == "credit":
            amounts = frame.loc[frame["is_credit"], "amount"]
        elif transaction_type == "debit":
            amounts = frame.loc[frame["is_debit"], "amount"]
        else:
            raise ValueError(f"Unknown transaction type: {transaction_type}")

        if amounts.empty:
            return None
        return float(amounts.mean())

    def count_transactions_by_month(self, frame: pd.DataFrame) -> MonthlyCounts:
        """Count transactions falling in each calendar month."""
        return MonthlyCounts.from_months(frame["month"])

    def summarize(self, transactions: List[Transaction]) -> Summary:
        """Compute the summary for a list of transactions.

        Args:
            transactions: Parsed transactions; may be empty.

        Returns:
            Summary of the transactions.
        """
        frame = self.to_frame(transactions)

        summary = Summary(
            total_balance=self.calculate_total_balance(frame),
            average_debit_amount=self.calculate_average_amount(frame, "debit"),
            average_credit_amount=self.calculate_average_amount(frame, "credit"),
            monthly_counts=self.count_transactions_by_month(frame),
            transaction_count=len(frame),
        )

        if summary.average_debit_amount is None or summary.average_credit_amount is None:
            self.logger.info("Statement has no debits or no credits; averages reported as unavailable")

        self.logger.info(f"Generated summary for {summary.transaction_count} transactions")
        return summary
