"""Conversion of raw statement rows into typed transactions."""

import math
import re
from typing import List, Sequence

from statement_summary.csv_processor.models import MonthDay, Transaction
from statement_summary.utils.exceptions import (
    AmountFormatError,
    DateFormatError,
    MalformedRowError,
)
from statement_summary.utils.logger import get_logger

REQUIRED_FIELDS = 3

_DATE_PATTERN = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})$")
# Plain base-10 decimals only: no exponent, no inf/nan, no grouping separators.
_AMOUNT_PATTERN = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")


def parse_date(value: str) -> MonthDay:
    """Parse a ``M/D`` statement date.

    Raises:
        ValueError: If the value is not a month/day pair or is out of range.
    """
    match = _DATE_PATTERN.fullmatch(value)
    if not match:
        raise ValueError(f"expected month/day, got {value!r}")
    return MonthDay(month=int(match.group(1)), day=int(match.group(2)))


def parse_amount(value: str) -> float:
    """Parse a signed decimal amount such as ``-50.00`` or ``+12.5``.

    Raises:
        ValueError: If the value is not a plain decimal number or overflows
            a float.
    """
    if not _AMOUNT_PATTERN.fullmatch(value):
        raise ValueError(f"expected a decimal amount, got {value!r}")
    amount = float(value)
    if not math.isfinite(amount):
        raise ValueError(f"amount out of range: {value[:20]}...")
    return amount


class TransactionParser:
    """Turns extracted CSV rows into ``Transaction`` records."""

    def __init__(self) -> None:
        self.logger = get_logger(__name__)

    def parse_transactions(self, rows: Sequence[Sequence[str]]) -> List[Transaction]:
        """Parse every row, failing on the first malformed one.

        Fields past the third are ignored.

        Args:
            rows: Data rows as produced by ``RowExtractor``.

        Returns:
            One transaction per row, in row order.

        Raises:
            MalformedRowError: If a row has fewer than three fields.
            DateFormatError: If a date field is not a valid ``M/D`` value.
            AmountFormatError: If an amount field is not a decimal number.
        """
        transactions = []

        for index, row in enumerate(rows):
            if len(row) < REQUIRED_FIELDS:
                raise MalformedRowError(
                    f"expected {REQUIRED_FIELDS} fields, found {len(row)}",
                    row_index=index,
                )

            try:
                date = parse_date(row[1])
            except ValueError as e:
                raise DateFormatError(str(e), row_index=index) from e

            try:
                amount = parse_amount(row[2])
            except ValueError as e:
                raise AmountFormatError(str(e), row_index=index) from e

            transactions.append(Transaction(id=row[0], date=date, amount=amount))

        self.logger.debug(f"Parsed {len(transactions)} transactions")
        return transactions
