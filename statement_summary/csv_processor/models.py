"""Transaction records parsed from statement rows."""

import calendar
from dataclasses import dataclass

# A leap year, so that 2/29 is accepted when the statement carries no year.
_REFERENCE_LEAP_YEAR = 2000


@dataclass(frozen=True)
class MonthDay:
    """Calendar date without a year, as written in statements (``M/D``)."""

    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month out of range: {self.month}")
        last_day = calendar.monthrange(_REFERENCE_LEAP_YEAR, self.month)[1]
        if not 1 <= self.day <= last_day:
            raise ValueError(f"day out of range for {self.month_name}: {self.day}")

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    def __str__(self) -> str:
        return f"{self.month}/{self.day}"


@dataclass(frozen=True)
class Transaction:
    """One ledger entry from a statement.

    Attributes:
        id: Identifier copied verbatim from the statement.
        date: Month and day of the transaction.
        amount: Signed amount; positive is a credit, negative a debit.
    """

    id: str
    date: MonthDay
    amount: float

    @property
    def is_credit(self) -> bool:
        return self.amount > 0

    @property
    def is_debit(self) -> bool:
        return self.amount < 0
