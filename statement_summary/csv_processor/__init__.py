"""CSV statement reading and transaction parsing."""

from statement_summary.csv_processor.extractor import RowExtractor
from statement_summary.csv_processor.models import MonthDay, Transaction
from statement_summary.csv_processor.parser import TransactionParser

__all__ = ["RowExtractor", "TransactionParser", "MonthDay", "Transaction"]
