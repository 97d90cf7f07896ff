"""Exception types raised while turning a statement into a summary email."""

from enum import Enum
from typing import Optional


class PipelineStage(Enum):
    """Stage of statement processing that produced an error."""
    RETRIEVE = "retrieve"
    EXTRACT = "extract"
    PARSE = "parse"
    AGGREGATE = "aggregate"
    FORMAT = "format"
    DELIVER = "deliver"


class StatementProcessingError(Exception):
    """Base exception for statement processing errors.

    Attributes:
        stage: Stage that raised the error.
        row_index: Zero-based index of the offending data row, when known.
    """

    default_stage = PipelineStage.PARSE

    def __init__(
        self,
        message: str,
        row_index: Optional[int] = None,
        stage: Optional[PipelineStage] = None
    ) -> None:
        self.row_index = row_index
        self.stage = stage or self.default_stage
        if row_index is not None:
            message = f"row {row_index}: {message}"
        super().__init__(message)


class MalformedInputError(StatementProcessingError):
    """The source text could not be tokenized as CSV."""
    default_stage = PipelineStage.EXTRACT


class TransactionParseError(StatementProcessingError):
    """A data row could not be converted to a transaction."""
    default_stage = PipelineStage.PARSE


class MalformedRowError(TransactionParseError):
    """A data row has fewer fields than a transaction needs."""
    pass


class DateFormatError(TransactionParseError):
    """The date field is not a valid month/day value."""
    pass


class AmountFormatError(TransactionParseError):
    """The amount field is not a signed decimal number."""
    pass


class RetrievalError(StatementProcessingError):
    """The statement could not be fetched from its source."""
    default_stage = PipelineStage.RETRIEVE


class DeliveryError(StatementProcessingError):
    """The summary email could not be delivered."""
    default_stage = PipelineStage.DELIVER


class ConfigurationError(Exception):
    """Settings are missing or invalid for the requested operation."""
    pass
