"""Statement retrieval backends."""

from statement_summary.storage.sources import (
    LocalStatementSource,
    S3StatementSource,
    StatementSourceBackend,
)

__all__ = ["StatementSourceBackend", "LocalStatementSource", "S3StatementSource"]
