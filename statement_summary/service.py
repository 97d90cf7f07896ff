"""Statement service: fetch, summarize and deliver one or many statements."""

import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TextIO, Tuple

from statement_summary.config.settings import Settings
from statement_summary.delivery.email_sender import EmailSender
from statement_summary.pipeline import StatementPipeline
from statement_summary.storage.sources import (
    LocalStatementSource,
    S3StatementSource,
    StatementSourceBackend,
)
from statement_summary.summary_generator.formatter import SummaryFormatter
from statement_summary.utils.exceptions import DeliveryError, StatementProcessingError
from statement_summary.utils.logger import ProcessingLogger, get_logger
from statement_summary.utils.validators import validate_directory_path


class ProcessingStatus(Enum):
    """Processing status enumeration."""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ProcessingResult:
    """Outcome of processing one statement."""
    source: str
    status: ProcessingStatus
    recipient: Optional[str] = None
    message: Optional[str] = None
    summary: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    error_stage: Optional[str] = None
    row_index: Optional[int] = None
    processing_time: Optional[float] = None
    completed_at: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.status == ProcessingStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-serializable dictionary."""
        return {
            "source": self.source,
            "status": self.status.value,
            "success": self.success,
            "recipient": self.recipient,
            "message": self.message,
            "summary": self.summary,
            "error": self.error_message,
            "error_stage": self.error_stage,
            "row_index": self.row_index,
            "processing_time": self.processing_time,
            "completed_at": self.completed_at.isoformat(),
        }


class StatementService:
    """Runs the statement pipeline for files and S3 objects and mails the result.

    Each call processes its statement independently; a failure is logged and
    returned as a failed ``ProcessingResult`` so the rest of a batch carries on.
    """

    def __init__(
        self,
        settings: Settings,
        pipeline: Optional[StatementPipeline] = None,
        sender: Optional[EmailSender] = None,
        local_source: Optional[StatementSourceBackend] = None,
        s3_source: Optional[StatementSourceBackend] = None,
        dry_run: bool = False
    ) -> None:
        """Initialize the service.

        Args:
            settings: Process settings.
            pipeline: Optional pipeline; built from settings when omitted.
            sender: Optional email sender; built from settings unless ``dry_run``.
            local_source: Optional local file backend.
            s3_source: Optional S3 backend; created on first use when omitted.
            dry_run: Compute messages without sending them.

        Raises:
            ConfigurationError: If mail must be sent but SMTP settings are missing.
        """
        self.settings = settings
        self.logger = get_logger(__name__)
        self.dry_run = dry_run
        self.pipeline = pipeline or StatementPipeline(
            formatter=SummaryFormatter(subject=settings.email_subject)
        )
        self.sender = None if dry_run else (sender or EmailSender(settings))
        self.local_source = local_source or LocalStatementSource(settings.max_file_size_mb)
        self._s3_source = s3_source

    @property
    def s3_source(self) -> StatementSourceBackend:
        if self._s3_source is None:
            self._s3_source = S3StatementSource(self.settings)
        return self._s3_source

    def process_file(self, path: str, recipient: Optional[str] = None) -> ProcessingResult:
        """Process a local CSV statement.

        Args:
            path: Path to the statement file.
            recipient: Optional destination overriding the configured one.
        """
        return self._process(path, lambda: self.local_source.open(path), recipient)

    def process_object(
        self,
        key: str,
        bucket: Optional[str] = None,
        recipient: Optional[str] = None
    ) -> ProcessingResult:
        """Process a statement stored in S3.

        Args:
            key: Object key.
            bucket: Optional bucket; defaults to the configured bucket.
            recipient: Optional destination overriding the configured one.
        """
        source = self.s3_source
        location = f"s3://{bucket or self.settings.s3_bucket}/{key}"
        if bucket:
            return self._process(location, lambda: source.open(key, bucket=bucket), recipient)
        return self._process(location, lambda: source.open(key), recipient)

    def process_batch(
        self,
        paths: Iterable[str],
        recipient: Optional[str] = None
    ) -> List[ProcessingResult]:
        """Process several local statements independently."""
        results = [self.process_file(path, recipient) for path in paths]
        self._log_batch(results)
        return results

    def process_objects(
        self,
        objects: Iterable[Tuple[Optional[str], str]],
        recipient: Optional[str] = None
    ) -> List[ProcessingResult]:
        """Process several S3 objects independently.

        Args:
            objects: ``(bucket, key)`` pairs; a None bucket means the default.
            recipient: Optional destination overriding the configured one.
        """
        results = [self.process_object(key, bucket, recipient) for bucket, key in objects]
        self._log_batch(results)
        return results

    def process_directory(self, batch_dir: str, recipient: Optional[str] = None) -> List[ProcessingResult]:
        """Process every ``*.csv`` statement in a directory, in name order.

        Raises:
            ValidationError: If the directory is missing or unreadable.
        """
        validate_directory_path(batch_dir)
        csv_files = sorted(str(path) for path in Path(batch_dir).glob("*.csv"))
        if not csv_files:
            self.logger.warning(f"No CSV files found in {batch_dir}")
            return []

        self.logger.info(f"Found {len(csv_files)} CSV files in {batch_dir}")
        return self.process_batch(csv_files, recipient)

    def _process(
        self,
        source: str,
        open_statement: Callable[[], TextIO],
        recipient: Optional[str]
    ) -> ProcessingResult:
        processing_logger = ProcessingLogger(os.path.basename(source) or source, self.logger)
        processing_logger.log_start(source)
        started = time.monotonic()
        destination = recipient or self.settings.get_recipient()

        try:
            stream = open_statement()
            summary, message = self.pipeline.process(stream)
            processing_logger.log_progress(
                f"Summarized {summary.transaction_count} transactions"
            )

            if self.sender is not None:
                if not destination:
                    raise DeliveryError("No recipient address configured")
                self.sender.send(message, destination)
                processing_logger.log_completion(destination)
            else:
                destination = None
                processing_logger.log_progress("Dry run: summary not sent")

            return ProcessingResult(
                source=source,
                status=ProcessingStatus.COMPLETED,
                recipient=destination,
                message=message,
                summary=summary.to_dict(),
                processing_time=time.monotonic() - started,
            )

        except StatementProcessingError as e:
            processing_logger.log_error(e, f"{e.stage.value} stage")
            return ProcessingResult(
                source=source,
                status=ProcessingStatus.FAILED,
                error_message=str(e),
                error_stage=e.stage.value,
                row_index=e.row_index,
                processing_time=time.monotonic() - started,
            )
        except Exception as e:
            self.logger.exception(f"Unexpected error while processing {source}")
            return ProcessingResult(
                source=source,
                status=ProcessingStatus.FAILED,
                error_message=f"Unexpected error: {str(e)}",
                processing_time=time.monotonic() - started,
            )

    def _log_batch(self, results: List[ProcessingResult]) -> None:
        succeeded = sum(1 for result in results if result.success)
        self.logger.info(f"Successfully processed {succeeded}/{len(results)} statements")
