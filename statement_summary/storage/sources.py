"""Statement sources: local files and S3 objects.

Both backends hand the pipeline an in-memory text stream, so the pipeline
never deals with storage details. Any failure to fetch a statement is
raised as ``RetrievalError``.
"""

import io
from typing import Any, Optional, TextIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from statement_summary.config.settings import CSV_ENCODING, MAX_FILE_SIZE_MB, Settings
from statement_summary.utils.exceptions import MalformedInputError, RetrievalError
from statement_summary.utils.logger import get_logger
from statement_summary.utils.validators import ValidationError, validate_csv_file


def decode_statement(data: bytes, identifier: str, encoding: str = CSV_ENCODING) -> TextIO:
    """Decode raw statement bytes into a text stream.

    Raises:
        MalformedInputError: If the bytes are not valid text.
    """
    try:
        return io.StringIO(data.decode(encoding), newline="")
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"{identifier} is not valid {encoding} text: {str(e)}") from e


class StatementSourceBackend:
    """Interface for fetching statements by identifier."""

    def open(self, identifier: str) -> TextIO:
        """Fetch a statement and return its text.

        Args:
            identifier: Backend-specific statement identifier.

        Returns:
            Text stream positioned at the start of the statement.

        Raises:
            RetrievalError: If the statement cannot be fetched.
        """
        raise NotImplementedError(f"{self.__class__.__name__}.open() must be implemented")

    def describe(self, identifier: str) -> str:
        """Human-readable location of a statement, for logs."""
        return identifier


class LocalStatementSource(StatementSourceBackend):
    """Reads statements from the local filesystem."""

    def __init__(self, max_file_size_mb: int = MAX_FILE_SIZE_MB) -> None:
        self.logger = get_logger(__name__)
        self.max_file_size_mb = max_file_size_mb

    def open(self, identifier: str) -> TextIO:
        try:
            validate_csv_file(identifier, self.max_file_size_mb)
            with open(identifier, "rb") as handle:
                data = handle.read()
        except (ValidationError, OSError) as e:
            raise RetrievalError(f"Cannot read statement file: {str(e)}") from e

        self.logger.debug(f"Read {len(data)} bytes from {identifier}")
        return decode_statement(data, identifier)


class S3StatementSource(StatementSourceBackend):
    """Downloads statements from an S3 (or S3-compatible) bucket."""

    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        """Initialize S3 statement source.

        Args:
            settings: Settings with bucket, region, endpoint and credentials.
            client: Optional pre-built boto3 S3 client.
        """
        self.logger = get_logger(__name__)
        self.bucket = settings.s3_bucket
        self.client = client or self._create_client(settings)

    @staticmethod
    def _create_client(settings: Settings) -> Any:
        config = None
        if settings.s3_endpoint_url:
            # LocalStack and most S3-compatible servers need path-style URLs.
            config = Config(s3={"addressing_style": "path"})

        return boto3.client(
            "s3",
            region_name=settings.aws_region,
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            config=config,
        )

    def describe(self, identifier: str, bucket: Optional[str] = None) -> str:
        return f"s3://{bucket or self.bucket}/{identifier}"

    def open(self, identifier: str, bucket: Optional[str] = None) -> TextIO:
        """Fetch an object from the bucket.

        Args:
            identifier: Object key.
            bucket: Bucket name; defaults to the configured bucket.
        """
        bucket = bucket or self.bucket
        location = self.describe(identifier, bucket)

        try:
            response = self.client.get_object(Bucket=bucket, Key=identifier)
            data = response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise RetrievalError(f"Cannot download {location}: {str(e)}") from e

        self.logger.debug(f"Downloaded {len(data)} bytes from {location}")
        return decode_statement(data, location)
