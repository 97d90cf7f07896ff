"""Tests for statement retrieval backends."""

import io
from unittest.mock import Mock, patch

import pytest
from botocore.config import Config
from botocore.exceptions import ClientError, EndpointConnectionError

from statement_summary.config.settings import Settings
from statement_summary.storage.sources import (
    LocalStatementSource,
    S3StatementSource,
    StatementSourceBackend,
)
from statement_summary.utils.exceptions import (
    MalformedInputError,
    PipelineStage,
    RetrievalError,
)


@pytest.fixture
def s3_client(scenario_csv_text):
    """Mock boto3 S3 client returning the reference statement."""
    client = Mock()
    client.get_object.return_value = {"Body": io.BytesIO(scenario_csv_text.encode("utf-8"))}
    return client


class TestStatementSourceBackend:
    """Test cases for the backend interface."""

    def test_open_not_implemented(self):
        """Test that the base class must be subclassed."""
        with pytest.raises(NotImplementedError):
            StatementSourceBackend().open("anything")


class TestLocalStatementSource:
    """Test cases for LocalStatementSource class."""

    def test_open(self, sample_csv_file, scenario_csv_text):
        """Test reading a local statement."""
        stream = LocalStatementSource().open(sample_csv_file)

        assert stream.read() == scenario_csv_text

    def test_strips_byte_order_mark(self, temp_dir):
        """Test that a UTF-8 BOM is not part of the header."""
        path = temp_dir / "bom.csv"
        path.write_bytes(b"\xef\xbb\xbfId,Date,Transaction\n1,1/5,1\n")

        assert LocalStatementSource().open(str(path)).read().startswith("Id,")

    def test_missing_file(self, temp_dir):
        """Test that a missing file is a retrieval failure."""
        with pytest.raises(RetrievalError) as exc_info:
            LocalStatementSource().open(str(temp_dir / "missing.csv"))

        assert exc_info.value.stage == PipelineStage.RETRIEVE

    def test_unsupported_extension(self, write_csv):
        """Test that non-CSV files are rejected."""
        path = write_csv("statement.pdf", "Id,Date,Transaction\n")

        with pytest.raises(RetrievalError):
            LocalStatementSource().open(path)

    def test_file_too_large(self, write_csv):
        """Test the file size limit."""
        path = write_csv("big.csv", "x" * 2048)

        with patch("statement_summary.utils.validators.os.path.getsize", return_value=5 * 1024 * 1024):
            with pytest.raises(RetrievalError):
                LocalStatementSource(max_file_size_mb=1).open(path)

    def test_invalid_encoding(self, temp_dir):
        """Test that undecodable bytes are malformed input."""
        path = temp_dir / "latin.csv"
        path.write_bytes(b"Id,Date,Transaction\n1,1/5,\xff\xfe\n")

        with pytest.raises(MalformedInputError):
            LocalStatementSource().open(str(path))


class TestS3StatementSource:
    """Test cases for S3StatementSource class."""

    def test_open_default_bucket(self, sample_settings, s3_client, scenario_csv_text):
        """Test downloading from the configured bucket."""
        source = S3StatementSource(sample_settings, client=s3_client)

        assert source.open("txns.csv").read() == scenario_csv_text
        s3_client.get_object.assert_called_once_with(Bucket="transactions-bucket", Key="txns.csv")

    def test_open_explicit_bucket(self, sample_settings, s3_client):
        """Test downloading from a bucket named by the event."""
        S3StatementSource(sample_settings, client=s3_client).open("a/b.csv", bucket="other")

        s3_client.get_object.assert_called_once_with(Bucket="other", Key="a/b.csv")

    def test_missing_object(self, sample_settings, s3_client):
        """Test that S3 client errors become retrieval failures."""
        s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "Not Found"}}, "GetObject"
        )

        with pytest.raises(RetrievalError) as exc_info:
            S3StatementSource(sample_settings, client=s3_client).open("missing.csv")

        assert "s3://transactions-bucket/missing.csv" in str(exc_info.value)

    def test_connection_failure(self, sample_settings, s3_client):
        """Test that transport errors become retrieval failures."""
        s3_client.get_object.side_effect = EndpointConnectionError(endpoint_url="http://localstack:4566")

        with pytest.raises(RetrievalError):
            S3StatementSource(sample_settings, client=s3_client).open("txns.csv")

    def test_describe(self, sample_settings, s3_client):
        """Test object location rendering."""
        source = S3StatementSource(sample_settings, client=s3_client)

        assert source.describe("k.csv") == "s3://transactions-bucket/k.csv"
        assert source.describe("k.csv", bucket="b") == "s3://b/k.csv"

    def test_client_for_custom_endpoint(self):
        """Test that a custom endpoint uses path-style addressing."""
        settings = Settings(
            s3_endpoint_url="http://localstack:4566",
            aws_access_key_id="test",
            aws_secret_access_key="test",
        )

        with patch("statement_summary.storage.sources.boto3.client") as client_factory:
            S3StatementSource(settings)

        args, kwargs = client_factory.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localstack:4566"
        assert kwargs["region_name"] == "us-east-1"
        assert kwargs["aws_access_key_id"] == "test"
        assert isinstance(kwargs["config"], Config)

    def test_client_for_aws(self):
        """Test the default AWS client configuration."""
        with patch("statement_summary.storage.sources.boto3.client") as client_factory:
            S3StatementSource(Settings())

        assert client_factory.call_args[1]["endpoint_url"] is None
        assert client_factory.call_args[1]["config"] is None
