"""Tests for the statement service."""

import io
from unittest.mock import Mock, patch

import pytest

from statement_summary.config.settings import Settings
from statement_summary.service import ProcessingStatus, StatementService
from statement_summary.storage.sources import StatementSourceBackend
from statement_summary.utils.exceptions import (
    ConfigurationError,
    DeliveryError,
    RetrievalError,
)
from statement_summary.utils.validators import ValidationError


@pytest.fixture
def s3_source():
    """S3 backend double."""
    return Mock(spec=StatementSourceBackend)


@pytest.fixture
def service(sample_settings, mock_sender, s3_source):
    """Service with a recording sender and a fake S3 backend."""
    return StatementService(sample_settings, sender=mock_sender, s3_source=s3_source)


class TestStatementService:
    """Test cases for StatementService class."""

    def test_requires_smtp_settings_unless_dry_run(self):
        """Test that sending needs SMTP configuration."""
        with pytest.raises(ConfigurationError):
            StatementService(Settings())

        assert StatementService(Settings(), dry_run=True).sender is None

    def test_subject_from_settings(self, sample_settings, mock_sender):
        """Test that the configured subject reaches the formatter."""
        sample_settings.email_subject = "Monthly statement"

        service = StatementService(sample_settings, sender=mock_sender)

        assert service.pipeline.formatter.subject == "Monthly statement"

    def test_process_file(self, service, mock_sender, sample_csv_file, scenario_message):
        """Test summarizing and sending a local statement."""
        result = service.process_file(sample_csv_file)

        assert result.success
        assert result.status == ProcessingStatus.COMPLETED
        assert result.recipient == "customer@example.com"
        assert result.message == scenario_message
        assert result.summary["transactions_by_month"] == {"January": 2, "February": 1}
        mock_sender.send.assert_called_once_with(scenario_message, "customer@example.com")

    def test_recipient_override(self, service, mock_sender, sample_csv_file):
        """Test sending to an explicit recipient."""
        result = service.process_file(sample_csv_file, recipient="other@example.com")

        assert result.recipient == "other@example.com"
        assert mock_sender.send.call_args[0][1] == "other@example.com"

    def test_recipient_falls_back_to_sender(self, sample_settings, mock_sender, sample_csv_file):
        """Test that the sender address is used when no recipient is set."""
        sample_settings.recipient_address = None
        service = StatementService(sample_settings, sender=mock_sender)

        result = service.process_file(sample_csv_file)

        assert result.recipient == "sender@example.com"

    def test_missing_recipient(self, sample_settings, mock_sender, sample_csv_file):
        """Test that a missing destination is a delivery failure."""
        service = StatementService(sample_settings, sender=mock_sender)
        sample_settings.update({"recipient_address": None, "email_address": None})

        result = service.process_file(sample_csv_file)

        assert not result.success
        assert result.error_stage == "deliver"
        mock_sender.send.assert_not_called()

    def test_dry_run(self, sample_settings, sample_csv_file, scenario_message):
        """Test that dry runs compute the message without sending it."""
        result = StatementService(sample_settings, dry_run=True).process_file(sample_csv_file)

        assert result.success
        assert result.recipient is None
        assert result.message == scenario_message

    def test_parse_failure(self, service, mock_sender, write_csv):
        """Test that a bad row fails the statement with stage and row index."""
        path = write_csv("bad.csv", "Id,Date,Transaction\n1,1/5,10\n2,1/6,ten\n")

        result = service.process_file(path)

        assert result.status == ProcessingStatus.FAILED
        assert result.error_stage == "parse"
        assert result.row_index == 1
        assert result.message is None
        mock_sender.send.assert_not_called()

    def test_delivery_failure(self, service, mock_sender, sample_csv_file):
        """Test that a delivery error fails the statement."""
        mock_sender.send.side_effect = DeliveryError("connection refused")

        result = service.process_file(sample_csv_file)

        assert not result.success
        assert result.error_stage == "deliver"
        assert "connection refused" in result.error_message

    def test_unexpected_error(self, service, sample_csv_file):
        """Test that unexpected errors are reported, not raised."""
        with patch.object(service.pipeline, "process", side_effect=RuntimeError("boom")):
            result = service.process_file(sample_csv_file)

        assert not result.success
        assert result.error_stage is None
        assert "boom" in result.error_message

    def test_process_object(self, service, s3_source, mock_sender, scenario_csv_text):
        """Test processing an S3 object."""
        s3_source.open.return_value = io.StringIO(scenario_csv_text)

        result = service.process_object("txns.csv")

        assert result.success
        assert result.source == "s3://transactions-bucket/txns.csv"
        s3_source.open.assert_called_once_with("txns.csv")

    def test_process_object_in_named_bucket(self, service, s3_source, scenario_csv_text):
        """Test that an event bucket is passed to the backend."""
        s3_source.open.return_value = io.StringIO(scenario_csv_text)

        result = service.process_object("txns.csv", bucket="uploads")

        assert result.source == "s3://uploads/txns.csv"
        s3_source.open.assert_called_once_with("txns.csv", bucket="uploads")

    def test_batch_isolates_retrieval_failure(self, service, s3_source, mock_sender, scenario_csv_text):
        """Test that a failing second object does not stop the first or third."""
        s3_source.open.side_effect = [
            io.StringIO(scenario_csv_text),
            RetrievalError("NoSuchKey"),
            io.StringIO(scenario_csv_text),
        ]

        results = service.process_objects([(None, "one.csv"), (None, "two.csv"), (None, "three.csv")])

        assert [result.success for result in results] == [True, False, True]
        assert results[1].error_stage == "retrieve"
        assert mock_sender.send.call_count == 2

    def test_process_batch(self, service, write_csv, sample_csv_file):
        """Test processing several local files."""
        bad = write_csv("bad.csv", 'Id,Date,Transaction\n1,1/5,"10\n')

        results = service.process_batch([sample_csv_file, bad])

        assert [result.success for result in results] == [True, False]
        assert results[1].error_stage == "extract"

    def test_process_directory(self, service, write_csv, scenario_csv_text, temp_dir):
        """Test processing every CSV in a directory in name order."""
        write_csv("b.csv", scenario_csv_text)
        write_csv("a.csv", scenario_csv_text)
        write_csv("notes.txt", "ignored")

        results = service.process_directory(str(temp_dir))

        assert [result.source.rsplit("/", 1)[-1] for result in results] == ["a.csv", "b.csv"]

    def test_process_empty_directory(self, service, temp_dir):
        """Test a directory without statements."""
        assert service.process_directory(str(temp_dir)) == []

    def test_process_missing_directory(self, service, temp_dir):
        """Test that a missing batch directory is rejected."""
        with pytest.raises(ValidationError):
            service.process_directory(str(temp_dir / "nope"))

    def test_result_to_dict(self, service, sample_csv_file):
        """Test JSON-friendly result conversion."""
        data = service.process_file(sample_csv_file).to_dict()

        assert data["status"] == "completed"
        assert data["success"] is True
        assert data["error"] is None
        assert isinstance(data["completed_at"], str)
