"""Pytest configuration and fixtures for the statement summary mailer."""

import io
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from statement_summary.config.settings import Settings
from statement_summary.csv_processor.models import MonthDay, Transaction
from statement_summary.delivery.email_sender import EmailSender

SCENARIO_CSV = (
    "Id,Date,Transaction\n"
    "1,1/5,100.00\n"
    "2,1/20,-50.00\n"
    "3,2/1,25.50\n"
)

SCENARIO_MESSAGE = (
    "Subject: Transactions summary\n"
    "\n"
    "Hi customer, here's your transactions summary:\n"
    "\tTotal Balance: 75.50\n"
    "\tAverage debit amount: -50.00\n"
    "\tAverage credit amount: 62.75\n"
    "\tNumber of transactions by month:\n"
    "\t\tJanuary: 2\n"
    "\t\tFebruary: 1\n"
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_settings(temp_dir):
    """Create sample settings for testing."""
    return Settings(
        email_address="sender@example.com",
        email_password="secret",
        smtp_server="smtp.example.com",
        smtp_port=587,
        recipient_address="customer@example.com",
        s3_bucket="transactions-bucket",
        logs_dir=str(temp_dir / "logs"),
    )


@pytest.fixture
def scenario_rows():
    """Data rows of the reference statement (header already removed)."""
    return [
        ["1", "1/5", "100.00"],
        ["2", "1/20", "-50.00"],
        ["3", "2/1", "25.50"],
    ]


@pytest.fixture
def scenario_transactions():
    """Parsed transactions of the reference statement."""
    return [
        Transaction(id="1", date=MonthDay(1, 5), amount=100.0),
        Transaction(id="2", date=MonthDay(1, 20), amount=-50.0),
        Transaction(id="3", date=MonthDay(2, 1), amount=25.5),
    ]


@pytest.fixture
def scenario_stream():
    """The reference statement as an open text stream."""
    return io.StringIO(SCENARIO_CSV)


@pytest.fixture
def write_csv(temp_dir):
    """Factory writing CSV text to a file in the temporary directory."""
    def _write(name: str, content: str) -> str:
        path = temp_dir / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def sample_csv_file(write_csv):
    """The reference statement written to disk."""
    return write_csv("txns.csv", SCENARIO_CSV)


@pytest.fixture
def mock_sender():
    """Email sender double that records deliveries."""
    sender = Mock(spec=EmailSender)
    sender.send.return_value = True
    return sender


@pytest.fixture
def sample_environment(temp_dir):
    """Replace the environment with a complete configuration."""
    env_vars = {
        "EMAIL": "sender@example.com",
        "PASSWORD": "secret",
        "SMTP_SERVER": "smtp.example.com",
        "SMTP_PORT": "2525",
        "S3_BUCKET": "statements",
        "S3_ENDPOINT_URL": "http://localstack:4566",
        "LOG_LEVEL": "DEBUG",
        "LOGS_DIR": str(temp_dir / "logs"),
    }
    with patch.dict(os.environ, env_vars, clear=True):
        yield env_vars


@pytest.fixture
def scenario_csv_text():
    """The reference statement as CSV text."""
    return SCENARIO_CSV


@pytest.fixture
def scenario_message():
    """Expected summary message for the reference statement."""
    return SCENARIO_MESSAGE
