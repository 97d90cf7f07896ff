"""Configuration settings for the statement summary mailer."""

import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, fields

from dotenv import load_dotenv

# Environment variables
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# CSV Input Configuration
SUPPORTED_CSV_FORMATS = [".csv"]
CSV_ENCODING = "utf-8-sig"

# Email Configuration
DEFAULT_SMTP_PORT = 587
DEFAULT_EMAIL_SUBJECT = "Transactions summary"

# Object Storage Configuration
DEFAULT_S3_BUCKET = "transactions-bucket"
DEFAULT_AWS_REGION = "us-east-1"

# Celery Configuration
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = "UTC"

# File Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
LOGS_DIR = os.getenv("LOGS_DIR", os.path.join(BASE_DIR, "logs"))

# Security
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "100"))

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Processing Configuration
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
RETRY_DELAY_SECONDS = int(os.getenv("RETRY_DELAY_SECONDS", "60"))

_SECRET_FIELDS = ("email_password", "aws_secret_access_key")


def load_environment(env_file: Optional[str] = None) -> bool:
    """Load variables from a ``.env`` file into the process environment.

    Called once at process startup by the CLI and the Celery worker. Values
    already present in the environment win over the file.

    Args:
        env_file: Optional explicit path. When None, ``.env`` is searched for
            from the current working directory upwards.

    Returns:
        True if a file was found and loaded.
    """
    return load_dotenv(dotenv_path=env_file)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Configuration settings class."""

    # Email Delivery
    email_address: Optional[str] = None
    email_password: Optional[str] = None
    smtp_server: Optional[str] = None
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_use_tls: bool = True
    recipient_address: Optional[str] = None
    email_subject: str = DEFAULT_EMAIL_SUBJECT

    # Object Storage
    s3_bucket: str = DEFAULT_S3_BUCKET
    s3_endpoint_url: Optional[str] = None
    aws_region: str = DEFAULT_AWS_REGION
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = LOG_FORMAT
    logs_dir: str = LOGS_DIR

    # Security
    max_file_size_mb: int = 100

    # Celery Configuration
    celery_broker_url: str = CELERY_BROKER_URL
    celery_result_backend: str = CELERY_RESULT_BACKEND
    max_retries: int = 3
    retry_delay_seconds: int = 60

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        email_address = os.getenv("EMAIL")
        return cls(
            email_address=email_address,
            email_password=os.getenv("PASSWORD"),
            smtp_server=os.getenv("SMTP_SERVER"),
            smtp_port=int(os.getenv("SMTP_PORT", str(DEFAULT_SMTP_PORT))),
            smtp_use_tls=_env_bool("SMTP_USE_TLS", "True"),
            recipient_address=os.getenv("RECIPIENT_EMAIL", email_address),
            email_subject=os.getenv("EMAIL_SUBJECT", DEFAULT_EMAIL_SUBJECT),
            s3_bucket=os.getenv("S3_BUCKET", DEFAULT_S3_BUCKET),
            s3_endpoint_url=os.getenv("S3_ENDPOINT_URL"),
            aws_region=os.getenv("AWS_REGION", DEFAULT_AWS_REGION),
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            logs_dir=os.getenv("LOGS_DIR", LOGS_DIR),
            max_file_size_mb=int(os.getenv("MAX_FILE_SIZE_MB", "100")),
            celery_broker_url=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
            celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0"),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            retry_delay_seconds=int(os.getenv("RETRY_DELAY_SECONDS", "60")),
        )

    def validate(self) -> bool:
        """Validate settings."""
        return (
            0 < self.smtp_port <= 65535 and
            self.max_retries >= 0 and
            self.retry_delay_seconds >= 0 and
            self.max_file_size_mb > 0 and
            len(self.s3_bucket) > 0
        )

    def can_send_email(self) -> bool:
        """Check whether enough SMTP settings are present to deliver mail."""
        return bool(self.smtp_server and self.email_address)

    def get_recipient(self) -> Optional[str]:
        """Get the destination address, falling back to the sender."""
        return self.recipient_address or self.email_address

    def get_log_level(self) -> str:
        """Get log level as string."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() in valid_levels:
            return self.log_level.upper()
        return "INFO"

    def create_directories(self) -> None:
        """Create necessary directories."""
        os.makedirs(self.logs_dir, exist_ok=True)

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Convert settings to dictionary.

        Args:
            mask_secrets: Replace passwords and secret keys with ``***``.
        """
        data = asdict(self)
        if mask_secrets:
            for key in _SECRET_FIELDS:
                if data.get(key):
                    data[key] = "***"
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def update(self, data: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def clone(self) -> "Settings":
        """Create a copy of settings."""
        return self.from_dict(self.to_dict(mask_secrets=False))

    def is_debug_enabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self.log_level.upper() == "DEBUG"


def get_config() -> Dict[str, Any]:
    """Get module-level configuration as a dictionary.

    Returns:
        Dictionary containing module configuration values.
    """
    return {
        "environment": ENVIRONMENT,
        "celery_broker_url": CELERY_BROKER_URL,
        "celery_result_backend": CELERY_RESULT_BACKEND,
        "logs_dir": LOGS_DIR,
        "max_file_size_mb": MAX_FILE_SIZE_MB,
        "log_level": LOG_LEVEL,
        "max_retries": MAX_RETRIES,
        "retry_delay_seconds": RETRY_DELAY_SECONDS,
    }


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    os.makedirs(LOGS_DIR, exist_ok=True)
