"""Validation utilities for statement inputs and delivery settings."""

import os
import re
from typing import List

from statement_summary.config.settings import (
    MAX_FILE_SIZE_MB,
    SUPPORTED_CSV_FORMATS,
)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


def validate_file_path(file_path: str) -> None:
    """Validate that a file path exists and is accessible.

    Args:
        file_path: Path to the file to validate.

    Raises:
        ValidationError: If file path is invalid.
    """
    if not file_path:
        raise ValidationError("File path cannot be empty")

    if not os.path.exists(file_path):
        raise ValidationError(f"File does not exist: {file_path}")

    if not os.path.isfile(file_path):
        raise ValidationError(f"Path is not a file: {file_path}")

    if not os.access(file_path, os.R_OK):
        raise ValidationError(f"File is not readable: {file_path}")


def validate_file_size(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Validate file size against maximum allowed size.

    Args:
        file_path: Path to the file to validate.
        max_size_mb: Maximum allowed file size in MB.

    Raises:
        ValidationError: If file size exceeds limit.
    """
    file_size_mb = os.path.getsize(file_path) / (1024 * 1024)

    if file_size_mb > max_size_mb:
        raise ValidationError(
            f"File size {file_size_mb:.2f}MB exceeds maximum "
            f"allowed size {max_size_mb}MB"
        )


def validate_file_extension(
    file_path: str,
    supported_formats: List[str] = SUPPORTED_CSV_FORMATS
) -> None:
    """Validate file extension against supported formats.

    Args:
        file_path: Path to the file to validate.
        supported_formats: List of supported file extensions.

    Raises:
        ValidationError: If file extension is not supported.
    """
    _, ext = os.path.splitext(file_path.lower())

    if ext not in supported_formats:
        raise ValidationError(
            f"File extension '{ext}' not supported. "
            f"Supported formats: {', '.join(supported_formats)}"
        )


def validate_csv_file(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Perform comprehensive CSV statement file validation.

    Args:
        file_path: Path to the CSV file to validate.
        max_size_mb: Maximum allowed file size in MB.

    Raises:
        ValidationError: If any validation fails.
    """
    validate_file_path(file_path)
    validate_file_extension(file_path)
    validate_file_size(file_path, max_size_mb)


def validate_directory_path(dir_path: str) -> None:
    """Validate that a directory path exists and is readable.

    Args:
        dir_path: Path to the directory to validate.

    Raises:
        ValidationError: If directory path is invalid.
    """
    if not dir_path:
        raise ValidationError("Directory path cannot be empty")

    if not os.path.isdir(dir_path):
        raise ValidationError(f"Path is not a directory: {dir_path}")

    if not os.access(dir_path, os.R_OK):
        raise ValidationError(f"Directory is not readable: {dir_path}")


def validate_email_address(address: str) -> None:
    """Validate the shape of an email address.

    Args:
        address: Address to validate.

    Raises:
        ValidationError: If address is empty or malformed.
    """
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Email address cannot be empty")

    if not _EMAIL_PATTERN.match(address.strip()):
        raise ValidationError(f"Invalid email address: {address}")
