"""Shared utilities: logging, exceptions and validators."""
