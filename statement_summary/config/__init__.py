"""Configuration for the statement summary mailer."""

from statement_summary.config.settings import Settings, load_environment

__all__ = ["Settings", "load_environment"]
