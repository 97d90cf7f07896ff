"""Summary message delivery."""

from statement_summary.delivery.email_sender import EmailSender

__all__ = ["EmailSender"]
