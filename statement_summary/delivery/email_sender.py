"""SMTP delivery of summary messages."""

import smtplib
import socket
from email import policy
from email.message import EmailMessage
from typing import Optional, Tuple

from statement_summary.config.settings import Settings
from statement_summary.utils.exceptions import ConfigurationError, DeliveryError
from statement_summary.utils.logger import get_logger
from statement_summary.utils.validators import ValidationError, validate_email_address

DEFAULT_TIMEOUT_SECONDS = 30

_SUBJECT_PREFIX = "Subject:"


def split_subject(message: str) -> Tuple[Optional[str], str]:
    """Separate a leading ``Subject:`` line from the message body.

    Args:
        message: Formatted message, optionally starting with a subject line
            followed by a blank line.

    Returns:
        Tuple of the subject (None when absent) and the body text.
    """
    head, separator, body = message.partition("\n\n")
    if separator and head.startswith(_SUBJECT_PREFIX) and "\n" not in head:
        return head[len(_SUBJECT_PREFIX):].strip(), body
    return None, message


class EmailSender:
    """Sends formatted summary messages through an SMTP server.

    Credentials and server details come from the ``Settings`` passed at
    construction; nothing is read from the environment afterwards.
    """

    def __init__(self, settings: Settings, timeout: int = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialize email sender.

        Args:
            settings: Settings with SMTP server, port, sender and password.
            timeout: Socket timeout in seconds for the SMTP connection.

        Raises:
            ConfigurationError: If the SMTP server or sender address is missing.
        """
        if not settings.can_send_email():
            raise ConfigurationError("SMTP_SERVER and EMAIL must be set to send email")

        self.logger = get_logger(__name__)
        self.smtp_server = settings.smtp_server
        self.smtp_port = settings.smtp_port
        self.use_tls = settings.smtp_use_tls
        self.from_address = settings.email_address
        self.password = settings.email_password
        self.timeout = timeout

    def build_message(self, message: str, to_address: str) -> EmailMessage:
        """Wrap the formatted text in a MIME message with CRLF line endings.

        Args:
            message: Formatted message, beginning with its ``Subject:`` line.
            to_address: Destination email address.

        Returns:
            Plain-text UTF-8 message with ``From``, ``To`` and ``Subject`` headers.
        """
        subject, body = split_subject(message)

        email_message = EmailMessage(policy=policy.SMTP)
        email_message["From"] = self.from_address
        email_message["To"] = to_address
        if subject is not None:
            email_message["Subject"] = subject
        email_message.set_content(body, charset="utf-8")
        return email_message

    def send(self, message: str, to_address: str) -> bool:
        """Deliver one message to one recipient.

        Args:
            message: Formatted message, beginning with its ``Subject:`` header.
            to_address: Destination email address.

        Returns:
            True once the server accepted the message.

        Raises:
            DeliveryError: If the address is invalid or the SMTP exchange fails.
        """
        try:
            validate_email_address(to_address)
        except ValidationError as e:
            raise DeliveryError(str(e)) from e

        email_message = self.build_message(message, to_address)

        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.password:
                    smtp.login(self.from_address, self.password)
                smtp.send_message(
                    email_message,
                    from_addr=self.from_address,
                    to_addrs=[to_address],
                )
        except (smtplib.SMTPException, socket.error) as e:
            raise DeliveryError(
                f"Failed to send summary to {to_address} via {self.smtp_server}:{self.smtp_port}: {str(e)}"
            ) from e

        self.logger.info(f"Sent summary email to {to_address}")
        return True
