"""Mail transports used to deliver report files to teachers.

``SmtpMailTransport`` talks to a real SMTP server. ``DryRunMailTransport``
only logs what would be sent; it is selected when no SMTP host is configured
so that a run with ``shouldSendEmail`` enabled can be rehearsed safely.
Both raise ``ExternalServiceError`` for a failed delivery, which the
distribution loop reports per recipient.
"""

import logging
import smtplib
from collections.abc import Sequence
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path
from typing import Protocol

from grade_report.config import ATTACHMENT_MIME_TYPE
from grade_report.exceptions import ExternalServiceError

from .settings import SmtpConfig

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    """Anything able to deliver one message with attachments."""

    def send(
        self,
        sender: str,
        recipient: str,
        recipient_name: str,
        subject: str,
        body: str,
        attachments: Sequence[Path],
    ) -> None: ...


def build_message(
    sender: str,
    recipient: str,
    recipient_name: str,
    subject: str,
    body: str,
    attachments: Sequence[Path],
) -> EmailMessage:
    """Assemble a plain-text message with every file attached.

    Raises
    ------
    OSError
        If an attachment cannot be read.
    ValueError
        If the recipient address is not ASCII or a header holds a line break.
    """
    message = EmailMessage()
    message["From"] = sender
    message["To"] = formataddr((recipient_name, recipient))
    message["Subject"] = subject
    message.set_content(body)
    maintype, subtype = ATTACHMENT_MIME_TYPE.split("/", 1)
    for path in attachments:
        message.add_attachment(
            path.read_bytes(), maintype=maintype, subtype=subtype, filename=path.name
        )
    return message


class SmtpMailTransport:
    """Deliver messages through an SMTP server, one connection per message."""

    def __init__(self, config: SmtpConfig) -> None:
        if not config.host:
            raise ValueError("SmtpMailTransport requires an SMTP host")
        self.config = config

    def send(
        self,
        sender: str,
        recipient: str,
        recipient_name: str,
        subject: str,
        body: str,
        attachments: Sequence[Path],
    ) -> None:
        try:
            message = build_message(
                sender, recipient, recipient_name, subject, body, attachments
            )
            with smtplib.SMTP(
                self.config.host, self.config.port, timeout=self.config.timeout
            ) as server:
                if self.config.use_tls:
                    server.starttls()
                if self.config.username and self.config.password:
                    server.login(self.config.username, self.config.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as error:
            raise ExternalServiceError(
                f"Mail delivery to {recipient} failed: {error}",
                context={"recipient": recipient, "host": self.config.host},
            ) from error


class DryRunMailTransport:
    """Log deliveries instead of sending them.

    Attributes
    ----------
    deliveries : list[EmailMessage]
        Every message that would have been sent, in order.
    """

    def __init__(self) -> None:
        self.deliveries: list[EmailMessage] = []

    def send(
        self,
        sender: str,
        recipient: str,
        recipient_name: str,
        subject: str,
        body: str,
        attachments: Sequence[Path],
    ) -> None:
        try:
            message = build_message(
                sender, recipient, recipient_name, subject, body, attachments
            )
        except (OSError, ValueError) as error:
            raise ExternalServiceError(
                f"Mail to {recipient} not prepared: {error}",
                context={"recipient": recipient},
                transient=False,
            ) from error
        logger.info(
            f"Simulated mail from {sender} to {recipient_name} <{recipient}>, "
            f"subject {subject!r}, attachments {[path.name for path in attachments]}"
        )
        self.deliveries.append(message)


def create_transport(config: SmtpConfig) -> MailTransport:
    """Return an SMTP transport when a host is configured, else a dry run."""
    if config.host:
        return SmtpMailTransport(config)
    logger.info("No SMTP_HOST configured; mail delivery will be simulated.")
    return DryRunMailTransport()
