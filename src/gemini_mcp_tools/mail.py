"""Outbound mail over SMTP.

Messages are sent as multipart/alternative (plain text + html). Inline
attachments are added to the html part as multipart/related parts whose
Content-ID matches the ``cid:`` references in the html.
"""

import base64
import binascii
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage as MIMEMessage
from email.utils import formatdate, make_msgid

from .config import MailCredentials, ServerConfig
from .exceptions import MailDeliveryError
from .logging import get_logger
from .types import EmailMessage

logger = get_logger(__name__)


def build_mime(message: EmailMessage) -> MIMEMessage:
    """Convert an EmailMessage into a stdlib MIME message."""
    mime = MIMEMessage()
    mime["From"] = message.sender
    mime["To"] = message.to
    mime["Subject"] = message.subject
    mime["Date"] = formatdate(localtime=True)
    domain = message.sender.rpartition("@")[2] or None
    mime["Message-ID"] = make_msgid(domain=domain)

    mime.set_content(message.text)
    mime.add_alternative(message.html, subtype="html")

    if message.attachments:
        html_part = mime.get_body(preferencelist=("html",))
        for attachment in message.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            if not subtype:
                maintype, subtype = "application", "octet-stream"
            try:
                data = base64.b64decode(attachment.content)
            except (binascii.Error, ValueError):
                logger.warning(f"skipping attachment {attachment.filename}: invalid base64 data")
                continue
            html_part.add_related(
                data,
                maintype=maintype,
                subtype=subtype,
                cid=f"<{attachment.content_id}>",
                filename=attachment.filename,
            )
    return mime


class MailTransport(ABC):
    """Something that can deliver an EmailMessage."""

    @abstractmethod
    def send(self, message: EmailMessage) -> str:
        """Deliver ``message`` and return its message id.

        Raises:
            MailDeliveryError: If delivery fails
        """


class SmtpMailTransport(MailTransport):
    """SMTP submission with STARTTLS and login."""

    def __init__(
        self,
        credentials: MailCredentials,
        host: str = "smtp.gmail.com",
        port: int = 587,
        timeout: float = 30.0,
    ):
        self.credentials = credentials
        self.host = host
        self.port = port
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ServerConfig) -> "SmtpMailTransport":
        """Create a transport; raises ConfigurationError without credentials."""
        return cls(
            credentials=config.require_mail_credentials(),
            host=config.smtp_host,
            port=config.smtp_port,
            timeout=config.smtp_timeout,
        )

    def send(self, message: EmailMessage) -> str:
        logger.info(f"sending email to {message.to!r} via {self.host}:{self.port}")
        try:
            # header values with line breaks are rejected here
            mime = build_mime(message)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.ehlo()
                smtp.starttls(context=ssl.create_default_context())
                smtp.ehlo()
                smtp.login(self.credentials.user, self.credentials.password)
                smtp.send_message(mime)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise MailDeliveryError(message.to, e) from e

        message_id = mime["Message-ID"]
        logger.info(f"email sent, message ID: {message_id}")
        return message_id
