"""Email tool: Gemini writes the subject, SMTP delivers the message.

Subject generation makes at most two model calls. The first asks for one
professional line of 50-60 characters; if the cleaned answer still looks
wrong (too long, too short, or listing options) a simpler fallback prompt is
tried once and its answer is truncated if needed.

Delivery failures are reported back as normal content so the host sees a
completed call with a failure message, not a protocol error.
"""

import re
from typing import Any, Sequence

from ..clients.base import BaseLLMClient
from ..config import ServerConfig
from ..exceptions import ExternalServiceError
from ..logging import get_logger
from ..mail import MailTransport, SmtpMailTransport
from ..types import EmailAttachment, EmailMessage
from . import templates
from .base import BaseTool
from .validation import ImageInput, SendEmailArgs

logger = get_logger(__name__)

MAX_SUBJECT_LENGTH = 70
MIN_SUBJECT_LENGTH = 10

SUBJECT_PROMPT = """Create a single, professional email subject line (maximum 50-60 characters) for: {topic}.
The subject should be direct, clear, and professional.
Do not include numbering, asterisks, or formatting characters.
Do not provide multiple options - just give me one perfect subject line.
Do not include phrases like "Subject line:" or "Email subject:" in your response."""

FALLBACK_SUBJECT_PROMPT = """Create a brief, professional email subject line (30-50 characters only) about: {topic}.
Just return the subject line text alone with no formatting or explanation."""

_FORMATTING = re.compile(r"\*\*|\*|__|_")
_LABEL = re.compile(r"^(subject line|email subject|subject|title)(:|\s-)\s*", re.IGNORECASE)
_QUOTED = re.compile(r"""^["'](.+)["']$""")
_WHITESPACE = re.compile(r"\s+")
_DATA_URI = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)


def clean_subject(raw: str) -> str:
    """Strip markdown, labels, wrapping quotes and line breaks from a model answer."""
    subject = _FORMATTING.sub("", raw)
    subject = _WHITESPACE.sub(" ", subject).strip()
    subject = _LABEL.sub("", subject)
    subject = _QUOTED.sub(r"\1", subject)
    return subject.strip()


def needs_fallback(subject: str) -> bool:
    return (
        len(subject) > MAX_SUBJECT_LENGTH
        or len(subject) < MIN_SUBJECT_LENGTH
        or "Option" in subject
        or "**" in subject
    )


def generate_subject(client: BaseLLMClient, topic: str) -> str:
    """Ask the model for a subject line about ``topic``."""
    subject = clean_subject(client.generate_content(SUBJECT_PROMPT.format(topic=topic)))

    if needs_fallback(subject):
        logger.info(f"subject '{subject}' rejected, retrying with fallback prompt")
        subject = clean_subject(client.generate_content(FALLBACK_SUBJECT_PROMPT.format(topic=topic)))
        if len(subject) > MAX_SUBJECT_LENGTH:
            subject = subject[:MAX_SUBJECT_LENGTH - 3] + "..."

    logger.info(f'generated subject: "{subject}"')
    return subject


def build_attachments(images: Sequence[ImageInput]) -> list[EmailAttachment]:
    """Turn data-uri images into inline attachments (cid ``image<index>``)."""
    attachments = []
    for index, image in enumerate(images):
        match = _DATA_URI.match(image.data)
        if not match:
            logger.warning(f"skipping image {image.name}: data is not a base64 data uri")
            continue
        content_type, payload = match.groups()
        attachments.append(EmailAttachment(
            filename=image.name,
            content=payload,
            content_id=f"image{index}",
            content_type=content_type,
        ))
    return attachments


class SendEmailTool(BaseTool):
    """Send an email with a Gemini-generated subject."""

    ARGUMENTS = SendEmailArgs

    def __init__(
        self,
        client: BaseLLMClient,
        config: ServerConfig,
        transport: MailTransport | None = None,
    ):
        """Initialize the tool.

        Args:
            client: Generative-language client for the subject line
            config: Server configuration (mail credentials, smtp relay)
            transport: Mail transport; an SMTP transport is built per call if omitted
        """
        self.client = client
        self.config = config
        self.transport = transport

    @property
    def name(self) -> str:
        return "send-email"

    @property
    def description(self) -> str:
        return "Send an email with AI-generated subject using Gemini Flash 2"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "to": {"type": "string", "description": "Recipient email address"},
                "subjectPrompt": {
                    "type": "string",
                    "description": "Prompt for Gemini to generate email subject",
                },
                "text": {"type": "string", "description": "Plain text version of the email"},
                "html": {"type": "string", "description": "HTML version of the email (optional)"},
                "images": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "description": "Image filename"},
                            "data": {
                                "type": "string",
                                "description": "Base64 encoded image data with mime type (data:image/jpeg;base64,...)",
                            },
                        },
                        "required": ["name", "data"],
                    },
                    "description": "Images to attach to the email (optional)",
                },
            },
            "required": ["to", "subjectPrompt", "text"],
        }

    def execute(self, arguments: SendEmailArgs) -> str:
        # fail before spending a model call when mail is not configured
        credentials = self.config.require_mail_credentials()
        transport = self.transport or SmtpMailTransport.from_config(self.config)

        logger.info(f'generating email subject using prompt: "{arguments.subject_prompt}"')
        subject = generate_subject(self.client, arguments.subject_prompt)

        message = EmailMessage(
            sender=credentials.user,
            to=arguments.to,
            subject=subject,
            text=arguments.text,
            html=arguments.html or templates.email_document(subject, arguments.text),
            attachments=build_attachments(arguments.images),
        )

        try:
            message_id = transport.send(message)
        except ExternalServiceError as e:
            logger.error(f"error sending email: {e}")
            return templates.email_failed(str(e))

        return templates.email_sent(arguments.to, subject, message_id)
