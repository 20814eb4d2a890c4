"""Tests for the send-email tool and the SMTP transport."""

import base64
import smtplib
from unittest.mock import patch

import pytest

from gemini_mcp_tools.config import MailCredentials, ServerConfig
from gemini_mcp_tools.exceptions import ConfigurationError, MailDeliveryError
from gemini_mcp_tools.mail import SmtpMailTransport, build_mime
from gemini_mcp_tools.tools.send_email import (
    FALLBACK_SUBJECT_PROMPT,
    MAX_SUBJECT_LENGTH,
    SendEmailTool,
    build_attachments,
    clean_subject,
    generate_subject,
)
from gemini_mcp_tools.tools.validation import ImageInput, SendEmailArgs
from gemini_mcp_tools.types import EmailAttachment, EmailMessage

PIXEL = base64.b64encode(b"\x89PNG fake image bytes").decode("ascii")


def _args(**overrides) -> SendEmailArgs:
    data = {"to": "friend@example.com", "subjectPrompt": "quarterly results", "text": "Hello\nWorld"}
    data.update(overrides)
    return SendEmailArgs.model_validate(data)


class TestCleanSubject:
    """Tests for subject line cleanup."""

    def test_strips_label_formatting_and_quotes(self):
        assert clean_subject('**Subject:** "Quarterly Report Review"') == "Quarterly Report Review"

    def test_collapses_line_breaks(self):
        assert clean_subject("Team  offsite\nplanning update") == "Team offsite planning update"

    def test_plain_subject_is_unchanged(self):
        assert clean_subject("Project kickoff on Monday") == "Project kickoff on Monday"


class TestGenerateSubject:
    """Tests for subject generation."""

    def test_good_first_answer_uses_one_call(self, mock_client):
        mock_client.generate_content.return_value = "Quarterly results are in"

        subject = generate_subject(mock_client, "quarterly results")

        assert subject == "Quarterly results are in"
        mock_client.generate_content.assert_called_once()

    def test_options_answer_triggers_fallback(self, mock_client):
        mock_client.generate_content.side_effect = [
            "Option 1: Results\nOption 2: Numbers",
            "Quarterly results summary",
        ]

        subject = generate_subject(mock_client, "quarterly results")

        assert subject == "Quarterly results summary"
        assert mock_client.generate_content.call_count == 2
        second_prompt = mock_client.generate_content.call_args_list[1].args[0]
        assert second_prompt == FALLBACK_SUBJECT_PROMPT.format(topic="quarterly results")

    def test_long_fallback_is_truncated(self, mock_client):
        mock_client.generate_content.side_effect = ["short", "word " * 40]

        subject = generate_subject(mock_client, "anything")

        assert len(subject) == MAX_SUBJECT_LENGTH
        assert subject.endswith("...")


class TestBuildAttachments:
    """Tests for image attachment building."""

    def test_content_ids_follow_input_position(self):
        images = [
            ImageInput(name="bad.png", data="not a data uri"),
            ImageInput(name="chart.png", data=f"data:image/png;base64,{PIXEL}"),
        ]

        attachments = build_attachments(images)

        assert len(attachments) == 1
        assert attachments[0].content_id == "image1"
        assert attachments[0].content_type == "image/png"
        assert attachments[0].content == PIXEL


class TestSendEmailTool:
    """Tests for SendEmailTool.execute."""

    def test_sends_with_generated_subject(self, mock_client, server_config, mock_transport):
        mock_client.generate_content.return_value = "Quarterly results are in"
        tool = SendEmailTool(mock_client, server_config, mock_transport)

        result = tool.execute(_args())

        message = mock_transport.send.call_args.args[0]
        assert isinstance(message, EmailMessage)
        assert message.sender == "sender@example.com"
        assert message.to == "friend@example.com"
        assert message.subject == "Quarterly results are in"
        assert "<p>Hello</p>" in message.html
        assert "Email Successfully Sent" in result
        assert "&lt;123.456@example.com&gt;" in result

    def test_given_html_is_used_verbatim(self, mock_client, server_config, mock_transport):
        mock_client.generate_content.return_value = "Quarterly results are in"
        tool = SendEmailTool(mock_client, server_config, mock_transport)

        tool.execute(_args(html="<b>custom</b>"))

        assert mock_transport.send.call_args.args[0].html == "<b>custom</b>"

    def test_delivery_failure_is_reported_as_content(self, mock_client, server_config, mock_transport):
        mock_client.generate_content.return_value = "Quarterly results are in"
        mock_transport.send.side_effect = MailDeliveryError("friend@example.com", "relay refused")
        tool = SendEmailTool(mock_client, server_config, mock_transport)

        result = tool.execute(_args())

        assert "Email Sending Failed" in result
        assert "relay refused" in result

    def test_missing_credentials_fails_before_model_call(self, mock_client, output_dir, mock_transport):
        config = ServerConfig(api_key="k", mail_credentials=None, default_output_dir=output_dir)
        tool = SendEmailTool(mock_client, config, mock_transport)

        with pytest.raises(ConfigurationError):
            tool.execute(_args())

        mock_client.generate_content.assert_not_called()
        mock_transport.send.assert_not_called()


def _message(**overrides) -> EmailMessage:
    data = dict(
        sender="sender@example.com",
        to="friend@example.com",
        subject="Hello",
        text="plain body",
        html='<p>html body</p><img src="cid:image0">',
    )
    data.update(overrides)
    return EmailMessage(**data)


class TestBuildMime:
    """Tests for MIME conversion."""

    def test_headers_and_alternatives(self):
        mime = build_mime(_message())

        assert mime["From"] == "sender@example.com"
        assert mime["To"] == "friend@example.com"
        assert mime["Subject"] == "Hello"
        assert mime["Message-ID"].endswith("@example.com>")
        assert mime.get_body(preferencelist=("plain",)).get_content().strip() == "plain body"
        assert "html body" in mime.get_body(preferencelist=("html",)).get_content()

    def test_inline_image_has_content_id(self):
        attachment = EmailAttachment(
            filename="chart.png", content=PIXEL, content_id="image0", content_type="image/png"
        )

        mime = build_mime(_message(attachments=[attachment]))

        images = [part for part in mime.walk() if part.get_content_type() == "image/png"]
        assert len(images) == 1
        assert images[0]["Content-ID"] == "<image0>"
        assert images[0].get_content() == b"\x89PNG fake image bytes"


class TestSmtpMailTransport:
    """Tests for SMTP delivery with a patched smtplib."""

    def test_send_logs_in_and_returns_message_id(self):
        transport = SmtpMailTransport(MailCredentials("sender@example.com", "secret"))

        with patch("gemini_mcp_tools.mail.smtplib.SMTP") as smtp_cls:
            message_id = transport.send(_message())

        smtp = smtp_cls.return_value.__enter__.return_value
        smtp_cls.assert_called_once_with("smtp.gmail.com", 587, timeout=30.0)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("sender@example.com", "secret")
        smtp.send_message.assert_called_once()
        assert message_id.startswith("<")

    def test_smtp_error_becomes_delivery_error(self):
        transport = SmtpMailTransport(MailCredentials("sender@example.com", "wrong"))

        with patch("gemini_mcp_tools.mail.smtplib.SMTP") as smtp_cls:
            smtp = smtp_cls.return_value.__enter__.return_value
            smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            with pytest.raises(MailDeliveryError) as exc_info:
                transport.send(_message())

        assert exc_info.value.recipient == "friend@example.com"

    def test_from_config_requires_credentials(self, output_dir):
        config = ServerConfig(api_key=None, mail_credentials=None, default_output_dir=output_dir)
        with pytest.raises(ConfigurationError):
            SmtpMailTransport.from_config(config)

    def test_line_break_in_header_becomes_delivery_error(self):
        transport = SmtpMailTransport(MailCredentials("sender@example.com", "secret"))

        with patch("gemini_mcp_tools.mail.smtplib.SMTP") as smtp_cls:
            with pytest.raises(MailDeliveryError):
                transport.send(_message(to="friend@example.com\nBcc: other@example.com"))

        smtp_cls.assert_not_called()

    def test_line_break_in_recipient_is_reported_as_content(self, mock_client, server_config):
        """An injected header comes back as the failure card, not an exception."""
        mock_client.generate_content.return_value = "Quarterly results are in"
        tool = SendEmailTool(mock_client, server_config)

        with patch("gemini_mcp_tools.mail.smtplib.SMTP") as smtp_cls:
            result = tool.execute(_args(to="friend@example.com\nBcc: other@example.com"))

        assert "Email Sending Failed" in result
        smtp_cls.assert_not_called()
