"""Shared test fixtures and configuration."""

import base64

import pytest
from unittest.mock import MagicMock

from gemini_mcp_tools.clients.base import BaseLLMClient
from gemini_mcp_tools.config import MailCredentials, ServerConfig
from gemini_mcp_tools.mail import MailTransport
from gemini_mcp_tools.main import build_dispatcher


@pytest.fixture
def mock_client():
    """Create a mock Gemini client with a markdown answer."""
    client = MagicMock(spec=BaseLLMClient)
    client.generate_content.return_value = "# Insights\n\n- first point\n- second point"
    return client


@pytest.fixture
def output_dir(tmp_path):
    """Default output directory (not created up front)."""
    return tmp_path / "output"


@pytest.fixture
def server_config(output_dir):
    """Server config with mail credentials and a temporary output dir."""
    return ServerConfig(
        api_key="fake-key",
        mail_credentials=MailCredentials(user="sender@example.com", password="secret"),
        default_output_dir=output_dir,
    )


@pytest.fixture
def mock_transport():
    """Create a mock mail transport that accepts every message."""
    transport = MagicMock(spec=MailTransport)
    transport.send.return_value = "<123.456@example.com>"
    return transport


@pytest.fixture
def dispatcher(mock_client, server_config, mock_transport):
    """Dispatcher wired with the mock client and transport."""
    return build_dispatcher(server_config, client=mock_client, transport=mock_transport)


@pytest.fixture
def sample_csv():
    """Small table with one numeric and one text column."""
    return "a,b\n1,x\n2,y\n3,z\n"


@pytest.fixture
def encode():
    """Base64-encode test file content."""
    def _encode(content: str | bytes) -> str:
        if isinstance(content, str):
            content = content.encode("utf-8")
        return base64.b64encode(content).decode("ascii")
    return _encode
