"""Tool implementations for the tool server.

All tools inherit from BaseTool and implement the execute method.
"""

from ..clients.base import BaseLLMClient
from ..config import ServerConfig
from ..mail import MailTransport
from .analysis import AnalyzeDataTool
from .base import BaseTool
from .send_email import SendEmailTool
from .thinking import GenerateThinkingTool
from .validation import (
    AnalyzeDataArgs,
    FieldViolation,
    GenerateThinkingArgs,
    Invalid,
    RequestValidator,
    SendEmailArgs,
    Valid,
)

__all__ = [
    "BaseTool",
    "AnalyzeDataTool",
    "GenerateThinkingTool",
    "SendEmailTool",
    "AnalyzeDataArgs",
    "GenerateThinkingArgs",
    "SendEmailArgs",
    "FieldViolation",
    "Invalid",
    "RequestValidator",
    "Valid",
    "get_default_tools",
]


def get_default_tools(
    client: BaseLLMClient,
    config: ServerConfig,
    transport: MailTransport | None = None,
) -> list[BaseTool]:
    """Get the three tools the server registers."""
    return [
        GenerateThinkingTool(client),
        SendEmailTool(client, config, transport),
        AnalyzeDataTool(client),
    ]
