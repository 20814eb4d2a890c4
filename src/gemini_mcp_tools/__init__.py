"""Gemini MCP Tools - an MCP tool server backed by Google Gemini.

This package exposes three tools to an MCP host over stdio: free-form
generation, email sending with a generated subject, and exploratory
analysis of CSV/Excel files.
"""

__version__ = "1.0.0"

from .config import ServerConfig, Settings, get_settings
from .core.dispatcher import ToolDispatcher
from .exceptions import (
    ConfigurationError,
    ExternalServiceError,
    ParseError,
    ToolError,
    ToolServerError,
    ToolValidationError,
    UnknownToolError,
)
from .types import (
    DataRow,
    EmailAttachment,
    EmailMessage,
    Histogram,
    NumericStats,
    RequestState,
    Statistics,
    TextContent,
    ToolRequest,
    ToolResult,
)

__all__ = [
    "__version__",
    # dispatch
    "ToolDispatcher",
    # configuration
    "ServerConfig",
    "Settings",
    "get_settings",
    # types
    "DataRow",
    "EmailAttachment",
    "EmailMessage",
    "Histogram",
    "NumericStats",
    "RequestState",
    "Statistics",
    "TextContent",
    "ToolRequest",
    "ToolResult",
    # exceptions
    "ConfigurationError",
    "ExternalServiceError",
    "ParseError",
    "ToolError",
    "ToolServerError",
    "ToolValidationError",
    "UnknownToolError",
]
