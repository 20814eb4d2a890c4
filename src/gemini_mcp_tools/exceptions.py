"""Custom exception hierarchy for the tool server.

This module defines all custom exceptions used throughout the server,
organized into logical categories: configuration errors, tool errors,
parse errors and external service errors.
"""

from typing import Sequence


class ToolServerError(Exception):
    """Base exception for all tool server errors."""


# =============================================================================
# Configuration Errors - Missing or invalid settings
# =============================================================================

class ConfigurationError(ToolServerError):
    """A required secret or setting is missing."""

    def __init__(self, setting: str, hint: str | None = None):
        self.setting = setting
        message = f"Missing required configuration: {setting}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


# =============================================================================
# Tool Errors - Issues with routing and validating tool calls
# =============================================================================

class ToolError(ToolServerError):
    """Base class for tool call errors."""


class UnknownToolError(ToolError):
    """Requested tool is not registered."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ToolValidationError(ToolError):
    """Tool arguments failed validation.

    Attributes:
        tool_name: Name of the tool that was called
        violations: Field-level violations, each with ``field`` and ``message``
    """

    def __init__(self, tool_name: str, violations: Sequence):
        self.tool_name = tool_name
        self.violations = tuple(violations)
        details = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        super().__init__(f"Invalid arguments for tool '{tool_name}': {details}")

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields."""
        return [v.field for v in self.violations]


# =============================================================================
# Parse Errors - Unreadable uploaded data
# =============================================================================

class ParseError(ToolServerError):
    """Tabular content could not be parsed or holds no rows."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Failed to parse '{file_name}': {reason}")


# =============================================================================
# External Service Errors - Gemini API and SMTP relay failures
# =============================================================================

class ExternalServiceError(ToolServerError):
    """Base class for failures of an external service."""


class AuthenticationError(ExternalServiceError):
    """API key is invalid or rejected."""


class RateLimitError(ExternalServiceError):
    """Rate limit or quota exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        self.retry_after = retry_after
        if retry_after:
            message = f"{message}. Retry after: {retry_after}s"
        super().__init__(message)


class ProviderUnavailableError(ExternalServiceError):
    """Provider API is temporarily unavailable."""


class InvalidResponseError(ExternalServiceError):
    """Request was rejected or the response could not be parsed."""


class MailDeliveryError(ExternalServiceError):
    """The SMTP relay refused or failed to deliver a message."""

    def __init__(self, recipient: str, cause: Exception | str):
        self.recipient = recipient
        self.cause = cause
        super().__init__(f"Failed to send email to {recipient}: {cause}")
