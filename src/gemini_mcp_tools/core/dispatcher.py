"""Tool call routing.

This module routes a tool call to its handler: look the tool up by exact
name, validate the arguments, run the handler to completion and wrap its
text in the response envelope. Handler failures propagate unchanged; there
is no retry and no fallback.
"""

import time
from typing import Any, Iterable

from ..exceptions import UnknownToolError
from ..logging import get_logger
from ..tools.base import BaseTool
from ..tools.validation import Invalid, RequestValidator
from ..types import RequestState, ToolRequest, ToolResult

logger = get_logger(__name__)


class ToolDispatcher:
    """Routes tool calls to registered tools.

    Each call is independent: the dispatcher keeps no state between calls
    besides the immutable tool registry.
    """

    def __init__(self, tools: Iterable[BaseTool], validator: RequestValidator):
        """Initialize the dispatcher.

        Args:
            tools: Tool instances to register, keyed by their name.
            validator: Validator used to parse raw arguments.
        """
        self.tools: dict[str, BaseTool] = {tool.name: tool for tool in tools}
        self.validator = validator

    def _transition(self, name: str, state: RequestState) -> None:
        logger.debug(f"{name}: {state.value}")

    def dispatch(self, name: str, raw_arguments: Any = None) -> ToolResult:
        """Validate and execute one tool call.

        Args:
            name: Tool name, matched exactly.
            raw_arguments: Untyped argument mapping from the host.

        Returns:
            The response envelope with the tool's text.

        Raises:
            UnknownToolError: If no tool is registered under ``name``.
            ToolValidationError: If the arguments fail validation.
            ToolServerError: Whatever the handler raises.
        """
        tool = self.tools.get(name)
        if tool is None:
            logger.warning(f"unknown tool requested: {name}")
            raise UnknownToolError(name)

        self._transition(name, RequestState.VALIDATING)
        result = self.validator.validate(name, raw_arguments)
        if isinstance(result, Invalid):
            self._transition(name, RequestState.FAILED)
            error = result.to_error()
            logger.warning(str(error))
            raise error

        self._transition(name, RequestState.EXECUTING)
        started = time.monotonic()
        try:
            text = tool.execute(result.arguments)
        except Exception as e:
            self._transition(name, RequestState.FAILED)
            logger.error(f"error in tool execution '{name}': {type(e).__name__}: {e}")
            raise

        self._transition(name, RequestState.SUCCEEDED)
        logger.info(f"tool '{name}' completed in {time.monotonic() - started:.2f}s")
        return ToolResult.from_text(text)

    def handle(self, request: ToolRequest) -> ToolResult:
        """Dispatch a ToolRequest."""
        return self.dispatch(request.name, request.arguments)

    def list_tools(self) -> list[dict[str, Any]]:
        """Definitions of all registered tools, in registration order."""
        return [tool.to_schema() for tool in self.tools.values()]

    def get_tool(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self.tools.get(name)

    def has_tool(self, name: str) -> bool:
        """Check if a tool exists."""
        return name in self.tools
