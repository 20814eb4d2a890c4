"""Logging for the tool server.

Everything goes to stderr: stdout belongs to the MCP stdio transport and a
stray byte there corrupts the protocol stream. The level comes from the
``--log-level`` flag, then ``GEMINI_TOOLS_LOG_LEVEL``, then INFO.
"""

import logging
import os
import sys

LOGGER_NAME = "gemini_mcp_tools"
LOG_LEVEL_ENV = "GEMINI_TOOLS_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# libraries that log every request or font lookup at INFO/DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "matplotlib")


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    numeric_level = logging.getLevelName(name)
    if not isinstance(numeric_level, int):
        print(f"Warning: Invalid log level '{name}', using INFO", file=sys.stderr)
        return logging.INFO
    return numeric_level


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR). Falls back to
               GEMINI_TOOLS_LOG_LEVEL, then INFO.

    Returns:
        The ``gemini_mcp_tools`` logger.
    """
    numeric_level = _resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    # safe to call twice: reuse the stderr handler instead of stacking another
    handler = next((h for h in logger.handlers if getattr(h, "stream", None) is sys.stderr), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    handler.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (pass ``__name__``)."""
    return logging.getLogger(name)
