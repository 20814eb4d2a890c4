"""Core components of the tool server."""

from .dispatcher import ToolDispatcher

__all__ = [
    "ToolDispatcher",
]
