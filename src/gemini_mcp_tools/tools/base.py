import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .validation import ToolArguments


def timestamp_ms() -> int:
    """Milliseconds since the epoch, used to name artifacts."""
    return int(time.time() * 1000)


def ensure_dir(path: str | Path) -> Path:
    """Create ``path`` (and parents) if needed and return it as a Path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


class BaseTool(ABC):
    """Abstract base class for all tools.

    A tool receives an already validated argument record of type
    ``ARGUMENTS`` and returns the text for the response envelope.
    """

    ARGUMENTS: type[ToolArguments] = ToolArguments

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the tool description."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """Return the JSON schema for tool parameters."""
        pass

    @abstractmethod
    def execute(self, arguments: ToolArguments) -> str:
        """Execute the tool with validated arguments."""
        pass

    def to_schema(self) -> dict[str, Any]:
        """Return the tool definition advertised to the host."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }
