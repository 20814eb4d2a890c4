"""Value types shared across the tool server.

Every type here is request scoped: built while one tool call is handled
and discarded when the response is returned.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

# A table row: column name -> numeric or textual cell. Missing keys are missing values.
DataRow = dict[str, Union[int, float, str]]


class RequestState(Enum):
    """Lifecycle of a single tool call."""
    VALIDATING = "validating"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolRequest:
    """A tool call as delivered by the host."""
    name: str
    arguments: dict[str, Any] | None = None


@dataclass(frozen=True)
class TextContent:
    """One text item of a response envelope."""
    text: str
    type: str = "text"


@dataclass
class ToolResult:
    """Response envelope returned by the dispatcher.

    Attributes:
        content: Ordered text items, in the order the host should show them
    """
    content: list[TextContent] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        """All text items joined, mostly useful in tests and logs."""
        return "".join(item.text for item in self.content)


# ==================== statistics types ====================


@dataclass(frozen=True)
class NumericStats:
    """Summary of one numeric column."""
    mean: float
    median: float
    std: float
    min: float
    max: float

    def to_dict(self) -> dict[str, float]:
        return {
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class Statistics:
    """Summary of a whole table.

    Attributes:
        row_count: Number of rows in the table
        column_count: Number of distinct columns across all rows
        numeric_stats: Column -> NumericStats, for columns numeric in the first row
        categorical_stats: Column -> (value -> count), for every other column
    """
    row_count: int
    column_count: int
    numeric_stats: dict[str, NumericStats] = field(default_factory=dict)
    categorical_stats: dict[str, dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used in prompts and reports."""
        return {
            "rowCount": self.row_count,
            "columnCount": self.column_count,
            "numericStats": {
                column: stats.to_dict() for column, stats in self.numeric_stats.items()
            },
            "categoricalStats": {
                column: dict(counts) for column, counts in self.categorical_stats.items()
            },
        }


@dataclass(frozen=True)
class Histogram:
    """Equal-width bins over a value range.

    ``edges[i]`` is the lower bound of bin ``i``; ``counts[i]`` its size.
    """
    edges: list[float]
    counts: list[int]
    bin_width: float

    @property
    def bin_count(self) -> int:
        return len(self.counts)


# ==================== email types ====================


@dataclass(frozen=True)
class EmailAttachment:
    """An inline attachment referenced from the html body by content id."""
    filename: str
    content: str
    content_id: str
    content_type: str
    encoding: str = "base64"


@dataclass
class EmailMessage:
    """A message ready for the mail transport.

    Attributes:
        sender: From address (the smtp login)
        to: Recipient address
        subject: Generated subject line
        text: Plain-text body
        html: Html body
        attachments: Inline images in input order
    """
    sender: str
    to: str
    subject: str
    text: str
    html: str
    attachments: list[EmailAttachment] = field(default_factory=list)
