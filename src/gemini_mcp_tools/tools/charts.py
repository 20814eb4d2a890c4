"""Histogram chart pages for numeric columns.

Bins come from ``stats.histogram``; matplotlib only draws them. Each chart
is a standalone HTML page with the figure inlined as SVG, so the report can
embed it with an iframe and no network access is needed to view it.
"""

import io
import re
from html import escape

import matplotlib

matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt  # noqa: E402

from ..types import Histogram  # noqa: E402

_FILL = "#36a2eb80"
_EDGE = "#36a2eb"


def column_slug(column: str) -> str:
    """Filesystem-safe form of a column name."""
    return re.sub(r"[^\w.-]+", "_", column).strip("._") or "column"


def _mathtext_safe(text: str) -> str:
    # a bare "$" switches matplotlib into mathtext mode
    return text.replace("$", r"\$")


def histogram_svg(column: str, hist: Histogram) -> str:
    """Draw ``hist`` and return the figure as an inline ``<svg>`` element."""
    label = _mathtext_safe(column)
    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        if hist.bin_count:
            width = hist.bin_width or 1.0
            ax.bar(hist.edges, hist.counts, width=width, align="edge", color=_FILL, edgecolor=_EDGE)
            ax.set_xticks(hist.edges)
            ax.set_xticklabels([f"{edge:.2f}" for edge in hist.edges], rotation=45, ha="right")
        ax.set_xlabel(label)
        ax.set_ylabel("Count")
        ax.set_title(f"Distribution of {label}")
        fig.tight_layout()

        buf = io.StringIO()
        fig.savefig(buf, format="svg")
    finally:
        plt.close(fig)

    svg = buf.getvalue()
    return svg[svg.find("<svg"):]


def chart_page(column: str, hist: Histogram) -> str:
    """Standalone HTML page showing the histogram of one column."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Distribution of {escape(column)}</title>
  <style>
    .chart-container {{ width: 800px; margin: 20px auto; }}
    .chart-container svg {{ width: 100%; height: auto; }}
  </style>
</head>
<body>
  <div class="chart-container">
    {histogram_svg(column, hist)}
  </div>
</body>
</html>"""
