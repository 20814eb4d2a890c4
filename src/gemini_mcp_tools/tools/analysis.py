"""Exploratory analysis of an uploaded CSV or Excel file.

Outputs, all under the call's output directory:
- a copy of the uploaded file
- ``plots/<column>_histogram_<ms>.html`` for every numeric column
- ``analysis_<ms>.txt`` with Gemini's narrative
- ``report_<ms>.html`` tying statistics, narrative and charts together

The model is asked before anything is written, so a failed Gemini call
leaves no artifacts behind.
"""

import json
from pathlib import Path
from typing import Any

from ..clients.base import BaseLLMClient
from ..exceptions import ParseError
from ..logging import get_logger
from ..types import DataRow, Statistics
from . import templates
from .base import BaseTool, ensure_dir, timestamp_ms
from .charts import chart_page, column_slug
from .markdown import render_markdown
from .stats import column_values, histogram, summarize
from .tabular import load_table
from .validation import AnalyzeDataArgs

logger = get_logger(__name__)

ANALYSIS_PROMPT = """Analyze this dataset with {rows} rows and {columns} columns.

Basic statistics:
{statistics}

Please provide:
1. Key insights from the data
2. Patterns and trends
3. Potential anomalies
4. Recommendations for further analysis

{depth}"""

DEPTH_INSTRUCTIONS = {
    "detailed": "Please provide a detailed analysis with specific examples and correlations.",
    "basic": "Keep the analysis concise and focused on the most important findings.",
}


def build_analysis_prompt(statistics: Statistics, analysis_type: str) -> str:
    return ANALYSIS_PROMPT.format(
        rows=statistics.row_count,
        columns=statistics.column_count,
        statistics=json.dumps(statistics.to_dict(), indent=2),
        depth=DEPTH_INSTRUCTIONS[analysis_type],
    )


def write_charts(
    rows: list[DataRow],
    statistics: Statistics,
    plots_dir: Path,
    timestamp: int,
) -> list[Path]:
    """Write one histogram page per numeric column, returning their paths."""
    paths = []
    used: set[str] = set()
    for column in statistics.numeric_stats:
        slug = column_slug(column)
        candidate, suffix = slug, 2
        while candidate in used:
            candidate, suffix = f"{slug}_{suffix}", suffix + 1
        used.add(candidate)

        hist = histogram(column_values(rows, column))
        path = plots_dir / f"{candidate}_histogram_{timestamp}.html"
        path.write_text(chart_page(column, hist), encoding="utf-8")
        paths.append(path)
    return paths


class AnalyzeDataTool(BaseTool):
    """Summarize a table, chart its numeric columns and ask Gemini for insights."""

    ARGUMENTS = AnalyzeDataArgs

    def __init__(self, client: BaseLLMClient):
        self.client = client

    @property
    def name(self) -> str:
        return "analyze-data"

    @property
    def description(self) -> str:
        return "Analyze Excel/CSV data using EDA and Gemini AI"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "fileData": {"type": "string", "description": "Base64 encoded file data"},
                "fileName": {
                    "type": "string",
                    "description": "Name of the file (must be .xlsx, .xls, or .csv)",
                },
                "analysisType": {
                    "type": "string",
                    "enum": ["basic", "detailed"],
                    "description": "Type of analysis to perform",
                },
                "outputDir": {
                    "type": "string",
                    "description": "Directory to save analysis results (optional)",
                },
            },
            "required": ["fileData", "fileName", "analysisType"],
        }

    def execute(self, arguments: AnalyzeDataArgs) -> str:
        buffer = arguments.file_bytes
        rows = load_table(buffer, arguments.file_name)
        if not rows:
            raise ParseError(arguments.file_name, "the file contains no data rows")

        statistics = summarize(rows)
        logger.info(
            f"{arguments.file_name}: {statistics.row_count} rows, {statistics.column_count} columns, "
            f"{len(statistics.numeric_stats)} numeric"
        )

        analysis_text = self.client.generate_content(
            build_analysis_prompt(statistics, arguments.analysis_type)
        )

        save_dir = ensure_dir(arguments.output_dir)
        plots_dir = ensure_dir(save_dir / "plots")
        timestamp = timestamp_ms()

        (save_dir / Path(arguments.file_name).name).write_bytes(buffer)
        plots = write_charts(rows, statistics, plots_dir, timestamp)

        analysis_path = save_dir / f"analysis_{timestamp}.txt"
        analysis_path.write_text(analysis_text, encoding="utf-8")

        report_path = save_dir / f"report_{timestamp}.html"
        report_path.write_text(
            templates.analysis_report(
                statistics,
                render_markdown(analysis_text),
                [plot.relative_to(save_dir).as_posix() for plot in plots],
            ),
            encoding="utf-8",
        )
        logger.info(f"wrote report to {report_path} with {len(plots)} charts")

        return templates.analysis_complete(
            arguments.file_name,
            arguments.analysis_type,
            statistics,
            report_path,
            analysis_path,
            plots_dir,
        )
