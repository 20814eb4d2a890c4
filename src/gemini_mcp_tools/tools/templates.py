"""HTML fragments returned to the host and written to disk.

Every interpolated value is escaped here; callers pass plain text, except
for arguments named ``*_html`` which must already be safe markup.
"""

import json
from html import escape
from pathlib import Path
from typing import Sequence

from ..types import Statistics

_CARD = (
    "font-family: Arial, sans-serif; padding: 20px; border-radius: 10px; "
    "border: 1px solid #e0e0e0; max-width: 600px; margin: 0 auto;"
)
_WIDE_CARD = (
    "font-family: Arial, sans-serif; padding: 20px; border-radius: 10px; border: 1px solid #e0e0e0;"
)
_BANNER = "color: white; padding: 10px 15px; border-radius: 5px; margin-bottom: 15px;"
_PANEL = "padding: 10px; background-color: white; border-radius: 5px; margin-bottom: 15px;"


def thinking_response(prompt: str, body_html: str, saved_path: Path) -> str:
    """Wrap rendered model output for display in the host."""
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; line-height: 1.5; color: #333;">
  <div style="background-color: #f0f8ff; padding: 15px; border-radius: 8px; margin-bottom: 20px; border-left: 5px solid #4169e1;">
    <h2 style="margin-top: 0; color: #4169e1;">Gemini Thinking Response</h2>
    <p style="font-style: italic; color: #666;">Generated based on prompt: "{escape(prompt)}"</p>
  </div>
  <div style="background-color: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1);">
    {body_html}
  </div>
  <div style="background-color: #f5f5f5; padding: 10px; border-radius: 8px; margin-top: 20px; font-size: 0.9em; color: #666;">
    <p>Response saved to: {escape(str(saved_path))}</p>
  </div>
</div>"""


def email_document(subject: str, text: str) -> str:
    """Build a complete html email from a plain-text body, one paragraph per line."""
    paragraphs = "".join(f"<p>{escape(line)}</p>" for line in text.split("\n"))
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(subject)}</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 650px; margin: 0 auto; padding: 20px; }}
    .header {{ border-bottom: 2px solid #4169E1; padding-bottom: 10px; margin-bottom: 20px; }}
    .header h1 {{ color: #4169E1; font-size: 24px; margin: 0; }}
    .content {{ padding: 15px 0; }}
    .footer {{ margin-top: 30px; padding-top: 10px; border-top: 1px solid #eee; font-size: 12px; color: #777; }}
    p {{ margin: 0 0 15px; }}
  </style>
</head>
<body>
  <div class="header">
    <h1>{escape(subject)}</h1>
  </div>
  <div class="content">
    {paragraphs}
  </div>
  <div class="footer">
    <p>This email was sent using Gemini Email Subject Generator</p>
  </div>
</body>
</html>"""


def email_sent(to: str, subject: str, message_id: str) -> str:
    return f"""<div style="{_CARD} background-color: #f9f9f9;">
  <div style="background-color: #4CAF50; {_BANNER}">
    <h2 style="margin: 0; font-size: 18px;">✅ Email Successfully Sent</h2>
  </div>
  <div style="{_PANEL}">
    <p><strong>To:</strong> {escape(to)}</p>
    <p><strong>Subject:</strong> "{escape(subject)}"</p>
    <p><strong>Message ID:</strong> {escape(message_id)}</p>
  </div>
  <div style="background-color: #f0f0f0; padding: 10px; border-radius: 5px; border-left: 3px solid #4CAF50;">
    <p>The email has been delivered with your provided content.</p>
    <p style="font-style: italic; color: #666;">Note: This is just a confirmation message displayed here, not the actual email content.</p>
  </div>
</div>"""


def email_failed(error_message: str) -> str:
    return f"""<div style="{_CARD} background-color: #fff0f0;">
  <div style="background-color: #f44336; {_BANNER}">
    <h2 style="margin: 0; font-size: 18px;">❌ Email Sending Failed</h2>
  </div>
  <div style="{_PANEL}">
    <p><strong>Error:</strong> {escape(error_message)}</p>
    <p>Please check your email credentials and try again.</p>
  </div>
</div>"""


def _categorical_summary(statistics: Statistics, top_n: int = 5) -> str:
    if not statistics.categorical_stats:
        return "<p>No categorical columns.</p>"
    rows = []
    for column, counts in statistics.categorical_stats.items():
        top = ", ".join(f"{escape(value)} ({count})" for value, count in list(counts.items())[:top_n])
        rows.append(
            f"<tr><td>{escape(column)}</td><td>{len(counts)}</td><td>{top}</td></tr>"
        )
    return (
        "<table><tr><th>Column</th><th>Distinct values</th><th>Most frequent</th></tr>"
        + "".join(rows)
        + "</table>"
    )


def analysis_report(
    statistics: Statistics,
    analysis_html: str,
    plot_links: Sequence[str],
) -> str:
    """Consolidated report; ``plot_links`` are chart paths relative to the report."""
    numeric_json = json.dumps(statistics.to_dict()["numericStats"], indent=2)
    plots = "".join(
        f"""
        <div class="plot">
          <iframe src="{escape(link)}" width="100%" height="400px"></iframe>
        </div>"""
        for link in plot_links
    )
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Data Analysis Report</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 20px; }}
    .container {{ max-width: 1200px; margin: 0 auto; }}
    .stats {{ background: #f5f5f5; padding: 20px; border-radius: 5px; }}
    .plots {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(400px, 1fr)); gap: 20px; }}
    .plot {{ border: 1px solid #ddd; padding: 10px; }}
    table {{ border-collapse: collapse; }}
    td, th {{ border: 1px solid #ddd; padding: 4px 8px; text-align: left; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Data Analysis Report</h1>
    <h2>Dataset Information</h2>
    <div class="stats">
      <p>Rows: {statistics.row_count}</p>
      <p>Columns: {statistics.column_count}</p>
      <h3>Numeric Statistics</h3>
      <pre>{escape(numeric_json)}</pre>
      <h3>Categorical Columns</h3>
      {_categorical_summary(statistics)}
    </div>

    <h2>AI Analysis</h2>
    <div class="analysis">
      {analysis_html}
    </div>

    <h2>Visualizations</h2>
    <div class="plots">{plots}
    </div>
  </div>
</body>
</html>"""


def analysis_complete(
    file_name: str,
    analysis_type: str,
    statistics: Statistics,
    report_path: Path,
    analysis_path: Path,
    plots_dir: Path,
) -> str:
    return f"""<div style="{_WIDE_CARD} background-color: #f9f9f9;">
  <div style="background-color: #4CAF50; {_BANNER}">
    <h2 style="margin: 0; font-size: 18px;">✅ Data Analysis Complete</h2>
  </div>
  <div style="{_PANEL}">
    <p><strong>File Analyzed:</strong> {escape(file_name)}</p>
    <p><strong>Analysis Type:</strong> {escape(analysis_type)}</p>
    <p><strong>Rows Processed:</strong> {statistics.row_count}</p>
    <p><strong>Columns Analyzed:</strong> {statistics.column_count}</p>
    <p><strong>Numeric Columns:</strong> {len(statistics.numeric_stats)}</p>
  </div>
  <div style="background-color: #f0f0f0; padding: 15px; border-radius: 5px; margin-bottom: 15px;">
    <h3 style="margin-top: 0;">Output Files:</h3>
    <ul>
      <li>📊 HTML Report: {escape(str(report_path))}</li>
      <li>📝 Analysis Text: {escape(str(analysis_path))}</li>
      <li>📈 Generated Plots: {escape(str(plots_dir))}</li>
    </ul>
  </div>
  <div style="border-left: 3px solid #4CAF50; padding-left: 15px; margin-top: 15px;">
    <p>The analysis has been saved to the specified directory. Open the HTML report for an interactive view of the results.</p>
  </div>
</div>"""
