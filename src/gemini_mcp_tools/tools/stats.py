"""Summary statistics and histogram binning for loaded tables.

Column typing follows the first row: a column whose first-row value is a
number is numeric for the whole table, and rows whose value for it cannot
be read as a finite number are left out of its aggregates. Every other column is
summarized as value frequencies.
"""

from __future__ import annotations

import math
import statistics
from typing import Any, Sequence

from ..exceptions import ParseError
from ..types import DataRow, Histogram, NumericStats, Statistics

MAX_BINS = 20


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce_float(value: Any) -> float | None:
    if _is_number(value):
        number = float(value)
    elif isinstance(value, str):
        txt = value.strip()
        if not txt:
            return None
        try:
            number = float(txt)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def column_names(rows: Sequence[DataRow]) -> list[str]:
    """All column names in order of first appearance."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def numeric_columns(rows: Sequence[DataRow]) -> list[str]:
    """Columns whose value in the first row is numeric."""
    if not rows:
        return []
    return [column for column, value in rows[0].items() if _is_number(value)]


def column_values(rows: Sequence[DataRow], column: str) -> list[float]:
    """Numeric values of ``column``.

    Missing cells, cells that do not read as a number and non-finite values
    (``nan``, ``inf``, ``1e999``) are skipped.
    """
    values = []
    for row in rows:
        number = _coerce_float(row.get(column))
        if number is not None:
            values.append(number)
    return values


def numeric_stats(values: Sequence[float]) -> NumericStats:
    """Mean, median, population std, min and max of a non-empty sequence."""
    if not values:
        raise ValueError("numeric_stats requires at least one value")
    return NumericStats(
        mean=statistics.fmean(values),
        median=statistics.median(values),
        std=statistics.pstdev(values),
        min=min(values),
        max=max(values),
    )


def value_counts(rows: Sequence[DataRow], column: str) -> dict[str, int]:
    """Frequency of each value of ``column``, most common first."""
    counts: dict[str, int] = {}
    for row in rows:
        if column not in row:
            continue
        key = str(row[column])
        counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: -item[1]))


def summarize(rows: Sequence[DataRow]) -> Statistics:
    """Compute table statistics.

    Args:
        rows: Table rows in source order

    Returns:
        Statistics with numeric summaries for numeric columns and value
        frequencies for the rest

    Raises:
        ParseError: If the table has no rows
    """
    if not rows:
        raise ParseError("<table>", "the table has no data rows")

    columns = column_names(rows)
    numeric = numeric_columns(rows)

    result = Statistics(row_count=len(rows), column_count=len(columns))
    for column in numeric:
        values = column_values(rows, column)
        if values:
            result.numeric_stats[column] = numeric_stats(values)

    for column in columns:
        if column not in result.numeric_stats:
            result.categorical_stats[column] = value_counts(rows, column)

    return result


def histogram(values: Sequence[float], max_bins: int = MAX_BINS) -> Histogram:
    """Bin values into equal-width bins.

    The bin count is ``min(max_bins, floor(sqrt(n)))``. A value goes to bin
    ``floor((v - min) / width)`` clamped to the last bin, so the maximum
    always lands in the last bin. With no values there are no bins; when all
    values are equal the width is zero and everything goes into one bin.
    """
    if not values:
        return Histogram(edges=[], counts=[], bin_width=0.0)

    low = min(values)
    high = max(values)
    bin_count = max(1, min(max_bins, math.isqrt(len(values))))
    width = (high - low) / bin_count

    if width == 0:
        return Histogram(edges=[low], counts=[len(values)], bin_width=0.0)

    counts = [0] * bin_count
    for value in values:
        index = min(bin_count - 1, math.floor((value - low) / width))
        counts[index] += 1

    edges = [low + i * width for i in range(bin_count)]
    return Histogram(edges=edges, counts=counts, bin_width=width)
