"""
Missing-value resolver.

A cell is missing when it is absent, ``""`` or exactly ``"NaN"``.  Callers
that want case-insensitive sentinels must standardise first.

Strategies:
  remove — drop rows with at least one missing cell in ``columns``
  fill   — impute per column from that column's own values, keep every row
  keep   — pass through (also the behaviour for unknown strategy names)
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Sequence

from insightdash.services.cell import cell_text, is_missing, looks_numeric

LOGGER = logging.getLogger(__name__)

FILL_SAMPLE_SIZE = 10
NUMERIC_FILL_VALUE = "0"
EMPTY_COLUMN_FILL_VALUE = "Unknown"

STRATEGY_REMOVE = "remove"
STRATEGY_FILL = "fill"
STRATEGY_KEEP = "keep"


def row_has_missing(row: dict[str, Any], columns: Sequence[str]) -> bool:
    return any(is_missing(row.get(col)) for col in columns)


def count_missing_by_column(
    rows: Sequence[dict[str, Any]], columns: Sequence[str]
) -> dict[str, int]:
    """Per-column missing counts; columns without gaps are left out."""
    counts: dict[str, int] = {}
    for col in columns:
        missing = sum(1 for row in rows if is_missing(row.get(col)))
        if missing > 0:
            counts[col] = missing
    return counts


def infer_fill_value(rows: Sequence[dict[str, Any]], column: str) -> str:
    """
    Pick an imputation value from the first 10 non-missing cells of ``column``.

    No sample        → "Unknown"
    ≥50% numeric     → "0"
    otherwise        → most frequent sampled value (text form; ties go to
                       the value seen first)
    """
    sample: list[Any] = []
    for row in rows:
        value = row.get(column)
        if is_missing(value):
            continue
        sample.append(value)
        if len(sample) == FILL_SAMPLE_SIZE:
            break

    if not sample:
        return EMPTY_COLUMN_FILL_VALUE

    numeric = sum(1 for value in sample if looks_numeric(value))
    if numeric * 2 >= len(sample):
        return NUMERIC_FILL_VALUE

    # Counter keeps insertion order, most_common is stable on ties
    counts = Counter(cell_text(value) for value in sample)
    return counts.most_common(1)[0][0]


def _fill_rows(
    rows: Sequence[dict[str, Any]], columns: Sequence[str]
) -> list[dict[str, Any]]:
    fill_values: dict[str, str] = {}
    filled: list[dict[str, Any]] = []
    for row in rows:
        gaps = [col for col in columns if is_missing(row.get(col))]
        if not gaps:
            filled.append(row)
            continue
        new_row = dict(row)
        for col in gaps:
            if col not in fill_values:
                # inferred from the dataset as received, before any fill
                fill_values[col] = infer_fill_value(rows, col)
            new_row[col] = fill_values[col]
        filled.append(new_row)

    for col, value in fill_values.items():
        LOGGER.debug("Column %r imputed with %r", col, value)
    return filled


def handle_missing_values(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    strategy: str = STRATEGY_REMOVE,
) -> list[dict[str, Any]]:
    """Apply ``strategy`` and return a new list; input rows are never mutated."""
    if strategy == STRATEGY_REMOVE:
        return [row for row in rows if not row_has_missing(row, columns)]
    if strategy == STRATEGY_FILL:
        return _fill_rows(rows, columns)
    return list(rows)
