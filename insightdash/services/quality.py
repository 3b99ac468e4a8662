"""Quality score calculator — produces a composite score from a cleaning report."""

from __future__ import annotations

import math
from typing import Optional

from insightdash.schemas.cleaning import CleaningReport

WEIGHTS = {
    "duplicates": 0.3,
    "missing": 0.4,
    "standardization": 0.2,
    "types": 0.1,
}

# Binary penalty applied as soon as any cell had to be imputed
FILLED_MISSING_SCORE = 0.7


def calculate_quality_score(
    report: CleaningReport,
    original_count: int,
    field_count: Optional[int] = None,
) -> int:
    """
    Composite quality score, nominally 0–100, weighted across 4 dimensions:

    Duplicates       30% — share of original rows that were not duplicates
    Missing          40% — 1.0, or 0.7 once anything was filled
    Standardization  20% — 1 − standardized cells / (rows × field_count)
    Types            10% — 1 − corrected cells / (rows × field_count)

    ``field_count`` defaults to the number of report fields, which is what
    the dashboard historically divided by.  The pipeline passes the column
    count instead.  The result is not clamped: very large counts can push
    it below 0, use ``clamp_score`` for display.
    """
    if original_count <= 0:
        return 100

    if field_count is None:
        field_count = len(CleaningReport.model_fields)
    cells = original_count * max(field_count, 1)

    duplicate_score = 1 - report.removed_duplicates / original_count
    missing_score = FILLED_MISSING_SCORE if report.filled_missing_values > 0 else 1.0
    standardization_score = 1 - report.standardized_values / cells
    type_score = 1 - report.corrected_data_types / cells

    score = (
        duplicate_score * WEIGHTS["duplicates"]
        + missing_score * WEIGHTS["missing"]
        + standardization_score * WEIGHTS["standardization"]
        + type_score * WEIGHTS["types"]
    )
    # half-up, round() would take 98.5 down to 98
    return int(math.floor(score * 100 + 0.5))


def clamp_score(score: float) -> int:
    return int(min(max(score, 0), 100))
