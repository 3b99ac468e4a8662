"""
DataCleaningPipeline — 4-stage data cleaning service.

Stage 1: Deduplication          (remove_duplicates, gated by options.remove_duplicates)
Stage 2: Missing-data handling  (handle_missing_values, strategy from options)
Stage 3: Value standardisation  (standardize_values, if enabled)
Stage 4: Type validation        (validate_data_types, if enabled)
Then:    Quality score          (calculate_quality_score)

Each stage takes the current dataset and replaces it with a new list; the
caller's rows are never modified.  Any failure aborts the whole run with a
DataCleaningError; there are no partial results.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from insightdash.schemas.cleaning import CleaningOptions, CleaningReport, CleaningResult
from insightdash.services import duplicates, missing, normalizer
from insightdash.services.quality import calculate_quality_score

LOGGER = logging.getLogger(__name__)


class DataCleaningError(RuntimeError):
    """Raised when any cleaning stage fails; wraps the underlying error."""


def _snapshot_rows(rows: Any) -> list[dict[str, Any]]:
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise TypeError(f"rows must be a list of records, got {type(rows).__name__}")
    snapshot = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise TypeError(f"row {index} is {type(row).__name__}, expected a record")
        snapshot.append(dict(row))
    return snapshot


def _check_columns(columns: Any) -> list[str]:
    if isinstance(columns, (str, bytes)) or not isinstance(columns, Sequence):
        raise TypeError(f"columns must be a list of names, got {type(columns).__name__}")
    for col in columns:
        if not isinstance(col, str):
            raise TypeError(f"column name {col!r} is not a string")
    return list(columns)


class DataCleaningPipeline:
    def __init__(
        self,
        rows: Sequence[Mapping[str, Any]],
        columns: Sequence[str],
        options: Optional[CleaningOptions] = None,
    ):
        self.columns = _check_columns(columns)
        self.rows = _snapshot_rows(rows)
        self.options = options or CleaningOptions()
        self.original_count = len(self.rows)
        self.report = CleaningReport()

    # ─────────────────────────────────────────────────────────────────
    # Stages
    # ─────────────────────────────────────────────────────────────────

    def remove_duplicates(self) -> int:
        """Drop rows whose composite key over all columns was already seen."""
        if not self.options.remove_duplicates:
            LOGGER.info("Duplicate removal disabled, %d rows kept", len(self.rows))
            return 0
        before = len(self.rows)
        self.rows = duplicates.remove_duplicates(self.rows, self.columns)
        removed = before - len(self.rows)
        self.report.removed_duplicates = removed
        LOGGER.info("Duplicates removed: %d", removed)
        return removed

    def handle_missing_values(self) -> int:
        """Remove, fill or keep rows with missing cells; returns cells filled."""
        strategy = self.options.missing_value_strategy
        before = self.rows
        self.rows = missing.handle_missing_values(before, self.columns, strategy)

        filled = 0
        if strategy == missing.STRATEGY_FILL:
            filled = normalizer.count_changed_cells(before, self.rows, self.columns)
        self.report.filled_missing_values = filled
        LOGGER.info(
            "Missing values handled with %r: %d rows dropped, %d cells filled",
            strategy,
            len(before) - len(self.rows),
            filled,
        )
        return filled

    def standardize_values(self) -> int:
        before = self.rows
        self.rows = normalizer.standardize_values(before, self.columns)
        changed = normalizer.count_changed_cells(before, self.rows, self.columns)
        self.report.standardized_values = changed
        LOGGER.info("Values standardised: %d", changed)
        return changed

    def validate_data_types(self) -> int:
        before = self.rows
        self.rows = normalizer.validate_data_types(before, self.columns)
        corrected = normalizer.count_kind_changes(before, self.rows, self.columns)
        self.report.corrected_data_types = corrected
        LOGGER.info("Data types corrected: %d", corrected)
        return corrected

    # ─────────────────────────────────────────────────────────────────
    # Run full pipeline
    # ─────────────────────────────────────────────────────────────────

    def run_all(self) -> CleaningResult:
        """Execute all stages in sequence and score the result."""
        self.remove_duplicates()
        self.handle_missing_values()
        if self.options.standardize_values:
            self.standardize_values()
        if self.options.validate_types:
            self.validate_data_types()

        score = calculate_quality_score(
            self.report, self.original_count, field_count=len(self.columns)
        )
        LOGGER.info(
            "Cleaning finished: %d → %d rows, quality score %d",
            self.original_count,
            len(self.rows),
            score,
        )
        return CleaningResult(
            original_count=self.original_count,
            cleaned_data=self.rows,
            final_count=len(self.rows),
            quality_score=score,
            cleaning_report=self.report,
        )


def clean_dataset(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
    options: Optional[CleaningOptions] = None,
) -> CleaningResult:
    """Public entry point: clean ``rows`` over ``columns`` or raise DataCleaningError."""
    try:
        return DataCleaningPipeline(rows, columns, options).run_all()
    except Exception as exc:
        LOGGER.exception("Data cleaning error")
        raise DataCleaningError(f"Data cleaning failed: {exc}") from exc
