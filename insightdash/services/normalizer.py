"""
Type / value normalizer.

Two passes, both per cell and restricted to the declared columns:

  standardize_values   — trim, canonical booleans ("True"/"False"),
                         null tokens → ""
  validate_data_types  — number → bool → ISO date → unchanged,
                         first matching rule wins
"""

from __future__ import annotations

from typing import Any, Sequence

from insightdash.services.cell import (
    cell_kind,
    cell_text,
    coerce_boolean,
    coerce_iso_date,
    coerce_number,
)

TRUE_TOKENS = {"true", "1"}
FALSE_TOKENS = {"false", "0"}
NULL_TOKENS = {"null", "nan"}

CANONICAL_TRUE = "True"
CANONICAL_FALSE = "False"


def standardize_value(value: Any) -> Any:
    """Standardise one cell; non-strings are returned untouched."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    lowered = text.lower()
    if lowered in TRUE_TOKENS:
        return CANONICAL_TRUE
    if lowered in FALSE_TOKENS:
        return CANONICAL_FALSE
    if lowered in NULL_TOKENS:
        return ""
    return text


def coerce_value(value: Any) -> Any:
    """Infer and convert the type of one cell."""
    if value is None or value == "" or isinstance(value, bool):
        return value

    number = coerce_number(value)
    if number is not None:
        return number

    flag = coerce_boolean(value)
    if flag is not None:
        return flag

    iso = coerce_iso_date(value)
    if iso is not None:
        return iso

    return value


def _map_cells(rows: Sequence[dict[str, Any]], columns: Sequence[str], func) -> list[dict[str, Any]]:
    mapped = []
    for row in rows:
        new_row = dict(row)
        for col in columns:
            if col in new_row:
                new_row[col] = func(new_row[col])
        mapped.append(new_row)
    return mapped


def standardize_values(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> list[dict[str, Any]]:
    return _map_cells(rows, columns, standardize_value)


def validate_data_types(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> list[dict[str, Any]]:
    return _map_cells(rows, columns, coerce_value)


# ─────────────────────────────────────────────────────────────────────────────
# Change counters  (before/after must be aligned row-for-row)
# ─────────────────────────────────────────────────────────────────────────────

def count_changed_cells(
    before: Sequence[dict[str, Any]],
    after: Sequence[dict[str, Any]],
    columns: Sequence[str],
) -> int:
    """Cells whose rendered text differs between two aligned datasets."""
    changed = 0
    for old, new in zip(before, after):
        for col in columns:
            if cell_text(old.get(col)) != cell_text(new.get(col)):
                changed += 1
    return changed


def count_kind_changes(
    before: Sequence[dict[str, Any]],
    after: Sequence[dict[str, Any]],
    columns: Sequence[str],
) -> int:
    """Cells whose variant (text / number / boolean / ISO date) changed."""
    changed = 0
    for old, new in zip(before, after):
        for col in columns:
            if cell_kind(old.get(col)) is not cell_kind(new.get(col)):
                changed += 1
    return changed
