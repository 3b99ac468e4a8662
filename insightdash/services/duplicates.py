"""Duplicate eliminator — first-seen-wins over a composite key."""

from __future__ import annotations

from typing import Any, Sequence

from insightdash.services.cell import cell_text

KEY_SEPARATOR = "|"


def composite_key(row: dict[str, Any], key_columns: Sequence[str]) -> str:
    return KEY_SEPARATOR.join(cell_text(row.get(col)) for col in key_columns)


def remove_duplicates(
    rows: Sequence[dict[str, Any]], key_columns: Sequence[str]
) -> list[dict[str, Any]]:
    """
    Keep the first row for each composite key, drop later ones.

    Absent fields render as "" and take part in the key like any value.
    Fields outside ``key_columns`` are ignored, so ``key_columns`` must be
    wide enough to tell truly distinct records apart; rows that differ only
    in other fields collapse into the first one.
    """
    seen: set[str] = set()
    unique: list[dict[str, Any]] = []
    for row in rows:
        key = composite_key(row, key_columns)
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique
