"""
CSV export of cleaned rows.

Default output reproduces the dashboard download byte for byte:
unquoted header, every cell wrapped in double quotes, falsy cells (None,
"", 0, False, NaN) written empty, "\\n" line breaks, no trailing newline.
Embedded quotes are NOT escaped in that mode, so a value containing `"`
yields a malformed row.  ``escape_quotes=True`` doubles embedded quotes
and writes 0 / False literally.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from insightdash.services.cell import cell_text


def _legacy_cell(value: Any) -> str:
    # NaN is falsy for the dashboard as well
    if isinstance(value, float) and math.isnan(value):
        value = None
    return f'"{cell_text(value or "")}"'


def _escaped_cell(value: Any) -> str:
    text = cell_text(value).replace('"', '""')
    return f'"{text}"'


def export_csv(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    escape_quotes: bool = False,
) -> str:
    render = _escaped_cell if escape_quotes else _legacy_cell
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(render(row.get(col)) for col in columns))
    return "\n".join(lines)
