"""
Upload parsing — turns an uploaded CSV / Excel / JSON file into records.

CSV cells stay text (no NA inference), matching what the dashboard's
browser parser produced; Excel keeps the sheet's native numbers.
Rows with no value in any field are dropped.
"""

from __future__ import annotations

import io
import json
import logging
import os
import zipfile
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from insightdash.config import settings

LOGGER = logging.getLogger(__name__)

FILE_TYPES = {
    ".csv": "csv",
    ".xlsx": "xlsx",
    ".xls": "xls",
    ".json": "json",
}


class InputShapeError(ValueError):
    """The uploaded file cannot be turned into a list of records."""


@dataclass
class ParsedDataset:
    file_type: str
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)


def validate_upload(filename: str, file_size: int) -> dict:
    file_ext = os.path.splitext(filename or "")[1].lower()

    if file_ext not in FILE_TYPES:
        return {
            "valid": False,
            "error": f"File type '{file_ext}' not allowed. Only CSV, Excel and JSON files accepted.",
            "file_type": None,
            "file_size": file_size,
        }

    max_size = settings.MAX_UPLOAD_MB * 1024 * 1024
    if file_size > max_size:
        return {
            "valid": False,
            "error": f"File too large ({file_size / 1024 / 1024:.1f}MB). Maximum {settings.MAX_UPLOAD_MB}MB.",
            "file_type": None,
            "file_size": file_size,
        }

    return {"valid": True, "error": None, "file_type": FILE_TYPES[file_ext], "file_size": file_size}


# ─────────────────────────────────────────────────────────────────────────────
# Format readers
# ─────────────────────────────────────────────────────────────────────────────

def _to_native(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, (pd.Timestamp, datetime)):
        if value.hour == value.minute == value.second == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _frame_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    records = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    return [{str(k): _to_native(v) for k, v in record.items()} for record in records]


def _read_csv(content: bytes) -> tuple[list[str], list[dict[str, Any]]]:
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as exc:
        raise InputShapeError("No valid data found in the file") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise InputShapeError(f"Error parsing file: {exc}") from exc
    return [str(c) for c in df.columns], _frame_to_records(df)


def _read_excel(content: bytes) -> tuple[list[str], list[dict[str, Any]]]:
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0)
    except (ValueError, zipfile.BadZipFile) as exc:
        raise InputShapeError(f"Error parsing file: {exc}") from exc
    return [str(c) for c in df.columns], _frame_to_records(df)


def _read_json(content: bytes) -> tuple[list[str], list[dict[str, Any]]]:
    try:
        data = json.loads(content.decode("utf-8-sig"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputShapeError(f"Error parsing file: {exc}") from exc

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise InputShapeError("JSON file should contain an array of objects")
    columns = list(data[0].keys()) if data else []
    return columns, data


_READERS = {
    "csv": _read_csv,
    "xlsx": _read_excel,
    "xls": _read_excel,
    "json": _read_json,
}


def _has_any_value(row: dict[str, Any]) -> bool:
    return any(value is not None and value != "" for value in row.values())


def parse_upload(filename: str, content: bytes) -> ParsedDataset:
    """Parse an uploaded file; raises InputShapeError on unusable input."""
    validation = validate_upload(filename, len(content))
    if not validation["valid"]:
        raise InputShapeError(validation["error"])

    file_type = validation["file_type"]
    columns, rows = _READERS[file_type](content)
    rows = [row for row in rows if _has_any_value(row)]
    if not rows:
        raise InputShapeError("No valid data found in the file")

    LOGGER.info("Parsed %s: %d rows × %d columns", filename, len(rows), len(columns))
    return ParsedDataset(file_type=file_type, columns=columns, rows=rows)
