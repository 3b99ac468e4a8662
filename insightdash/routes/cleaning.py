from __future__ import annotations

import io

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from insightdash.config import settings
from insightdash.schemas.cleaning import (
    AdvisorySuggestion,
    CleaningResult,
    CleanRequest,
    DatasetRequest,
    EmailValidationReport,
    EmailValidationRequest,
    ExportRequest,
)
from insightdash.services.ai_suggestions import get_ai_cleaning_suggestions
from insightdash.services.cleaning import DataCleaningError, clean_dataset
from insightdash.services.export import export_csv
from insightdash.services.validation import validate_email_column

router = APIRouter(prefix="/cleaning", tags=["cleaning"])


# ─────────────────────────────────────────────────────────────────────────────
# Clean
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/clean", response_model=CleaningResult)
def clean(payload: CleanRequest):
    """Run the cleaning pipeline over the posted rows."""
    try:
        return clean_dataset(payload.rows, payload.columns, payload.options)
    except DataCleaningError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ─────────────────────────────────────────────────────────────────────────────
# AI suggestions
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/suggestions", response_model=AdvisorySuggestion)
def suggestions(payload: DatasetRequest):
    """Cleaning recommendations; falls back to local rules, never errors."""
    return get_ai_cleaning_suggestions(payload.rows, payload.columns)


# ─────────────────────────────────────────────────────────────────────────────
# Email validation
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/validate-email", response_model=EmailValidationReport)
def validate_email(payload: EmailValidationRequest):
    return validate_email_column(payload.rows, payload.column)


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/export")
def export(payload: ExportRequest):
    escape_quotes = (
        settings.CSV_ESCAPE_QUOTES if payload.escape_quotes is None else payload.escape_quotes
    )
    csv_bytes = export_csv(payload.rows, payload.columns, escape_quotes=escape_quotes).encode("utf-8")
    return StreamingResponse(
        io.BytesIO(csv_bytes),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="cleaned_data.csv"'},
    )
