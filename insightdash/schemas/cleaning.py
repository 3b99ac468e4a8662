from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class CleaningOptions(BaseModel):
    remove_duplicates: bool = True
    # remove | fill | keep — anything else behaves like keep
    missing_value_strategy: str = Field(
        default="remove",
        validation_alias=AliasChoices(
            "missingValueStrategy", "missing_value_strategy", "handleMissingValues"
        ),
    )
    standardize_values: bool = True
    validate_types: bool = True

    model_config = {**_CAMEL, "frozen": True}


class CleaningReport(BaseModel):
    removed_duplicates: int = 0
    filled_missing_values: int = 0
    standardized_values: int = 0
    corrected_data_types: int = 0
    validation_errors: list[dict[str, Any]] = Field(default_factory=list)

    model_config = _CAMEL


class CleaningResult(BaseModel):
    original_count: int
    cleaned_data: list[dict[str, Any]]
    final_count: int
    quality_score: int
    cleaning_report: CleaningReport

    model_config = _CAMEL


class AdvisorySuggestion(BaseModel):
    issues: list[str]
    suggestions: list[str]
    priority: Literal["low", "medium", "high"]
    estimated_time: str
    confidence: int = Field(default=85, ge=0, le=100)

    model_config = _CAMEL

    @field_validator("priority", mode="before")
    @classmethod
    def _lower_priority(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class EmailCheck(BaseModel):
    email: str
    valid: bool
    suggestion: Optional[str] = None


class EmailValidationReport(BaseModel):
    valid_count: int
    invalid_count: int
    details: list[EmailCheck]

    model_config = _CAMEL


# ─────────────────────────────────────────────────────────────────────────────
# Request bodies
# ─────────────────────────────────────────────────────────────────────────────

class CleanRequest(BaseModel):
    rows: list[dict[str, Any]]
    columns: list[str]
    options: CleaningOptions = Field(default_factory=CleaningOptions)


class DatasetRequest(BaseModel):
    rows: list[dict[str, Any]]
    columns: list[str]


class ExportRequest(BaseModel):
    rows: list[dict[str, Any]]
    columns: list[str]
    escape_quotes: Optional[bool] = None

    model_config = _CAMEL


class EmailValidationRequest(BaseModel):
    rows: list[dict[str, Any]]
    column: str
