"""
AI Cleaning Advisor — asks the LLM for data-cleaning recommendations.

Advisory only: the caller always gets a well-formed AdvisorySuggestion.
Any failure on the remote path (not configured, network, no JSON in the
reply, wrong shape) is logged and replaced by rule-based suggestions.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from insightdash.config import settings
from insightdash.schemas.cleaning import AdvisorySuggestion
from insightdash.services.llm import (
    AIUnavailableError,
    TextGenerator,
    extract_json_object,
    get_text_generator,
)
from insightdash.services.missing import count_missing_by_column

LOGGER = logging.getLogger(__name__)

FALLBACK_ESTIMATED_TIME = "1-2 minutes"
FALLBACK_CONFIDENCE = 70


def build_prompt(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> str:
    columns_text = ", ".join(columns)
    sample_text = json.dumps(list(rows[:5]), default=str, indent=2)

    return f"""You are a data quality analyst reviewing an uploaded dataset.

Dataset columns: {columns_text}
Sample data (first 5 rows):
{sample_text}

Identify the data quality issues in this dataset and the specific cleaning actions to fix them.

Return ONLY valid JSON in this exact format:
{{
  "issues": ["list of data quality issues"],
  "suggestions": ["specific cleaning actions"],
  "priority": "high|medium|low",
  "estimatedTime": "estimated cleaning time",
  "confidence": 85
}}"""


def get_fallback_suggestions(
    rows: Sequence[dict[str, Any]], columns: Sequence[str]
) -> AdvisorySuggestion:
    """Rule-based suggestions from per-column missing counts."""
    issues: list[str] = []
    suggestions: list[str] = []

    missing_counts = count_missing_by_column(rows, columns)
    if missing_counts:
        issues.append(f"Missing values in {len(missing_counts)} columns")
        suggestions.append(f"Fill or remove {sum(missing_counts.values())} missing values")

    return AdvisorySuggestion(
        issues=issues,
        suggestions=suggestions,
        priority="medium" if issues else "low",
        estimated_time=FALLBACK_ESTIMATED_TIME,
        confidence=FALLBACK_CONFIDENCE,
    )


def get_ai_cleaning_suggestions(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    generator: Optional[TextGenerator] = None,
) -> AdvisorySuggestion:
    """Remote suggestions when available, otherwise the local fallback. Never raises."""
    try:
        if not settings.AI_SUGGESTIONS_ENABLED:
            raise AIUnavailableError("AI suggestions are disabled")
        generator = generator or get_text_generator()
        reply = generator.generate(build_prompt(rows, columns))
        return AdvisorySuggestion.model_validate(extract_json_object(reply))
    except (AIUnavailableError, ValueError, ValidationError) as exc:
        LOGGER.warning("AI suggestions unavailable, using fallback: %s", exc)
    except Exception:
        LOGGER.warning("AI suggestions request failed, using fallback", exc_info=True)
    return get_fallback_suggestions(rows, columns)
