"""
AI Analysis Service — asks the LLM for narrative insights about a dataset:
key insights, recommended chart types, notable patterns and business
recommendations.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from insightdash.schemas.analysis import DataAnalysis
from insightdash.services.llm import TextGenerator, extract_json_object, get_text_generator

LOGGER = logging.getLogger(__name__)

# Reply arrived but carried no JSON object
DEFAULT_ANALYSIS = DataAnalysis(
    insights=["Data analyzed successfully"],
    recommended_charts=["bar", "line", "pie"],
    patterns=["Patterns detected in the data"],
    recommendations=["Consider further analysis"],
)

# Request or decoding failed
UNAVAILABLE_ANALYSIS = DataAnalysis(
    insights=["AI analysis temporarily unavailable"],
    recommended_charts=["bar", "line"],
    patterns=[],
    recommendations=[],
)


def build_prompt(rows: Sequence[dict[str, Any]], columns: Sequence[str]) -> str:
    sample_text = json.dumps(list(rows[:5]), default=str, indent=2)

    return f"""You are a data analyst reviewing a dataset with columns: {", ".join(columns)}.

Sample data (first 5 rows):
{sample_text}

Provide:
1. Key insights about the data
2. Recommended chart types with explanations
3. Notable patterns or anomalies
4. Business recommendations

Return ONLY valid JSON in this exact format:
{{
  "insights": ["array of insights"],
  "recommendedCharts": ["chart type names"],
  "patterns": ["pattern descriptions"],
  "recommendations": ["business recommendations"]
}}"""


def analyze_data_with_ai(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    generator: Optional[TextGenerator] = None,
) -> DataAnalysis:
    """Narrative analysis of a dataset sample. Never raises."""
    try:
        generator = generator or get_text_generator()
        reply = generator.generate(build_prompt(rows, columns))
    except Exception:
        LOGGER.warning("AI analysis request failed", exc_info=True)
        return UNAVAILABLE_ANALYSIS.model_copy(deep=True)

    try:
        payload = extract_json_object(reply)
    except ValueError:
        LOGGER.info("AI analysis reply had no JSON object, using default analysis")
        return DEFAULT_ANALYSIS.model_copy(deep=True)

    try:
        return DataAnalysis.model_validate(payload)
    except ValidationError as exc:
        LOGGER.warning("AI analysis reply had unexpected shape: %s", exc)
        return UNAVAILABLE_ANALYSIS.model_copy(deep=True)
