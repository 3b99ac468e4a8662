"""
Tests for the AI cleaning advisor.  A fake TextGenerator stands in for the
OpenAI endpoint so no network access is needed.
"""

from __future__ import annotations

import pytest

from insightdash.config import settings
from insightdash.services import ai_suggestions
from insightdash.services.ai_suggestions import (
    build_prompt,
    get_ai_cleaning_suggestions,
    get_fallback_suggestions,
)
from insightdash.services.llm import OpenAITextGenerator


class FakeGenerator:
    """Records prompts; returns ``reply`` or raises ``error``."""
    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


COLUMNS = ["a", "b", "c", "d", "e"]

# b, c and d each have one missing cell (d is absent in the second row)
ROWS_WITH_GAPS = [
    {"a": "1", "b": "", "c": None, "d": "x", "e": "y"},
    {"a": "2", "b": "z", "c": "w", "e": "y"},
]

CLEAN_ROWS = [{"a": "1", "b": "2", "c": "3", "d": "4", "e": "5"}]


# ─────────────────────────────────────────────────────────────────────────────
# Fallback
# ─────────────────────────────────────────────────────────────────────────────

class TestFallback:
    def test_missing_columns_reported(self):
        result = get_fallback_suggestions(ROWS_WITH_GAPS, COLUMNS)
        assert result.issues == ["Missing values in 3 columns"]
        assert result.suggestions == ["Fill or remove 3 missing values"]
        assert result.priority == "medium"
        assert result.estimated_time == "1-2 minutes"
        assert result.confidence == 70

    def test_no_missing_is_low_priority(self):
        result = get_fallback_suggestions(CLEAN_ROWS, COLUMNS)
        assert result.issues == []
        assert result.suggestions == []
        assert result.priority == "low"

    def test_remote_failure_uses_fallback(self):
        generator = FakeGenerator(error=ConnectionError("offline"))
        result = get_ai_cleaning_suggestions(ROWS_WITH_GAPS, COLUMNS, generator=generator)
        assert len(result.issues) == 1
        assert "3" in result.issues[0]
        assert result.priority == "medium"
        assert result.confidence == 70

    def test_any_exception_is_swallowed(self):
        generator = FakeGenerator(error=RuntimeError("unexpected"))
        result = get_ai_cleaning_suggestions(CLEAN_ROWS, COLUMNS, generator=generator)
        assert result.priority == "low"

    def test_reply_without_json(self):
        generator = FakeGenerator(reply="I could not analyse this dataset.")
        result = get_ai_cleaning_suggestions(ROWS_WITH_GAPS, COLUMNS, generator=generator)
        assert result.confidence == 70

    def test_reply_with_wrong_shape(self):
        generator = FakeGenerator(reply='{"issues": "not a list"}')
        result = get_ai_cleaning_suggestions(ROWS_WITH_GAPS, COLUMNS, generator=generator)
        assert result.confidence == 70

    def test_unconfigured_openai_falls_back(self, monkeypatch):
        monkeypatch.setattr(
            ai_suggestions, "get_text_generator", lambda: OpenAITextGenerator(api_key="")
        )
        result = get_ai_cleaning_suggestions(ROWS_WITH_GAPS, COLUMNS)
        assert result.confidence == 70

    def test_disabled_setting_skips_remote_call(self, monkeypatch):
        monkeypatch.setattr(settings, "AI_SUGGESTIONS_ENABLED", False)
        generator = FakeGenerator(reply="{}")
        result = get_ai_cleaning_suggestions(ROWS_WITH_GAPS, COLUMNS, generator=generator)
        assert generator.prompts == []
        assert result.confidence == 70


# ─────────────────────────────────────────────────────────────────────────────
# Remote path
# ─────────────────────────────────────────────────────────────────────────────

class TestRemoteSuggestions:
    def test_json_embedded_in_prose(self):
        reply = (
            "Here is my review:\n```json\n"
            '{"issues": ["Duplicate rows"], "suggestions": ["Deduplicate on id"], '
            '"priority": "High", "estimatedTime": "5 minutes"}\n```\nHope this helps!'
        )
        result = get_ai_cleaning_suggestions(CLEAN_ROWS, COLUMNS, generator=FakeGenerator(reply=reply))
        assert result.issues == ["Duplicate rows"]
        assert result.suggestions == ["Deduplicate on id"]
        assert result.priority == "high"
        assert result.estimated_time == "5 minutes"
        assert result.confidence == 85

    def test_confidence_from_reply(self):
        reply = '{"issues": [], "suggestions": [], "priority": "low", "estimatedTime": "1 minute", "confidence": 60}'
        result = get_ai_cleaning_suggestions(CLEAN_ROWS, COLUMNS, generator=FakeGenerator(reply=reply))
        assert result.confidence == 60

    def test_out_of_range_confidence_rejected(self):
        reply = '{"issues": [], "suggestions": [], "priority": "low", "estimatedTime": "1 minute", "confidence": 300}'
        result = get_ai_cleaning_suggestions(CLEAN_ROWS, COLUMNS, generator=FakeGenerator(reply=reply))
        assert result.confidence == 70


class TestPrompt:
    def test_columns_and_five_row_sample(self):
        rows = [{"id": i} for i in range(10)]
        prompt = build_prompt(rows, ["id", "name"])
        assert "id, name" in prompt
        assert '"id": 4' in prompt
        assert '"id": 5' not in prompt

    def test_prompt_sent_once(self):
        generator = FakeGenerator(error=TimeoutError())
        get_ai_cleaning_suggestions(CLEAN_ROWS, COLUMNS, generator=generator)
        assert len(generator.prompts) == 1

    @pytest.mark.parametrize("rows", [[], [{"a": object()}]])
    def test_unusual_rows_still_answered(self, rows):
        result = get_ai_cleaning_suggestions(rows, ["a"], generator=FakeGenerator(reply="no"))
        assert result.priority in {"low", "medium"}
