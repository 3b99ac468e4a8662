"""Tests for the shared LLM helpers: JSON extraction and the OpenAI generator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from insightdash.services.llm import AIUnavailableError, OpenAITextGenerator, extract_json_object


def fake_completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_markdown_fences_stripped(self):
        assert extract_json_object('```json\n{"a": [1, 2]}\n```') == {"a": [1, 2]}

    def test_prose_around_object(self):
        reply = 'Sure! Here you go: {"priority": "low"} Let me know.'
        assert extract_json_object(reply) == {"priority": "low"}

    def test_first_object_wins(self):
        assert extract_json_object('{"a": 1} and {"b": 2}') == {"a": 1}

    def test_stray_brace_skipped(self):
        assert extract_json_object('use {braces} like {"ok": true}') == {"ok": True}

    def test_nested_object_kept_whole(self):
        assert extract_json_object('{"outer": {"inner": 1}}') == {"outer": {"inner": 1}}

    @pytest.mark.parametrize("reply", ["", "no json here", "{not json", "[1, 2, 3]"])
    def test_no_object_raises(self, reply):
        with pytest.raises(ValueError):
            extract_json_object(reply)


class TestOpenAITextGenerator:
    def test_missing_key_is_unavailable(self):
        generator = OpenAITextGenerator(api_key="")
        with pytest.raises(AIUnavailableError):
            generator.generate("hello")

    def test_returns_message_content(self):
        generator = OpenAITextGenerator(api_key="sk-test", model="gpt-test")
        client = MagicMock()
        client.chat.completions.create.return_value = fake_completion('{"a": 1}')
        generator._client = client

        assert generator.generate("prompt text") == '{"a": 1}'
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt text"}]

    def test_empty_content_is_unavailable(self):
        generator = OpenAITextGenerator(api_key="sk-test")
        client = MagicMock()
        client.chat.completions.create.return_value = fake_completion(None)
        generator._client = client

        with pytest.raises(AIUnavailableError):
            generator.generate("prompt")

    def test_client_errors_propagate(self):
        generator = OpenAITextGenerator(api_key="sk-test")
        client = MagicMock()
        client.chat.completions.create.side_effect = ConnectionError("down")
        generator._client = client

        with pytest.raises(ConnectionError):
            generator.generate("prompt")
