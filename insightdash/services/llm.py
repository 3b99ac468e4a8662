"""
LLM plumbing shared by the advisory and analysis services.

The remote model is an unreliable collaborator: callers go through the
``TextGenerator`` protocol so tests and alternative providers can replace
the OpenAI-backed default, and every caller keeps its own local fallback.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any, Protocol

from openai import OpenAI

from insightdash.config import settings

_FENCE = re.compile(r"```[a-z]*\n?")


class AIUnavailableError(RuntimeError):
    """The text endpoint cannot be used (not configured, or disabled)."""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class OpenAITextGenerator:
    """Single-shot chat completion, no retries."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        timeout: float = 30.0,
        temperature: float = 0.3,
        max_tokens: int = 1200,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client: OpenAI | None = None

    @property
    def client(self) -> OpenAI:
        if not self.api_key:
            raise AIUnavailableError("OPENAI_API_KEY is not configured")
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def generate(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        content = response.choices[0].message.content
        if not content:
            raise AIUnavailableError("Empty completion returned")
        return content


@lru_cache()
def get_text_generator() -> TextGenerator:
    return OpenAITextGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
    )


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Return the first JSON object embedded in a model reply.

    Markdown fences are stripped, then decoding is attempted at each ``{``
    until one parses as a complete object; surrounding prose is ignored.
    Raises ValueError when the reply contains no decodable object.
    """
    clean = _FENCE.sub("", text)
    decoder = json.JSONDecoder()
    start = clean.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(clean, start)
        except json.JSONDecodeError:
            start = clean.find("{", start + 1)
            continue
        return obj
    raise ValueError("No JSON object found in model reply")
