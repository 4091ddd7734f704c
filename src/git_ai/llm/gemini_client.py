"""
Client for the Google Gemini ``generateContent`` REST endpoint.

Unlike the other hosted backends, the API key travels as the ``key``
URL query parameter rather than in a header.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from git_ai.llm.base import GenerationBackend, GenerationLimits, extract_text, strip_thinking_tags


DEFAULT_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-1.5-flash"


@dataclass
class GeminiClient(GenerationBackend):
    api_key: str
    model: str = DEFAULT_MODEL
    url: Optional[str] = None
    request_timeout: Optional[float] = None

    name = "Gemini"

    def _endpoint(self) -> str:
        return self.url or os.environ.get("GEMINI_URL") or DEFAULT_URL_TEMPLATE.format(model=self.model)

    def generate(self, prompt: str, limits: GenerationLimits) -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"maxOutputTokens": limits.max_output_tokens},
        }
        data = self._post_json(
            self._endpoint(),
            payload,
            params={"key": self.api_key},
            timeout=self.request_timeout,
        )
        return strip_thinking_tags(extract_text(data, ["candidates", 0, "content", "parts", 0, "text"]))
