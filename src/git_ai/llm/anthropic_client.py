"""
Client for the Anthropic messages API (``x-api-key`` header auth).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from git_ai.llm.base import GenerationBackend, GenerationLimits, extract_text, strip_thinking_tags


DEFAULT_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_MODEL = "claude-3-haiku-20240307"
API_VERSION = "2023-06-01"


@dataclass
class AnthropicClient(GenerationBackend):
    api_key: str
    model: str = DEFAULT_MODEL
    url: Optional[str] = None
    request_timeout: Optional[float] = None

    name = "Anthropic"

    def _endpoint(self) -> str:
        return self.url or os.environ.get("ANTHROPIC_URL") or DEFAULT_URL

    def generate(self, prompt: str, limits: GenerationLimits) -> str:
        payload = {
            "model": self.model,
            "max_tokens": limits.max_output_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
        }
        data = self._post_json(self._endpoint(), payload, headers=headers, timeout=self.request_timeout)
        return strip_thinking_tags(extract_text(data, ["content", 0, "text"]))
