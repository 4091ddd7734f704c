"""
Client for the OpenAI chat completions API (bearer-token auth).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from git_ai.llm.base import GenerationBackend, GenerationLimits, extract_text, strip_thinking_tags


DEFAULT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"


@dataclass
class OpenAIClient(GenerationBackend):
    api_key: str
    model: str = DEFAULT_MODEL
    url: Optional[str] = None
    request_timeout: Optional[float] = None

    name = "OpenAI"

    def _endpoint(self) -> str:
        return self.url or os.environ.get("OPENAI_URL") or DEFAULT_URL

    def generate(self, prompt: str, limits: GenerationLimits) -> str:
        payload = {
            "model": self.model,
            "max_tokens": limits.max_output_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = self._post_json(self._endpoint(), payload, headers=headers, timeout=self.request_timeout)
        return strip_thinking_tags(extract_text(data, ["choices", 0, "message", "content"]))
