"""
Client for a local Ollama daemon.

Wraps the ``/api/generate`` endpoint of the Ollama REST API. No
authentication is involved.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from git_ai.llm.base import GenerationBackend, GenerationLimits, extract_text, strip_thinking_tags


DEFAULT_URL = "http://localhost:11434/api/generate"
DEFAULT_MODEL = "llama3.2"


@dataclass
class OllamaClient(GenerationBackend):
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    model : str
        Name of the model to use for generation, e.g. ``"llama3.2"``.
    url : str, optional
        Full URL of the generate endpoint. Defaults to ``$OLLAMA_URL`` or
        the daemon's standard local address.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. ``None`` waits indefinitely.
    """

    model: str = DEFAULT_MODEL
    url: Optional[str] = None
    request_timeout: Optional[float] = None

    name = "Ollama"
    requires_api_key = False

    def _endpoint(self) -> str:
        return self.url or os.environ.get("OLLAMA_URL") or DEFAULT_URL

    def generate(self, prompt: str, limits: GenerationLimits) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"num_predict": limits.max_output_tokens},
        }
        data = self._post_json(self._endpoint(), payload, timeout=self.request_timeout)
        # The generate endpoint returns a top-level 'response' field when
        # stream=False.
        return strip_thinking_tags(extract_text(data, ["response"]))
