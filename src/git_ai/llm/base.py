"""
Shared pieces of the generation backends.

Every backend exposes the same capability,
``generate(prompt, limits) -> str``, and owns its own request body,
response shape and authentication placement. The HTTP round trip and
the error policy are shared here: transport failures and non-success
statuses raise :class:`LLMError`, and a response whose shape does not
match the backend's expectation yields empty text.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Number of characters of an error body echoed back to the user.
ERROR_BODY_LIMIT = 500


class LLMError(Exception):
    """Raised when communication with a generation backend fails."""

    pass


@dataclass(frozen=True)
class GenerationLimits:
    """Bounds applied to a single generation request."""

    max_output_tokens: int


def strip_thinking_tags(text: str) -> str:
    """Remove thinking process tags from LLM responses.

    Many modern LLMs with reasoning capabilities output their thinking
    process in XML-like tags such as <think>, <thinking>, <thought>,
    or <reasoning>. This function strips these tags and their contents
    from the response, leaving only the actual output.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    >>> strip_thinking_tags("<thinking>thoughts</thinking>\\n\\nReal answer")
    'Real answer'
    """
    thinking_patterns = [
        r'<think>.*?</think>',
        r'<thinking>.*?</thinking>',
        r'<thought>.*?</thought>',
        r'<reasoning>.*?</reasoning>',
    ]

    result = text
    for pattern in thinking_patterns:
        result = re.sub(pattern, '', result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


def extract_text(data: Any, path: Sequence[Union[str, int]]) -> str:
    """Walk ``path`` (keys and list indices) into ``data``.

    Any mismatch along the way, or a non-string leaf, yields ``""``.
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return ""
        elif not isinstance(current, dict) or step not in current:
            return ""
        current = current[step]
    return current if isinstance(current, str) else ""


class GenerationBackend(ABC):
    """A text-generation service reachable over HTTP."""

    #: Human readable backend name used in logs and error messages.
    name = "backend"
    #: Whether the backend can be used without an API key.
    requires_api_key = True

    @abstractmethod
    def generate(self, prompt: str, limits: GenerationLimits) -> str:
        """Send ``prompt`` and return the generated text.

        Raises
        ------
        LLMError
            If the request fails or the backend returns an error status.
        """

    def _post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        logger.debug("Sending request to %s at %s", self.name, url)
        try:
            response = requests.post(
                url,
                json=payload,
                headers=headers,
                params=params,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to %s: %s", self.name, exc)
            raise LLMError(f"{self.name} request failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:ERROR_BODY_LIMIT]
            logger.error("%s returned status %s: %s", self.name, response.status_code, body)
            raise LLMError(f"{self.name} error {response.status_code}: {body}")
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to parse %s response: %s", self.name, exc)
            raise LLMError(f"Failed to parse {self.name} response") from exc
