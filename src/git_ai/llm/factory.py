"""
Backend selection.

A single configuration value, ``cloud.provider``, picks the backend.
Unknown names fall back to :data:`DEFAULT_PROVIDER`.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type

from git_ai.config.loader import ConfigError, ProjectConfig
from git_ai.llm.anthropic_client import AnthropicClient
from git_ai.llm.base import GenerationBackend, GenerationLimits
from git_ai.llm.gemini_client import GeminiClient
from git_ai.llm.ollama_client import OllamaClient
from git_ai.llm.openai_client import OpenAIClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_PROVIDER = "anthropic"

BACKENDS: Dict[str, Type[GenerationBackend]] = {
    "ollama": OllamaClient,
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "gemini": GeminiClient,
}


def resolve_provider(name: Optional[str] = None) -> str:
    """Return the backend identifier to use for ``name``."""
    if not name:
        return DEFAULT_PROVIDER
    key = name.strip().lower()
    if key not in BACKENDS:
        logger.warning("Unknown AI provider '%s'; falling back to '%s'", name, DEFAULT_PROVIDER)
        return DEFAULT_PROVIDER
    return key


def create_backend(config: ProjectConfig) -> GenerationBackend:
    """Instantiate the backend selected by ``config``.

    Raises
    ------
    ConfigError
        If the selected backend needs an API key and none is configured.
    """
    provider = resolve_provider(config.provider)
    backend_cls = BACKENDS[provider]

    kwargs = {"url": config.url, "request_timeout": config.request_timeout}
    if config.model:
        kwargs["model"] = config.model
    if backend_cls.requires_api_key:
        if not config.api_key:
            raise ConfigError(
                "CLOUD_AI_API_KEY missing (set env or in jira.local.json under cloud.apiKey)"
            )
        kwargs["api_key"] = config.api_key

    logger.debug("Using %s backend", provider)
    return backend_cls(**kwargs)


def limits_from_config(config: ProjectConfig) -> GenerationLimits:
    return GenerationLimits(max_output_tokens=config.max_tokens)
