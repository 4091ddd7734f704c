"""
Configuration loader for git_ai.

Configuration is assembled from an ordered list of layers, merged
left-to-right so that later layers override earlier ones:

1. ``jira.json`` in the repository root (shared with the team),
2. ``jira.local.json`` in the repository root (local secrets),
3. process environment variables.

Missing files contribute an empty layer. Malformed files or values of
the wrong type raise :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings or logging errors in
# environments where the root logger may be closed.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SHARED_CONFIG_NAME = "jira.json"
LOCAL_CONFIG_NAME = "jira.local.json"

DEFAULT_MAX_TOKENS = 4000

# Environment variable -> dotted configuration key
ENV_KEYS: Dict[str, str] = {
    "AI_PROVIDER": "cloud.provider",
    "CLOUD_AI_API_KEY": "cloud.apiKey",
    "CLOUD_AI_MODEL": "cloud.model",
    "CLOUD_AI_URL": "cloud.url",
    "CLOUD_AI_MAX_TOKENS": "cloud.maxTokens",
}

Layer = Tuple[str, Dict[str, Any]]


class ConfigError(Exception):
    """Raised when the project configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class ProjectConfig:
    """Merged configuration for one invocation.

    Attributes
    ----------
    provider : str, optional
        Backend identifier (``ollama``, ``openai``, ``anthropic``, ``gemini``).
        ``None`` selects the default backend.
    model : str, optional
        Model identifier; each backend has its own default.
    api_key : str, optional
        Credential for hosted backends.
    url : str, optional
        Endpoint override for the selected backend.
    max_tokens : int
        Output-token budget passed to the backend.
    request_timeout : float, optional
        HTTP timeout in seconds. ``None`` waits indefinitely.
    commit_prefix : str, optional
        Replaces the ticket prefix in commit subjects.
    jira_base_url : str, optional
        Base URL used to link tickets from commit messages.
    project_key : str, optional
        Annotation added to messages when no ticket is detected.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = None
    url: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: Optional[float] = None
    commit_prefix: Optional[str] = None
    jira_base_url: Optional[str] = None
    project_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectConfig":
        """Build a config from merged nested data, validating value types."""
        cloud = _section(data, "cloud")
        jira = _section(data, "jira")
        project = _section(data, "project")

        max_tokens = cloud.get("maxTokens", DEFAULT_MAX_TOKENS)
        if isinstance(max_tokens, str) and max_tokens.strip().isdigit():
            max_tokens = int(max_tokens)
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
            raise ConfigError("'cloud.maxTokens' must be a positive integer")

        timeout = cloud.get("requestTimeout")
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
            raise ConfigError("'cloud.requestTimeout' must be a number")

        return cls(
            provider=_optional_str(cloud, "provider"),
            model=_optional_str(cloud, "model"),
            api_key=_optional_str(cloud, "apiKey"),
            url=_optional_str(cloud, "url"),
            max_tokens=max_tokens,
            request_timeout=float(timeout) if timeout is not None else None,
            commit_prefix=_optional_str(data, "commitPrefix"),
            jira_base_url=_optional_str(jira, "baseUrl"),
            project_key=_optional_str(project, "key"),
        )


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{name}' must be an object")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def _read_json_layer(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug("Configuration file '%s' not found; skipping", path)
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")
    logger.debug("Loaded configuration layer from: %s", path)
    return data


def _env_layer(environ: Mapping[str, str]) -> Dict[str, Any]:
    layer: Dict[str, Any] = {}
    for var, dotted in ENV_KEYS.items():
        value = environ.get(var)
        if not value:
            continue
        target = layer
        *parents, leaf = dotted.split(".")
        for part in parents:
            target = target.setdefault(part, {})
        target[leaf] = value
    return layer


def load_layers(repo_root: Path, environ: Optional[Mapping[str, str]] = None) -> List[Layer]:
    """Return the configuration layers in increasing order of precedence."""
    if environ is None:
        environ = os.environ
    return [
        (SHARED_CONFIG_NAME, _read_json_layer(repo_root / SHARED_CONFIG_NAME)),
        (LOCAL_CONFIG_NAME, _read_json_layer(repo_root / LOCAL_CONFIG_NAME)),
        ("environment", _env_layer(environ)),
    ]


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def merge_layers(layers: List[Layer]) -> Dict[str, Any]:
    """Merge layers left-to-right; nested objects are merged key by key."""
    merged: Dict[str, Any] = {}
    for name, data in layers:
        logger.debug("Applying configuration layer '%s'", name)
        merged = _deep_merge(merged, data)
    return merged


def load_config(repo_root: Path, environ: Optional[Mapping[str, str]] = None) -> ProjectConfig:
    """Load and validate the configuration for the repository at ``repo_root``.

    Raises
    ------
    ConfigError
        If a configuration file is malformed or a value has the wrong type.
    """
    return ProjectConfig.from_dict(merge_layers(load_layers(repo_root, environ)))
