"""
Configuration loading for git_ai.

Provides a layered loader for the project configuration files located
in the repository root. See :mod:`git_ai.config.loader` for
implementation details.
"""

from .loader import ConfigError, ProjectConfig, load_config  # noqa: F401
