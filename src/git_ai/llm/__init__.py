"""
Language model integration for git_ai.

This package contains one client per supported generation backend,
the factory that picks one from configuration, and the formatter that
builds the grouping prompt.
"""

from .base import GenerationBackend, GenerationLimits, LLMError  # noqa: F401
from .factory import create_backend, limits_from_config  # noqa: F401
from .prompt_formatter import format_changes, render_group_prompt  # noqa: F401
