"""
Top-level package for git_ai.

This package exposes the main CLI entry point via the
``git_ai.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
