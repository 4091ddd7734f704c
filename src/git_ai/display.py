"""
Console output helpers shared by the CLI and the commit executor.

Informational, success and warning lines go to standard output with
distinct prefixes; errors go to standard error.
"""

from __future__ import annotations

import time
from typing import List

import click


class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_info(message: str):
    """Print an info message."""
    click.echo(f"ℹ {message}", err=False)


def print_success(message: str):
    """Print a success message."""
    click.echo(f"✓ {message}", err=False)


def print_warning(message: str):
    """Print a warning message."""
    click.echo(f"⚠ {message}", err=False)


def print_error(message: str):
    """Print an error message."""
    click.echo(f"✗ {message}", err=True)


def print_preview(files: List[str], message: str):
    """Print the dry-run preview of a single commit."""
    click.echo("\n--- DRY RUN ---")
    click.echo(f"Files: {', '.join(files)}")
    click.echo(f"Message:\n{message}")
    click.echo("---------------\n")
