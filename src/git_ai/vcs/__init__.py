"""
Version control system (VCS) integration.

This package contains the Git client used by the commit pipeline. It
exposes methods for detecting the repository root, listing local
changes, computing per-file diffs, staging and committing.
"""

from .git_client import ChangedFile, FileStatus, GitClient, GitError  # noqa: F401
