"""
Data models for collected working-tree changes.

A :class:`ChangeSet` is the unit handed from the collector to the prompt
formatter: every changed path plus a size-bounded diff for each path
that has a representable one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from git_ai.vcs.git_client import ChangedFile


@dataclass(frozen=True)
class FileDiff:
    """Added and removed lines of a single file.

    Attributes
    ----------
    path : str
        Path of the file relative to the repository root.
    changed_lines : Tuple[str, ...]
        Diff lines starting with ``+`` or ``-``, without the file headers.
    """

    path: str
    changed_lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.changed_lines)


@dataclass(frozen=True)
class ChangeSet:
    """All changed files and their diffs for one invocation."""

    files: Tuple[ChangedFile, ...] = ()
    diffs: Tuple[FileDiff, ...] = field(default=())

    def __post_init__(self) -> None:
        known = {changed.path for changed in self.files}
        orphans = [diff.path for diff in self.diffs if diff.path not in known]
        if orphans:
            raise ValueError(f"Diffs for unknown paths: {', '.join(orphans)}")

    @property
    def valid_paths(self) -> Tuple[str, ...]:
        """Changed paths in status order, without duplicates."""
        return tuple(dict.fromkeys(changed.path for changed in self.files))

    def is_empty(self) -> bool:
        return not self.files
