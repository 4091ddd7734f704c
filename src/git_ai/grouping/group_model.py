"""
Data models for commit grouping.

The :class:`CommitGroup` represents a collection of related changes that
should be committed together. Groups are proposed by the generation
backend and then validated by :mod:`git_ai.grouping.reconciler`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class CommitGroup:
    """Representation of a grouped commit.

    Attributes
    ----------
    title : str
        Commit subject proposed for the group.
    summary : str
        Short description used as the commit body.
    files : List[str]
        Paths, relative to the repository root, committed together.
    """

    title: str
    summary: str = ""
    files: List[str] = field(default_factory=list)
