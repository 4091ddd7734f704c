"""
Diff extraction utilities.

This module builds a :class:`~git_ai.diff.change_set.ChangeSet` from the
working tree. Only the added and removed lines of each diff are kept,
capped at :data:`MAX_DIFF_LINES` per file, to keep the prompt sent to
the generation backend small.
"""

from __future__ import annotations

import logging
from typing import List

from git_ai.diff.change_set import ChangeSet, FileDiff
from git_ai.vcs.git_client import GitClient, GitError, FileStatus


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


MAX_DIFF_LINES = 100


def extract_changed_lines(diff: str, limit: int = MAX_DIFF_LINES) -> List[str]:
    """Return the first ``limit`` added/removed lines of a unified diff.

    The ``+++``/``---`` file header lines are dropped; hunk headers and
    context lines never start with ``+`` or ``-`` so they are skipped too.
    """
    lines = [
        line
        for line in diff.splitlines()
        if line.startswith(("+", "-")) and not line.startswith(("+++", "---"))
    ]
    return lines[:limit]


def collect_changes(client: GitClient, limit: int = MAX_DIFF_LINES) -> ChangeSet:
    """Collect the changed files of the working tree and their diffs.

    Parameters
    ----------
    client : GitClient
        Client bound to the repository root.
    limit : int, optional
        Maximum number of changed lines kept per file.

    Returns
    -------
    ChangeSet
        Every changed file, plus a :class:`FileDiff` for each modified,
        added or untracked file whose diff has at least one changed line.

    Raises
    ------
    GitError
        If the status query itself fails. A failing diff for a single
        file only removes that file's diff.
    """
    files = client.get_changes()
    diffs: List[FileDiff] = []
    for changed in files:
        if not changed.is_diffable:
            continue
        try:
            diff = client.get_diff(changed.path, untracked=changed.status is FileStatus.UNTRACKED)
        except GitError as exc:
            logger.debug("No diff for %s: %s", changed.path, exc)
            continue
        lines = extract_changed_lines(diff, limit)
        if lines:
            diffs.append(FileDiff(path=changed.path, changed_lines=tuple(lines)))
    return ChangeSet(files=tuple(files), diffs=tuple(diffs))
