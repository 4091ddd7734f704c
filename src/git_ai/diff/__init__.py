"""
Change collection for git_ai.

See :mod:`git_ai.diff.diff_extractor` for the collector and
:mod:`git_ai.diff.change_set` for the data it produces.
"""

from .change_set import ChangeSet, FileDiff  # noqa: F401
from .diff_extractor import MAX_DIFF_LINES, collect_changes, extract_changed_lines  # noqa: F401
