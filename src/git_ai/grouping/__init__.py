"""
Grouping logic for commits.

See :mod:`git_ai.grouping.group_model` for the group record and
:mod:`git_ai.grouping.reconciler` for validating backend output.
"""

from .group_model import CommitGroup  # noqa: F401
from .reconciler import MalformedOutputError, ReconcileResult, parse_groups, reconcile_groups  # noqa: F401
