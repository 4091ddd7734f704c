"""
Commit message rendering and commit execution.
"""

from .executor import CommitExecutor, GroupOutcome, GroupState, flatten_message  # noqa: F401
from .message_builder import build_commit_message, build_merged_commit_message, merge_groups  # noqa: F401
from .ticket import JiraTicketRef, extract_ticket_from_branch  # noqa: F401
