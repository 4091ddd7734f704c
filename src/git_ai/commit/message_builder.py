"""
Local commit message rendering.

Messages are built from templates only; no network or repository
access happens here, so the same group, ticket and configuration always
yield the same message.

With a ticket::

    SCRUM-123: Add login form

    Adds the form and its validation.

    https://jira.example.com/browse/SCRUM-123

Without a ticket the subject is the bare title, optionally followed by
a ``(Project: KEY)`` line.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from git_ai.commit.ticket import JiraTicketRef
from git_ai.config.loader import ProjectConfig
from git_ai.grouping.group_model import CommitGroup


DEFAULT_TITLE = "changes"


def _join_blocks(blocks: Sequence[str]) -> str:
    return "\n\n".join(block for block in blocks if block).strip()


def build_commit_message(
    group: CommitGroup,
    jira_info: Optional[JiraTicketRef] = None,
    config: Optional[ProjectConfig] = None,
) -> str:
    """Render the commit message for ``group``."""
    config = config or ProjectConfig()
    title = group.title or group.summary or DEFAULT_TITLE
    summary = group.summary or ""

    if jira_info is not None:
        prefix = config.commit_prefix or jira_info.prefix
        ticket_id = f"{prefix}-{jira_info.number}"
        jira_url = None
        if config.jira_base_url:
            jira_url = f"{config.jira_base_url.rstrip('/')}/browse/{ticket_id}"
        return _join_blocks([f"{ticket_id}: {title}", summary, jira_url or ""])

    project_line = f"(Project: {config.project_key})" if config.project_key else ""
    return _join_blocks([title, summary, project_line])


def merge_groups(groups: Sequence[CommitGroup]) -> CommitGroup:
    """Collapse several groups into one.

    Titles are joined with a comma and every summary becomes a bullet.
    """
    if len(groups) == 1:
        return groups[0]
    titles = [group.title or group.summary for group in groups]
    files: List[str] = []
    for group in groups:
        files.extend(path for path in group.files if path not in files)
    return CommitGroup(
        title=", ".join(title for title in titles if title),
        summary="\n".join(f"- {group.summary or group.title}" for group in groups),
        files=files,
    )


def build_merged_commit_message(
    groups: Sequence[CommitGroup],
    jira_info: Optional[JiraTicketRef] = None,
    config: Optional[ProjectConfig] = None,
) -> str:
    """Render one message covering all of ``groups``."""
    return build_commit_message(merge_groups(groups), jira_info, config)
