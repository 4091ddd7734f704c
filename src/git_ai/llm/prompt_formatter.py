"""
Prompt construction for the grouping request.

:func:`format_changes` serializes a change set into the compact text
block embedded in the prompt; :func:`render_group_prompt` wraps it into
the instructions sent to the backend. Both are pure: identical input
always produces byte-identical output.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Mapping

from git_ai.diff.change_set import ChangeSet


GROUP_PROMPT_TEMPLATE = dedent(
    """
    You are an expert software engineer preparing git commits.
    Group the changed files below into logical, self-contained commits.

    Respond with ONLY a JSON array and nothing else. Each element must be
    an object with exactly these keys:
    - "title": imperative commit subject, max 72 characters
    - "summary": one or two sentences describing what changed and why
    - "files": array of file paths taken verbatim from the FILES list

    RULES:
    - Every file from the FILES list must appear in exactly one group.
    - Do not invent, rename or re-case file paths.
    - Prefer fewer, cohesive groups over one group per file.

    {{DIFF_SNIPPETS}}
    """
).strip()


def format_changes(change_set: ChangeSet) -> str:
    """Render the file list and the per-file diff blocks of ``change_set``."""
    file_list = "\n".join(changed.path for changed in change_set.files)
    diffs = "\n\n".join(f"[{diff.path}]\n{diff.text}" for diff in change_set.diffs)
    return f"FILES:\n{file_list}\n\nDIFFS:\n{diffs}"


def build_prompt(template: str, variables: Mapping[str, str]) -> str:
    """Substitute every ``{{NAME}}`` placeholder in ``template``."""
    result = template
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", value or "")
    return result


def render_group_prompt(change_set: ChangeSet) -> str:
    return build_prompt(GROUP_PROMPT_TEMPLATE, {"DIFF_SNIPPETS": format_changes(change_set)})
