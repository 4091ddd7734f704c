"""
Validation of the grouping returned by the generation backend.

The backend output is never trusted: :func:`parse_groups` turns the raw
text into :class:`CommitGroup` records and :func:`reconcile_groups`
checks them against the paths that actually changed. The reconciled
groups form a partition of the changed paths: every path belongs to
exactly one group, and no group is empty.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from git_ai.grouping.group_model import CommitGroup


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


RAW_EXCERPT_LENGTH = 200

CATCH_ALL_TITLE = "Remaining files"
CATCH_ALL_SUMMARY = "Changes that were not assigned to any other group."


class MalformedOutputError(Exception):
    """Raised when the backend output cannot be read as a list of groups."""

    def __init__(self, reason: str, raw: str) -> None:
        self.raw_excerpt = raw[:RAW_EXCERPT_LENGTH]
        super().__init__(f"{reason}: {self.raw_excerpt}")


@dataclass
class ReconcileResult:
    """Outcome of :func:`reconcile_groups`.

    Attributes
    ----------
    groups : List[CommitGroup]
        Groups to commit, in order, catch-all group last.
    dropped : List[str]
        Titles of backend groups discarded because none of their files
        are valid.
    catch_all : CommitGroup, optional
        The injected group for paths no backend group claimed.
    """

    groups: List[CommitGroup] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    catch_all: Optional[CommitGroup] = None


def strip_code_fence(text: str) -> str:
    """Remove a leading ```` ``` ```` line and a matching trailing one."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned


def _string_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def parse_groups(raw: str) -> List[CommitGroup]:
    """Parse backend text into commit groups.

    Raises
    ------
    MalformedOutputError
        If the text is not JSON, not a list, empty, or contains
        something other than objects.
    """
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError:
        raise MalformedOutputError("AI returned invalid JSON", raw) from None

    if not isinstance(data, list) or not data:
        raise MalformedOutputError("No groups returned from AI", raw)

    groups: List[CommitGroup] = []
    for item in data:
        if not isinstance(item, dict):
            raise MalformedOutputError("AI returned a group that is not an object", raw)
        groups.append(
            CommitGroup(
                title=str(item.get("title") or "").strip(),
                summary=str(item.get("summary") or "").strip(),
                files=_string_list(item.get("files")),
            )
        )
    return groups


def reconcile_groups(groups: Iterable[CommitGroup], valid_paths: Iterable[str]) -> ReconcileResult:
    """Restrict ``groups`` to ``valid_paths`` and cover every valid path.

    A new list of groups is built; the input groups are left untouched.
    Paths unknown to the change set are dropped without a warning. A path
    claimed by several groups stays in the first one. Valid paths no group
    claims are collected into a trailing catch-all group, and groups left
    without files are discarded with a warning.
    """
    ordered_paths = list(dict.fromkeys(valid_paths))
    valid = set(ordered_paths)
    claimed = set()

    filtered: List[CommitGroup] = []
    for group in groups:
        files: List[str] = []
        for path in group.files:
            if path not in valid:
                logger.debug("Ignoring unknown path '%s' in group '%s'", path, group.title)
                continue
            if path in claimed:
                continue
            claimed.add(path)
            files.append(path)
        filtered.append(CommitGroup(title=group.title, summary=group.summary, files=files))

    result = ReconcileResult()
    for group in filtered:
        if not group.files:
            logger.warning("Skipping group '%s' - no valid files", group.title)
            result.dropped.append(group.title)
            continue
        result.groups.append(group)

    unclaimed = [path for path in ordered_paths if path not in claimed]
    if unclaimed:
        # TODO: decide whether unclaimed files should rather abort the run
        # once backends reliably cover every path.
        logger.warning("%d file(s) not grouped by the AI; adding '%s' group", len(unclaimed), CATCH_ALL_TITLE)
        result.catch_all = CommitGroup(title=CATCH_ALL_TITLE, summary=CATCH_ALL_SUMMARY, files=unclaimed)
        result.groups.append(result.catch_all)
    return result
