"""
Sequential execution of the commit plan.

Each group moves through ``PENDING -> STAGED -> COMMITTED`` or ends in
``SKIPPED``; in dry-run mode it ends in ``PREVIEWED`` without touching
the repository. A :class:`~git_ai.vcs.git_client.GitError` aborts the
remaining groups; commits already created are kept.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from git_ai.display import print_preview, print_success, print_warning
from git_ai.grouping.group_model import CommitGroup
from git_ai.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SKIP_NO_VALID_FILES = "no-valid-files"
SKIP_NO_STAGED_CHANGES = "no-staged-changes"


class GroupState(enum.Enum):
    PENDING = "pending"
    STAGED = "staged"
    COMMITTED = "committed"
    SKIPPED = "skipped"
    PREVIEWED = "previewed"


@dataclass
class GroupOutcome:
    """What happened to one group during execution."""

    group: CommitGroup
    message: str
    state: GroupState = GroupState.PENDING
    skip_reason: Optional[str] = None


def flatten_message(message: str) -> str:
    """Join the lines of ``message`` with single spaces, dropping blank lines."""
    return " ".join(line.strip() for line in message.splitlines() if line.strip())


class CommitExecutor:
    """Stage and commit groups one at a time, or preview them."""

    def __init__(self, client: GitClient, dry_run: bool = False, renames: Optional[Mapping[str, str]] = None) -> None:
        self.client = client
        self.dry_run = dry_run
        # new path -> original path, for renames recorded in the index
        self.renames: Dict[str, str] = dict(renames or {})

    def run(self, plan: Iterable[Tuple[CommitGroup, str]]) -> List[GroupOutcome]:
        """Process ``(group, message)`` pairs in order.

        Raises
        ------
        GitError
            If staging or committing fails; later groups are not processed.
        """
        outcomes: List[GroupOutcome] = []
        for group, message in plan:
            outcome = GroupOutcome(group=group, message=message)
            outcomes.append(outcome)
            if not group.files:
                self._skip(outcome, SKIP_NO_VALID_FILES)
            elif self.dry_run:
                print_preview(group.files, message)
                outcome.state = GroupState.PREVIEWED
            else:
                self._commit(outcome)
        return outcomes

    def _skip(self, outcome: GroupOutcome, reason: str) -> None:
        outcome.state = GroupState.SKIPPED
        outcome.skip_reason = reason
        logger.warning("Skipping group '%s': %s", outcome.group.title, reason)
        print_warning(f"Skipping group \"{outcome.group.title}\" - {reason.replace('-', ' ')}")

    def _paths_for(self, files: List[str]) -> List[str]:
        """Return ``files`` plus the original paths of any renamed files."""
        paths = list(files)
        for file in files:
            original = self.renames.get(file)
            if original and original not in paths:
                paths.append(original)
        return paths

    def _commit(self, outcome: GroupOutcome) -> None:
        files = outcome.group.files
        paths = self._paths_for(files)
        self.client.stage_files(paths)
        if not self.client.has_staged_changes(paths):
            self._skip(outcome, SKIP_NO_STAGED_CHANGES)
            return
        outcome.state = GroupState.STAGED
        # Scoped to the group's paths so entries staged before the run
        # stay out of this commit.
        self.client.commit(flatten_message(outcome.message), paths)
        outcome.state = GroupState.COMMITTED
        print_success(f"Committed: {outcome.group.title or ', '.join(files)}")
