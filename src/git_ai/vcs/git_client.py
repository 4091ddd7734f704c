"""
Git client implementation for git_ai.

This module wraps the Git operations required by the commit pipeline:
status and diff queries for change collection, the branch query used
for ticket detection, and the stage/commit pair used by the executor.
All subprocess calls go through :meth:`GitClient._run` so that unit
tests can mock them easily.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class FileStatus(str, enum.Enum):
    """Working-tree status of a changed file."""

    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNTRACKED = "??"
    UNKNOWN = "X"

    @classmethod
    def from_code(cls, code: str) -> "FileStatus":
        """Map a two-character porcelain status code to a status."""
        if code == "??":
            return cls.UNTRACKED
        if "U" in code or code in {"AA", "DD"}:
            return cls.UNMERGED
        # The first non-space character is the primary status, so that
        # ' M', 'M ' and 'MM' are all "modified".
        primary = code.strip()[:1]
        for member in cls:
            if member.value == primary:
                return member
        return cls.UNKNOWN


# Statuses for which a content diff is computed.
DIFFABLE_STATUSES = frozenset({FileStatus.MODIFIED, FileStatus.ADDED, FileStatus.UNTRACKED})


@dataclass(frozen=True)
class ChangedFile:
    """Representation of a single changed path in the working tree."""

    path: str
    status: FileStatus
    code: str = ""
    original_path: Optional[str] = None  # set for renames and copies

    @property
    def is_diffable(self) -> bool:
        return self.status in DIFFABLE_STATUSES


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Return the top-level directory of the repository containing ``start``.

        ``None`` is returned when ``start`` is not inside a Git work tree
        or when git itself cannot be executed.
        """
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=start,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as exc:
            logger.debug("Unable to run git in %s: %s", start, exc)
            return None
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return Path(result.stdout.strip())

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True,
            or if the git executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid characters instead of failing
            )
        except OSError as exc:
            logger.error("Failed to execute git: %s", exc)
            raise GitError(f"Failed to execute git: {exc}") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def get_changes(self) -> List[ChangedFile]:
        """Get the list of changed files in the working tree.

        Untracked directories are expanded into their individual files so
        that every entry is a path that can be staged on its own. The
        NUL-separated porcelain format is used so that paths arrive
        unquoted, whatever characters they contain.

        Raises
        ------
        GitError
            If the git status command fails.
        """
        result = self._run(["status", "--porcelain", "-z", "--untracked-files=all"], check=True)
        changes: List[ChangedFile] = []

        # Each entry is "XY path"; renames and copies are followed by an
        # extra field holding the original path.
        fields = iter(result.stdout.split("\0"))
        for entry in fields:
            if len(entry) < 4:
                continue

            code = entry[:2]
            original_path = None
            status = FileStatus.from_code(code)
            if status in {FileStatus.RENAMED, FileStatus.COPIED}:
                original_path = next(fields, None) or None

            changes.append(
                ChangedFile(
                    path=entry[3:],
                    status=status,
                    code=code,
                    original_path=original_path,
                )
            )

        return changes

    def get_diff(self, path: str, untracked: bool = False) -> str:
        """Return the unified diff of ``path`` against HEAD.

        Untracked files are compared against an empty baseline so that the
        whole content shows up as added lines.

        Raises
        ------
        GitError
            If git cannot produce the diff.
        """
        if untracked:
            # --no-index exits with 1 when the files differ
            result = self._run(["diff", "--no-index", "--", "/dev/null", path], check=False)
            if result.returncode not in (0, 1):
                raise GitError(result.stderr.strip() or f"git diff failed for {path}")
            return result.stdout
        result = self._run(["diff", "HEAD", "--unified=3", "--", path], check=True)
        return result.stdout

    # ------------------------------------------------------------------
    # Branch operations
    # ------------------------------------------------------------------
    def get_current_branch(self) -> str:
        """Get the name of the current branch.

        Falls back to ``symbolic-ref`` for repositories without commits,
        where ``rev-parse`` cannot resolve HEAD.

        Raises
        ------
        GitError
            If unable to determine the current branch.
        """
        try:
            result = self._run(["rev-parse", "--abbrev-ref", "HEAD"], check=True)
        except GitError:
            result = self._run(["symbolic-ref", "--short", "HEAD"], check=True)
        return result.stdout.strip()

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_files(self, files: Iterable[str]) -> None:
        """Stage the given files for commit.

        Files present in the working tree are added; missing files are
        removed from the index so that deletions are staged as well.
        """
        present: List[str] = []
        missing: List[str] = []
        for file in files:
            if (self.repo_root / file).exists():
                present.append(file)
            else:
                missing.append(file)
        if present:
            self._run(["add", "--"] + present, check=True)
        if missing:
            self._run(["rm", "--cached", "--ignore-unmatch", "--quiet", "--"] + missing, check=True)

    def has_staged_changes(self, files: Iterable[str]) -> bool:
        """Return True if any of ``files`` has changes recorded in the index."""
        result = self._run(["diff", "--cached", "--name-only", "--"] + list(files), check=True)
        return bool(result.stdout.strip())

    def commit(self, message: str, paths: Optional[Iterable[str]] = None) -> None:
        """Create a commit with the given message.

        When ``paths`` is given only those paths are committed; anything
        else already in the index stays staged for a later commit.

        If the commit fails, a GitError is raised.
        """
        args = ["commit", "-m", message]
        if paths is not None:
            args += ["--"] + list(paths)
        self._run(args, check=True)
