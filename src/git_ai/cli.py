"""
Command line interface for the git_ai tool.

This module defines the ``main`` click group used as the entry point of
the ``git-ai`` command. The ``commit`` subcommand runs the whole
pipeline: change collection, a single grouping request to the
configured backend, reconciliation of the returned groups, local
message rendering and the stage/commit sequence. Exit codes are listed
below.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

import click

from git_ai import __version__
from git_ai.commit.executor import CommitExecutor, GroupState
from git_ai.commit.message_builder import build_commit_message, build_merged_commit_message, merge_groups
from git_ai.commit.ticket import extract_ticket_from_branch
from git_ai.config.loader import ConfigError, load_config
from git_ai.diff.diff_extractor import collect_changes
from git_ai.display import ProgressIndicator, print_error, print_info, print_success, print_warning
from git_ai.grouping.group_model import CommitGroup
from git_ai.grouping.reconciler import MalformedOutputError, parse_groups, reconcile_groups
from git_ai.llm.base import LLMError
from git_ai.llm.factory import create_backend, limits_from_config
from git_ai.llm.prompt_formatter import render_group_prompt
from git_ai.vcs.git_client import FileStatus, GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7
EXIT_MALFORMED_OUTPUT = 8


def _configure_logging(verbose: bool) -> None:
    # Use force=True to ensure handlers are reconfigured on subsequent
    # invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    if verbose:
        # Package loggers do not propagate unless debug output is requested.
        for name, item in list(logging.root.manager.loggerDict.items()):
            if name.startswith("git_ai") and isinstance(item, logging.Logger):
                item.propagate = True


def plan_commits(groups: List[CommitGroup], jira_info, config, single_commit: bool = False) -> List[Tuple[CommitGroup, str]]:
    """Pair every group with its rendered message.

    With ``single_commit`` all groups are collapsed into one commit.
    """
    if single_commit and len(groups) > 1:
        return [(merge_groups(groups), build_merged_commit_message(groups, jira_info, config))]
    return [(group, build_commit_message(group, jira_info, config)) for group in groups]


@click.group(invoke_without_command=True)
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """AI-assisted grouping of working-tree changes into commits."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())


@main.command("version")
def version_command() -> None:
    """Show version."""
    click.echo(f"git-ai {__version__}")


@main.command("commit")
@click.option("--dry-run", is_flag=True, help="Show what would be committed without committing.")
@click.option("--single-commit", is_flag=True, help="Collapse all groups into a single commit.")
def commit_command(dry_run: bool, single_commit: bool) -> None:
    """Analyze changes, group them, and create commits."""
    try:
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            config = load_config(repo_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = GitClient(repo_root)
        try:
            change_set = collect_changes(client)
            branch = client.get_current_branch()
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if change_set.is_empty():
            print_info("No changes to commit.")
            raise click.exceptions.Exit(EXIT_SUCCESS)

        count = len(change_set.files)
        print_info(f"Found {count} changed file{'s' if count != 1 else ''}")

        try:
            backend = create_backend(config)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        print_info(f"Using AI provider: {backend.name}")

        try:
            with ProgressIndicator("Analyzing changes"):
                raw = backend.generate(render_group_prompt(change_set), limits_from_config(config))
        except LLMError as exc:
            print_error(f"LLM error: {exc}")
            raise click.exceptions.Exit(EXIT_LLM_FAILURE)

        try:
            proposed = parse_groups(raw)
        except MalformedOutputError as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_MALFORMED_OUTPUT)

        result = reconcile_groups(proposed, change_set.valid_paths)
        for title in result.dropped:
            print_warning(f"Skipping group \"{title}\" - no valid files")
        if result.catch_all is not None:
            print_warning(
                f"{len(result.catch_all.files)} file(s) not grouped by the AI; "
                f"adding \"{result.catch_all.title}\" group"
            )
        print_info(f"Grouped into {len(result.groups)} commit(s)")

        jira_info = extract_ticket_from_branch(branch)
        if jira_info:
            print_info(f"JIRA ticket detected: {jira_info.key}")

        plan = plan_commits(result.groups, jira_info, config, single_commit=single_commit)
        renames = {
            changed.path: changed.original_path
            for changed in change_set.files
            if changed.status is FileStatus.RENAMED and changed.original_path
        }
        try:
            outcomes = CommitExecutor(client, dry_run=dry_run, renames=renames).run(plan)
        except GitError as exc:
            print_error(f"Failed to commit changes: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if not dry_run:
            committed = sum(1 for outcome in outcomes if outcome.state is GroupState.COMMITTED)
            print_success(f"Done! {committed} commit{'s' if committed != 1 else ''} created.")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
