"""Stack list command - show the commits of the current stack."""

import logging

import click

from gx.cli.output import error_prefix, user_output
from gx.cli.rendering import (
    format_skipped_branch,
    format_stack_entry,
    format_untargeted_branch,
    format_upstream_chain,
)
from gx.core.context import GxContext
from gx.core.git.abc import GitReadError
from gx.core.repo_discovery import NoRepoSentinel
from gx.core.stack import (
    SkippedBranch,
    WalkStop,
    annotate_stack,
    build_branch_index,
    resolve_upstream_chains,
    walk_stack,
)

logger = logging.getLogger(__name__)

DETACHED_HEAD_MESSAGE = (
    "HEAD is not currently pointing to a local branch. "
    "Switch to a local branch to list the stack."
)


@click.command("list")
@click.pass_obj
def list_stack(ctx: GxContext) -> None:
    """List all commits in the current stack.

    Walks back from HEAD (at most 10 commits), showing which local branch
    points at each commit, then shows each branch's upstream. A merge commit
    ends the stack listing only; the upstream section is still printed after
    the merge diagnostic.

    Example:
        $ gx stack list
        * 3c4d5e6 - (feature-b) Add tests (1700000200) <Jane Doe>
        * 2b3c4d5 - (feature-a) Add parser (1700000100) <Jane Doe>
        * 1a2b3c4 - (main) Initial commit (1700000000) <Jane Doe>
    """
    color = None if ctx.global_config.use_color else False

    if isinstance(ctx.repo, NoRepoSentinel):
        user_output(error_prefix() + ctx.repo.message, color=color)
        return

    repo_root = ctx.repo.root
    logger.debug("Listing stack: cwd=%s, repo_root=%s", ctx.cwd, repo_root)

    try:
        walk = walk_stack(ctx.git, repo_root, ctx.cwd)
        if walk.stop is WalkStop.DETACHED:
            user_output(error_prefix() + DETACHED_HEAD_MESSAGE, color=color)
            return

        branches = ctx.git.list_local_branches(repo_root)
    except GitReadError as e:
        user_output(error_prefix() + str(e), color=color)
        raise SystemExit(1) from e

    index = build_branch_index(branches)
    for branch in index.untargeted:
        user_output(format_untargeted_branch(branch.name), color=color)

    for entry in annotate_stack(walk, index):
        user_output(format_stack_entry(entry), color=color)

    if walk.stop is WalkStop.MERGE:
        merge_commit = walk.commits[-1]
        user_output(
            error_prefix()
            + f"Commit {merge_commit.short_sha} has more than one parent. "
            + "Stacked PRs are not supported.",
            color=color,
        )

    if not ctx.global_config.show_upstreams:
        return

    resolution = resolve_upstream_chains(ctx.git, repo_root, branches)
    for outcome in resolution.outcomes:
        if isinstance(outcome, SkippedBranch):
            user_output(format_skipped_branch(outcome), color=color)
            continue
        for line in format_upstream_chain(outcome):
            user_output(line, color=color)
