"""Repository discovery functionality.

Discovers git repository information from a given path without requiring a
full GxContext.
"""

from dataclasses import dataclass
from pathlib import Path

from gx.core.git.abc import Git
from gx.core.git.real import RealGit


@dataclass(frozen=True)
class RepoContext:
    """Represents a git repo root."""

    root: Path
    repo_name: str


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context check for this sentinel and report it
    instead of failing.
    """

    message: str = "Not a git repository."


def discover_repo_or_sentinel(cwd: Path, git: Git | None = None) -> RepoContext | NoRepoSentinel:
    """Find the repository containing `cwd`.

    Git itself decides what counts as a repository: a `.git` entry that git
    rejects (empty or broken) is not one. Linked worktrees resolve to the main
    repository root.

    Args:
        cwd: Current working directory to start search from
        git: Git operations interface (defaults to RealGit)

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    ops = git if git is not None else RealGit()

    if not ops.path_exists(cwd):
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    git_common_dir = ops.get_git_common_dir(cwd.resolve())
    if git_common_dir is None:
        return NoRepoSentinel()

    root = git_common_dir.parent.resolve()

    return RepoContext(root=root, repo_name=root.name)
