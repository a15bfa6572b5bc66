"""Tests for repository discovery."""

from pathlib import Path

from gx.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from tests.fakes.git import FakeGit


def test_discovers_root_from_git_common_dir() -> None:
    cwd = Path("/work/project/src")
    git = FakeGit(git_common_dirs={cwd: Path("/work/project/.git")})

    result = discover_repo_or_sentinel(cwd, git)

    assert isinstance(result, RepoContext)
    assert result.root == Path("/work/project").resolve()
    assert result.repo_name == "project"


def test_git_dir_that_git_rejects_is_not_a_repository() -> None:
    cwd = Path("/work/project/src/pkg").resolve()
    root = Path("/work/project").resolve()
    # A .git entry is present, but git does not report a common dir for cwd
    git = FakeGit(existing_paths={cwd, root / ".git"})

    result = discover_repo_or_sentinel(cwd, git)

    assert result == NoRepoSentinel()


def test_returns_sentinel_when_no_repository_found() -> None:
    cwd = Path("/tmp/elsewhere").resolve()
    git = FakeGit(existing_paths={cwd})

    result = discover_repo_or_sentinel(cwd, git)

    assert result == NoRepoSentinel()
    assert result.message == "Not a git repository."


def test_returns_sentinel_when_start_path_missing() -> None:
    result = discover_repo_or_sentinel(Path("/does/not/exist"), FakeGit())

    assert isinstance(result, NoRepoSentinel)
    assert "does not exist" in result.message
