"""Integration tests for RealGit and `gx stack list` against real repositories.

These tests create throwaway git repositories under tmp_path and run actual
git commands, so they exercise the parsing of real git output.
"""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from gx.cli.cli import cli
from gx.core.context import GxContext
from gx.core.git.abc import GitReadError
from gx.core.git.real import RealGit
from gx.core.global_config import GlobalConfig
from gx.core.repo_discovery import discover_repo_or_sentinel


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def _commit(repo: Path, message: str) -> str:
    _git(repo, "commit", "--allow-empty", "-m", message)
    return _git(repo, "rev-parse", "HEAD")


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Create a repository with user identity configured and no commits."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-b", "main")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


def _set_upstream(repo: Path, branch: str, *, create_remote_ref: bool = True) -> None:
    if create_remote_ref:
        _git(repo, "update-ref", f"refs/remotes/origin/{branch}", f"refs/heads/{branch}")
    _git(repo, "config", f"branch.{branch}.remote", "origin")
    _git(repo, "config", f"branch.{branch}.merge", f"refs/heads/{branch}")


def _sign_with_ssh_key(repo: Path, key_dir: Path) -> None:
    """Configure SSH commit signing and signature display in log output."""
    key = key_dir / "id_ed25519"
    subprocess.run(
        ["ssh-keygen", "-q", "-t", "ed25519", "-N", "", "-C", "test@example.com", "-f", str(key)],
        check=True,
        capture_output=True,
    )
    allowed_signers = key_dir / "allowed_signers"
    public_key = key.with_suffix(".pub").read_text(encoding="utf-8").strip()
    allowed_signers.write_text(f"test@example.com {public_key}\n", encoding="utf-8")
    _git(repo, "config", "gpg.format", "ssh")
    _git(repo, "config", "user.signingkey", str(key))
    _git(repo, "config", "gpg.ssh.allowedSignersFile", str(allowed_signers))
    _git(repo, "config", "log.showSignature", "true")


def _invoke_list(repo: Path, global_config: GlobalConfig | None = None):
    git = RealGit()
    ctx = GxContext(
        git=git,
        cwd=repo,
        global_config=global_config if global_config is not None else GlobalConfig(),
        repo=discover_repo_or_sentinel(repo, git),
    )
    return CliRunner().invoke(cli, ["stack", "list"], obj=ctx)


# ============================================================================
# RealGit
# ============================================================================


def test_current_branch_and_head(repo: Path) -> None:
    sha = _commit(repo, "initial")
    git = RealGit()

    assert git.get_current_branch(repo) == "main"
    assert git.get_head_commit(repo) == sha


def test_detached_head_has_no_current_branch(repo: Path) -> None:
    sha = _commit(repo, "initial")
    _git(repo, "checkout", "--detach", sha)

    assert RealGit().get_current_branch(repo) is None


def test_current_branch_outside_repository_raises(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))

    with pytest.raises(GitReadError, match="Exit code: 128"):
        RealGit().get_current_branch(plain)


def test_unborn_branch_head_cannot_be_resolved(repo: Path) -> None:
    git = RealGit()

    assert git.get_current_branch(repo) == "main"
    with pytest.raises(GitReadError, match="resolve HEAD"):
        git.get_head_commit(repo)


def test_read_commit_parses_fields(repo: Path) -> None:
    first = _commit(repo, "first")
    second = _commit(repo, "second line summary\n\nbody text")

    info = RealGit().read_commit(repo, second)

    assert info.sha == second
    assert info.parents == (first,)
    assert info.author == "Test User"
    assert info.summary == "second line summary"
    assert info.timestamp == int(_git(repo, "log", "-1", "--format=%at", second))


@pytest.mark.skipif(shutil.which("ssh-keygen") is None, reason="ssh-keygen not installed")
def test_read_commit_ignores_signature_display(repo: Path, tmp_path: Path) -> None:
    _commit(repo, "root")
    _sign_with_ssh_key(repo, tmp_path)
    try:
        _git(repo, "commit", "--allow-empty", "-S", "-m", "signed")
    except subprocess.CalledProcessError:
        pytest.skip("installed git cannot sign commits with SSH keys")
    sha = _git(repo, "rev-parse", "HEAD")

    info = RealGit().read_commit(repo, sha)

    assert info.sha == sha
    assert info.summary == "signed"


def test_read_commit_root_has_no_parents(repo: Path) -> None:
    root = _commit(repo, "root")

    assert RealGit().read_commit(repo, root).parents == ()


def test_read_commit_unknown_sha_raises(repo: Path) -> None:
    _commit(repo, "root")

    with pytest.raises(GitReadError, match="read commit"):
        RealGit().read_commit(repo, "0" * 40)


def test_list_local_branches_in_ref_order(repo: Path) -> None:
    root = _commit(repo, "root")
    _git(repo, "branch", "zeta")
    _git(repo, "branch", "alpha")
    _git(repo, "branch", "feature/nested")

    branches = RealGit().list_local_branches(repo)

    assert [b.name for b in branches] == ["alpha", "feature/nested", "main", "zeta"]
    assert all(b.target == root for b in branches)
    assert branches[0].refname == "refs/heads/alpha"


@pytest.mark.skipif(sys.platform == "darwin", reason="filesystem rejects non-UTF-8 names")
def test_list_local_branches_non_utf8_name_has_no_name(repo: Path) -> None:
    root = _commit(repo, "root")
    subprocess.run(
        [b"git", b"update-ref", b"refs/heads/caf\xe9", root.encode("ascii")],
        cwd=repo,
        check=True,
        capture_output=True,
    )

    branches = RealGit().list_local_branches(repo)

    unnamed = [b for b in branches if b.name is None]
    assert len(unnamed) == 1
    assert unnamed[0].target == root


def test_branch_upstream_resolution(repo: Path) -> None:
    _commit(repo, "root")
    _git(repo, "remote", "add", "origin", str(repo / "missing-remote"))
    _set_upstream(repo, "main")
    _git(repo, "branch", "local-only")
    git = RealGit()
    branches = {b.name: b for b in git.list_local_branches(repo)}

    upstream = git.get_branch_upstream(repo, branches["main"])

    assert upstream is not None
    assert upstream.name == "origin/main"
    assert upstream.refname == "refs/remotes/origin/main"
    assert git.get_branch_upstream(repo, branches["local-only"]) is None


def test_gone_upstream_raises(repo: Path) -> None:
    _commit(repo, "root")
    _git(repo, "remote", "add", "origin", str(repo / "missing-remote"))
    _set_upstream(repo, "main", create_remote_ref=False)
    git = RealGit()
    main = next(b for b in git.list_local_branches(repo) if b.name == "main")

    with pytest.raises(GitReadError, match="does not exist"):
        git.get_branch_upstream(repo, main)


# ============================================================================
# gx stack list
# ============================================================================


def test_stack_list_over_real_repository(repo: Path) -> None:
    root = _commit(repo, "root")
    _git(repo, "checkout", "-b", "feat-1")
    feat_1 = _commit(repo, "add feature one")
    _git(repo, "checkout", "-b", "feat-2")
    feat_2 = _commit(repo, "add feature two")

    result = _invoke_list(repo, GlobalConfig(use_color=False, show_upstreams=False))

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 3
    assert lines[0].startswith(f"* {feat_2[:7]} - (feat-2) add feature two (")
    assert lines[1].startswith(f"* {feat_1[:7]} - (feat-1) add feature one (")
    assert lines[2].startswith(f"* {root[:7]} - (main) root (")
    assert all(line.endswith("<Test User>") for line in lines)


def test_stack_list_stops_at_merge_commit(repo: Path) -> None:
    _commit(repo, "root")
    _git(repo, "checkout", "-b", "side")
    _commit(repo, "side work")
    _git(repo, "checkout", "main")
    _commit(repo, "main work")
    _git(repo, "merge", "--no-ff", "--no-edit", "side")
    merge = _git(repo, "rev-parse", "HEAD")
    _commit(repo, "after merge")

    result = _invoke_list(repo, GlobalConfig(use_color=False, show_upstreams=False))

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 3
    assert lines[1].startswith(f"* {merge[:7]} - ")
    assert lines[2] == (
        f"Error: Commit {merge[:7]} has more than one parent. Stacked PRs are not supported."
    )


def test_stack_list_detached_head(repo: Path) -> None:
    sha = _commit(repo, "root")
    _git(repo, "checkout", "--detach", sha)

    result = _invoke_list(repo)

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "Error: HEAD is not currently pointing to a local branch. "
        "Switch to a local branch to list the stack."
    ]


def test_stack_list_reports_upstreams(repo: Path) -> None:
    _commit(repo, "root")
    _git(repo, "remote", "add", "origin", str(repo / "missing-remote"))
    _set_upstream(repo, "main")
    _git(repo, "branch", "topic")

    result = _invoke_list(repo, GlobalConfig(use_color=False))

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "◉  branch: main, upstream: origin/main" in lines
    assert "⦿  branch: main, upstream: origin/main" in lines
    assert "Skipping branch topic: no upstream configured." in lines


@pytest.mark.skipif(shutil.which("ssh-keygen") is None, reason="ssh-keygen not installed")
def test_stack_list_signed_commit_keeps_branch(repo: Path, tmp_path: Path) -> None:
    _sign_with_ssh_key(repo, tmp_path)
    try:
        _git(repo, "commit", "--allow-empty", "-S", "-m", "signed root")
    except subprocess.CalledProcessError:
        pytest.skip("installed git cannot sign commits with SSH keys")
    sha = _git(repo, "rev-parse", "HEAD")

    result = _invoke_list(repo, GlobalConfig(use_color=False, show_upstreams=False))

    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[0].startswith(f"* {sha[:7]} - (main) signed root (")


def test_stack_list_in_directory_with_empty_git_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    work = tmp_path / "work"
    (work / ".git").mkdir(parents=True)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))

    result = _invoke_list(work)

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["Error: Not a git repository."]
