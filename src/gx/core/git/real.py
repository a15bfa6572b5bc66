"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import logging
import os
import subprocess
from pathlib import Path

from gx.core.git.abc import BranchRef, CommitInfo, Git, GitReadError, UpstreamRef
from gx.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

_HEADS_PREFIX = b"refs/heads/"

# ============================================================================
# Production Implementation
# ============================================================================


def _decode_name(raw: bytes) -> str | None:
    """Decode a ref name, returning None when it is not valid UTF-8."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _run_git_bytes(args: list[str], operation_context: str, cwd: Path) -> bytes:
    """Run a git command and return its raw stdout.

    Raises:
        GitReadError: If the command fails
    """
    try:
        result = run_subprocess_with_context(
            ["git", *args],
            operation_context=operation_context,
            cwd=cwd,
            text=False,
            encoding=None,
        )
    except RuntimeError as e:
        raise GitReadError(str(e)) from e
    return result.stdout


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory."""
        result = subprocess.run(
            ["git", "rev-parse", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = cwd / git_dir

        return git_dir.resolve()

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        # With --quiet, symbolic-ref exits 1 only for a detached HEAD; fatal errors exit 128
        result = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise GitReadError(
                f"Failed to read the current branch in {cwd}\n"
                f"Exit code: {result.returncode}\n"
                f"stderr: {result.stderr.strip()}"
            )

        branch = result.stdout.strip()
        if not branch:
            return None

        return branch

    def get_head_commit(self, cwd: Path) -> str:
        """Resolve HEAD to a commit SHA."""
        try:
            result = run_subprocess_with_context(
                ["git", "rev-parse", "--verify", "HEAD^{commit}"],
                operation_context="resolve HEAD to a commit",
                cwd=cwd,
            )
        except RuntimeError as e:
            raise GitReadError(str(e)) from e
        return result.stdout.strip()

    def list_local_branches(self, repo_root: Path) -> list[BranchRef]:
        """Enumerate local branches in git's ref order."""
        stdout = _run_git_bytes(
            ["for-each-ref", "--format=%(refname)%00%(objectname)", "refs/heads/"],
            operation_context="list local branches",
            cwd=repo_root,
        )

        branches: list[BranchRef] = []
        for line in stdout.splitlines():
            if not line:
                continue
            raw_ref, _, raw_target = line.partition(b"\0")
            raw_name = raw_ref.removeprefix(_HEADS_PREFIX)
            target = raw_target.decode("ascii").strip() or None
            branches.append(
                BranchRef(
                    refname=os.fsdecode(raw_ref),
                    name=_decode_name(raw_name),
                    target=target,
                )
            )

        logger.debug("Enumerated %d local branches in %s", len(branches), repo_root)
        return branches

    def get_branch_upstream(self, repo_root: Path, branch: BranchRef) -> UpstreamRef | None:
        """Get the upstream branch configured for a local branch."""
        stdout = _run_git_bytes(
            [
                "for-each-ref",
                "--format=%(refname)%00%(upstream)%00%(upstream:short)%00%(upstream:track)",
                branch.refname,
            ],
            operation_context=f"read upstream of '{branch.refname}'",
            cwd=repo_root,
        )

        # The pattern also matches refs nested below the branch (feature -> feature/x)
        fields: list[bytes] | None = None
        for line in stdout.splitlines():
            parts = line.split(b"\0", 3)
            if len(parts) == 4 and os.fsdecode(parts[0]) == branch.refname:
                fields = parts
                break

        if fields is None:
            raise GitReadError(f"Branch ref '{branch.refname}' no longer exists")

        _, raw_upstream, raw_short, raw_track = fields
        if not raw_upstream:
            return None

        upstream_refname = os.fsdecode(raw_upstream)
        if raw_track.strip() == b"[gone]":
            raise GitReadError(
                f"Upstream '{upstream_refname}' of '{branch.refname}' does not exist"
            )

        return UpstreamRef(refname=upstream_refname, name=_decode_name(raw_short))

    def read_commit(self, repo_root: Path, sha: str) -> CommitInfo:
        """Read a single commit object."""
        try:
            result = run_subprocess_with_context(
                [
                    "git",
                    "log",
                    "-1",
                    "--no-show-signature",
                    "--format=%H%x00%P%x00%an%x00%at%x00%s",
                    sha,
                    "--",
                ],
                operation_context=f"read commit {sha}",
                cwd=repo_root,
                errors="replace",
            )
        except RuntimeError as e:
            raise GitReadError(str(e)) from e

        fields = result.stdout.rstrip("\n").split("\0")
        if len(fields) != 5:
            raise GitReadError(f"Unexpected output while reading commit {sha}: {result.stdout!r}")

        full_sha, parents, author, timestamp, summary = fields
        if not timestamp.isdigit():
            raise GitReadError(f"Commit {sha} has a malformed author timestamp: {timestamp!r}")

        return CommitInfo(
            sha=full_sha,
            parents=tuple(parents.split()),
            author=author or None,
            timestamp=int(timestamp),
            summary=summary or None,
        )

    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem."""
        return path.exists()
