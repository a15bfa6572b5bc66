"""High-level git read interface.

This module provides a clean abstraction over git subprocess calls, making the
stack logic testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit (tests/fakes/git.py): In-memory implementation for tests

Every accessor can return a value, return an explicit absence (None), or raise
GitReadError. Callers decide per call site whether a GitReadError propagates or
is reported and skipped.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class GitReadError(RuntimeError):
    """Raised when git cannot read a reference or object."""


@dataclass(frozen=True)
class BranchRef:
    """A local branch as enumerated from refs/heads.

    name is None when the ref name is not valid UTF-8. target is None when the
    ref does not resolve to an object.
    """

    refname: str
    name: str | None
    target: str | None


@dataclass(frozen=True)
class UpstreamRef:
    """The tracking branch configured for a local branch."""

    refname: str
    name: str | None


@dataclass(frozen=True)
class CommitInfo:
    """Raw commit metadata as read from the object database."""

    sha: str
    parents: tuple[str, ...]
    author: str | None
    timestamp: int
    summary: str | None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for read-only git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path | None:
        """Get the common git directory, or None outside a repository."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Returns:
            Short branch name, or None if HEAD is detached.

        Raises:
            GitReadError: If git cannot read HEAD (e.g. not a repository, corrupt HEAD)
        """
        ...

    @abstractmethod
    def get_head_commit(self, cwd: Path) -> str:
        """Resolve HEAD to a commit SHA.

        Raises:
            GitReadError: If HEAD does not resolve to a commit (e.g. unborn branch)
        """
        ...

    @abstractmethod
    def list_local_branches(self, repo_root: Path) -> list[BranchRef]:
        """Enumerate local branches in git's ref order.

        Args:
            repo_root: Path to the repository root

        Returns:
            One BranchRef per ref under refs/heads

        Raises:
            GitReadError: If the enumeration itself fails
        """
        ...

    @abstractmethod
    def get_branch_upstream(self, repo_root: Path, branch: BranchRef) -> UpstreamRef | None:
        """Get the upstream branch configured for a local branch.

        Args:
            repo_root: Path to the repository root
            branch: Branch to look up

        Returns:
            The configured upstream, or None if no tracking is configured

        Raises:
            GitReadError: If an upstream is configured but cannot be resolved
        """
        ...

    @abstractmethod
    def read_commit(self, repo_root: Path, sha: str) -> CommitInfo:
        """Read a single commit object.

        Args:
            repo_root: Path to the repository root
            sha: Full commit SHA

        Returns:
            Parsed commit metadata

        Raises:
            GitReadError: If the object is missing or cannot be parsed
        """
        ...

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production (RealGit), this delegates to Path.exists(). In tests
        (FakeGit), this checks an in-memory set of existing paths.
        """
        ...
