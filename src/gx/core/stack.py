"""Stack construction and branch correlation.

A stack is the linear run of commits from HEAD back toward the root, each
optionally annotated with the local branch that points at it. This module
holds the pure logic for building that view and for pairing branches with
their upstreams; it reads through the Git interface and never prints.

Error policy: a GitReadError raised while resolving HEAD or walking commits
propagates to the caller. While resolving upstreams it is recorded against
the offending branch and resolution continues with the next one.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from gx.core.git.abc import BranchRef, CommitInfo, Git, GitReadError

logger = logging.getLogger(__name__)

STACK_DEPTH_LIMIT = 10
SHORT_SHA_LENGTH = 7

NO_SUMMARY_PLACEHOLDER = "<no summary>"
UNKNOWN_AUTHOR_PLACEHOLDER = "Unknown"


@dataclass(frozen=True)
class CommitDescriptor:
    """Display view of one commit in the stack."""

    info: CommitInfo

    @property
    def sha(self) -> str:
        return self.info.sha

    @property
    def short_sha(self) -> str:
        return self.info.sha[:SHORT_SHA_LENGTH]

    @property
    def display_summary(self) -> str:
        return self.info.summary if self.info.summary is not None else NO_SUMMARY_PLACEHOLDER

    @property
    def display_author(self) -> str:
        return self.info.author if self.info.author is not None else UNKNOWN_AUTHOR_PLACEHOLDER

    @property
    def timestamp(self) -> int:
        return self.info.timestamp

    @property
    def is_merge(self) -> bool:
        return len(self.info.parents) > 1


class WalkStop(Enum):
    """Why a stack walk ended."""

    BOUNDED = "bounded"
    MERGE = "merge"
    ROOT = "root"
    DETACHED = "detached"


@dataclass(frozen=True)
class StackWalk:
    """Commits gathered from HEAD toward the root, and why gathering stopped."""

    commits: tuple[CommitDescriptor, ...]
    stop: WalkStop


@dataclass(frozen=True)
class BranchIndex:
    """Lookup from commit SHA to the local branch pointing at it.

    When several branches target the same commit, the one enumerated last wins.
    """

    by_commit: Mapping[str, BranchRef]
    untargeted: tuple[BranchRef, ...]

    def branch_for(self, sha: str) -> BranchRef | None:
        return self.by_commit.get(sha)


@dataclass(frozen=True)
class StackEntry:
    commit: CommitDescriptor
    branch: str | None


@dataclass(frozen=True)
class UpstreamLink:
    branch: str
    upstream: str


@dataclass(frozen=True)
class SkippedBranch:
    """A branch left out of the upstream chain output, with the reason."""

    branch: str | None
    reason: str


@dataclass(frozen=True)
class UpstreamResolution:
    """Per-branch outcomes of upstream resolution, in enumeration order."""

    outcomes: tuple[UpstreamLink | SkippedBranch, ...]

    @property
    def links(self) -> list[UpstreamLink]:
        return [o for o in self.outcomes if isinstance(o, UpstreamLink)]

    @property
    def skipped(self) -> list[SkippedBranch]:
        return [o for o in self.outcomes if isinstance(o, SkippedBranch)]


def build_branch_index(branches: Sequence[BranchRef]) -> BranchIndex:
    """Index branches by the commit they point at.

    Branches without a target are excluded from the index and returned in
    BranchIndex.untargeted so the caller can report them.

    Args:
        branches: Local branches in enumeration order

    Returns:
        Immutable BranchIndex for this invocation
    """
    by_commit: dict[str, BranchRef] = {}
    untargeted: list[BranchRef] = []

    for branch in branches:
        if branch.target is None:
            untargeted.append(branch)
            continue
        previous = by_commit.get(branch.target)
        if previous is not None:
            logger.debug(
                "Branches %s and %s both target %s; keeping %s",
                previous.refname,
                branch.refname,
                branch.target,
                branch.refname,
            )
        by_commit[branch.target] = branch

    return BranchIndex(by_commit=MappingProxyType(by_commit), untargeted=tuple(untargeted))


def walk_stack(git: Git, repo_root: Path, cwd: Path) -> StackWalk:
    """Walk first-parent history from HEAD toward the root.

    Stops after STACK_DEPTH_LIMIT commits, after emitting a merge commit, or
    at a root commit. If HEAD is not on a branch nothing is read and the walk
    stops as DETACHED.

    Args:
        git: Git implementation to read through
        repo_root: Repository root for object reads
        cwd: Working directory whose HEAD starts the walk

    Returns:
        StackWalk with between 0 and STACK_DEPTH_LIMIT commits

    Raises:
        GitReadError: If HEAD or any commit cannot be read
    """
    current_branch = git.get_current_branch(cwd)
    if current_branch is None:
        logger.debug("HEAD is detached in %s; not walking", cwd)
        return StackWalk(commits=(), stop=WalkStop.DETACHED)

    sha = git.get_head_commit(cwd)
    logger.debug("Walking stack from %s (%s)", current_branch, sha)

    commits: list[CommitDescriptor] = []
    while True:
        commit = CommitDescriptor(info=git.read_commit(repo_root, sha))
        commits.append(commit)

        if len(commits) == STACK_DEPTH_LIMIT:
            stop = WalkStop.BOUNDED
            break
        if commit.is_merge:
            stop = WalkStop.MERGE
            break
        if not commit.info.parents:
            stop = WalkStop.ROOT
            break
        sha = commit.info.parents[0]

    logger.debug("Stack walk stopped (%s) after %d commits", stop.value, len(commits))
    return StackWalk(commits=tuple(commits), stop=stop)


def annotate_stack(walk: StackWalk, index: BranchIndex) -> list[StackEntry]:
    """Attach the indexed branch name, if any, to each walked commit."""
    entries: list[StackEntry] = []
    for commit in walk.commits:
        branch = index.branch_for(commit.sha)
        name = branch.name if branch is not None else None
        entries.append(StackEntry(commit=commit, branch=name))
    return entries


def resolve_upstream_chains(
    git: Git, repo_root: Path, branches: Sequence[BranchRef]
) -> UpstreamResolution:
    """Pair every named branch with the name of its configured upstream.

    Only branches where both names resolve produce a link. Every other branch
    is recorded as skipped with a reason; read errors for one branch do not
    stop resolution of the others.

    Args:
        git: Git implementation to read through
        repo_root: Repository root
        branches: Local branches in enumeration order

    Returns:
        UpstreamResolution with one outcome per branch, in enumeration order
    """
    outcomes: list[UpstreamLink | SkippedBranch] = []

    for branch in branches:
        if branch.name is None:
            outcomes.append(SkippedBranch(branch=None, reason="branch has no name"))
            continue

        try:
            upstream = git.get_branch_upstream(repo_root, branch)
        except GitReadError as e:
            logger.debug("Upstream lookup failed for %s: %s", branch.refname, e)
            outcomes.append(SkippedBranch(branch=branch.name, reason=str(e)))
            continue

        if upstream is None:
            outcomes.append(SkippedBranch(branch=branch.name, reason="no upstream configured"))
            continue

        if upstream.name is None:
            outcomes.append(SkippedBranch(branch=branch.name, reason="upstream has no name"))
            continue

        outcomes.append(UpstreamLink(branch=branch.name, upstream=upstream.name))

    return UpstreamResolution(outcomes=tuple(outcomes))
