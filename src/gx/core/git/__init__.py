"""Git operations subpackage.

This subpackage provides a read-only abstraction over git with support for
testing via fakes.
"""

from gx.core.git.abc import BranchRef, CommitInfo, Git, GitReadError, UpstreamRef
from gx.core.git.real import RealGit

__all__ = [
    "Git",
    "GitReadError",
    "BranchRef",
    "UpstreamRef",
    "CommitInfo",
    "RealGit",
]
