"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from gx.core.git.abc import Git
from gx.core.git.real import RealGit
from gx.core.global_config import GlobalConfig, load_global_config
from gx.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel


@dataclass(frozen=True)
class GxContext:
    """Immutable context holding all dependencies for gx operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    cwd: Path  # Current working directory at CLI invocation
    global_config: GlobalConfig
    repo: RepoContext | NoRepoSentinel

    @staticmethod
    def for_test(
        git: Git | None = None,
        cwd: Path | None = None,
        global_config: GlobalConfig | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
    ) -> "GxContext":
        """Create test context with optional pre-configured values.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            cwd: Optional current working directory. If None, uses Path("/test/default/cwd").
            global_config: Optional GlobalConfig. If None, uses defaults.
            repo: Optional RepoContext or NoRepoSentinel. If None, discovers the
                  repository through `git` starting at `cwd`.

        Returns:
            GxContext configured with provided values and test defaults

        Example:
            >>> git = FakeGit(current_branches={Path("/repo"): "feature"})
            >>> ctx = GxContext.for_test(git=git, cwd=Path("/repo"))
        """
        from tests.fakes.git import FakeGit

        if git is None:
            git = FakeGit()

        if cwd is None:
            cwd = Path("/test/default/cwd")

        if global_config is None:
            global_config = GlobalConfig()

        if repo is None:
            repo = discover_repo_or_sentinel(cwd, git)

        return GxContext(git=git, cwd=cwd, global_config=global_config, repo=repo)


def create_context(*, config_path: Path | None = None) -> GxContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        config_path: Optional global config path (defaults to ~/.gx/config.toml)

    Returns:
        GxContext with real implementations

    Raises:
        ValueError: If the global config file is malformed
    """
    # 1. Capture cwd (no deps)
    cwd = Path.cwd()

    # 2. Load global config (defaults if the file doesn't exist)
    global_config = load_global_config(config_path)

    # 3. Create git and discover repo
    git: Git = RealGit()
    repo = discover_repo_or_sentinel(cwd, git)

    return GxContext(git=git, cwd=cwd, global_config=global_config, repo=repo)
