"""Text rendering for stack listings and upstream chains.

All functions are pure (no I/O): they turn core data into lines that the
commands print.
"""

import click

from gx.core.stack import SkippedBranch, StackEntry, UpstreamLink

UNKNOWN_BRANCH_PLACEHOLDER = "<unknown branch>"

# One marker per stage of the upstream chain diagram, top to bottom
CHAIN_MARKERS = ("◉", "○", "⦿")
CHAIN_CONNECTOR = "｜"
CHAIN_CONNECTOR_HEIGHT = 3


def format_stack_entry(entry: StackEntry) -> str:
    """Format one stack commit as a single line.

    Example:
        * 1a2b3c4 - (feature-a) Add parser (1700000000) <Jane Doe>
    """
    commit = entry.commit
    parts = [
        "*",
        click.style(commit.short_sha, fg="red", bold=True),
        "-",
    ]
    if entry.branch is not None:
        parts.append(click.style(f"({entry.branch})", fg="yellow", bold=True))
    parts.append(click.style(commit.display_summary, bold=True))
    parts.append(click.style(f"({commit.timestamp})", fg="green", bold=True))
    parts.append(click.style(f"<{commit.display_author}>", fg="blue", bold=True))
    return " ".join(parts)


def format_upstream_chain(link: UpstreamLink) -> list[str]:
    """Render a branch/upstream pair as a three-stage chain diagram."""
    branch = click.style(link.branch, fg="blue", bold=True)
    upstream = click.style(link.upstream, fg="green", bold=True)

    lines: list[str] = []
    for i, marker in enumerate(CHAIN_MARKERS):
        if i > 0:
            lines.extend([CHAIN_CONNECTOR] * CHAIN_CONNECTOR_HEIGHT)
        lines.append(f"{marker}  branch: {branch}, upstream: {upstream}")
    return lines


def format_skipped_branch(skipped: SkippedBranch) -> str:
    """Format the informational line for a branch left out of the chains."""
    name = skipped.branch if skipped.branch is not None else UNKNOWN_BRANCH_PLACEHOLDER
    return f"Skipping branch {name}: {skipped.reason}."


def format_untargeted_branch(name: str | None) -> str:
    """Format the warning for a branch that does not point at a commit."""
    display = name if name is not None else UNKNOWN_BRANCH_PLACEHOLDER
    return click.style("Warning: ", fg="yellow") + f"Branch {display} has no target."
