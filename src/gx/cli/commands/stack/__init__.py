"""Stack commands for inspecting stacked commits and branches."""

import click

from gx.cli.commands.stack.list_cmd import list_stack


@click.group("stack")
def stack_group() -> None:
    """Create and manage stacked PRs and commits."""
    pass


# Register subcommands
stack_group.add_command(list_stack, name="list")
