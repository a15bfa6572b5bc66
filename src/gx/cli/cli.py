import logging
import os

import click

from gx.cli.commands.config import config_group
from gx.cli.commands.stack import stack_group
from gx.cli.output import error_prefix, user_output
from gx.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

# Enable debug logging if GX_DEBUG environment variable is set
if os.getenv("GX_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="gx")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """gx - git extended."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            user_output(error_prefix() + str(e))
            raise SystemExit(1) from e


# Register all commands
cli.add_command(config_group)
cli.add_command(stack_group)


def main() -> None:
    """CLI entry point used by the `gx` console script."""
    cli()
