"""Output utilities for CLI commands with clear intent."""

import click


def user_output(message: str = "", *, color: bool | None = None) -> None:
    """Print a line meant for the person at the terminal.

    Args:
        message: Text to print (may contain click.style escapes)
        color: False strips ANSI styling, None lets click decide from the stream
    """
    click.echo(message, color=color)


def error_prefix() -> str:
    """Red "Error: " prefix shared by all diagnostics."""
    return click.style("Error: ", fg="red")
