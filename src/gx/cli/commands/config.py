import click

from gx.core.context import GxContext
from gx.core.global_config import (
    GLOBAL_CONFIG_KEYS,
    GlobalConfig,
    global_config_exists,
    global_config_path,
    save_global_config,
)


def _parse_boolean_value(value: str, field_name: str) -> bool:
    """Parse a boolean value from a string.

    Args:
        value: The string value to parse ("true" or "false", case-insensitive)
        field_name: The name of the field being set (for error messages)

    Returns:
        The parsed boolean value

    Raises:
        SystemExit: If the value is not "true" or "false"
    """
    if value.lower() not in ("true", "false"):
        click.echo(f"Invalid boolean value for {field_name}: {value}", err=True)
        raise SystemExit(1)
    return value.lower() == "true"


def _update_global_config_field(
    current_config: GlobalConfig,
    field_name: str,
    value: str,
) -> GlobalConfig:
    """Update a single field in GlobalConfig and return a new instance.

    Raises:
        SystemExit: If the field name is invalid or value is invalid
    """
    match field_name:
        case "use_color":
            return GlobalConfig(
                use_color=_parse_boolean_value(value, field_name),
                show_upstreams=current_config.show_upstreams,
            )
        case "show_upstreams":
            return GlobalConfig(
                use_color=current_config.use_color,
                show_upstreams=_parse_boolean_value(value, field_name),
            )
        case _:
            click.echo(f"Invalid global config field: {field_name}", err=True)
            raise SystemExit(1)


def _format_bool(value: bool) -> str:
    return str(value).lower()


@click.group("config")
def config_group() -> None:
    """Manage gx configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: GxContext) -> None:
    """Print a list of configuration keys and values."""
    click.echo(click.style("Global configuration:", bold=True))
    if not global_config_exists():
        click.echo(f"  (using defaults - {global_config_path()} does not exist)")
    click.echo(f"  use_color={_format_bool(ctx.global_config.use_color)}")
    click.echo(f"  show_upstreams={_format_bool(ctx.global_config.show_upstreams)}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: GxContext, key: str) -> None:
    """Print the value of a given configuration key."""
    match key:
        case "use_color":
            click.echo(_format_bool(ctx.global_config.use_color))
        case "show_upstreams":
            click.echo(_format_bool(ctx.global_config.show_upstreams))
        case _:
            click.echo(f"Invalid key: {key}", err=True)
            click.echo(f"Valid keys: {', '.join(GLOBAL_CONFIG_KEYS)}", err=True)
            raise SystemExit(1)


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: GxContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key."""
    new_config = _update_global_config_field(ctx.global_config, key, value)
    save_global_config(new_config)
    click.echo(f"Set {key}={_format_bool(getattr(new_config, key))}")
