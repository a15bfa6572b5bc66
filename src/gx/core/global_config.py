"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.gx/config.toml. A missing
file means every setting takes its default.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in GxContext.
    """

    use_color: bool = True
    show_upstreams: bool = True


GLOBAL_CONFIG_KEYS = ("use_color", "show_upstreams")


def global_config_path() -> Path:
    """Get the path to the global config file."""
    return Path.home() / ".gx" / "config.toml"


def global_config_exists(path: Path | None = None) -> bool:
    """Check if global config file exists.

    Args:
        path: Config file path (defaults to ~/.gx/config.toml)
    """
    config_path = path if path is not None else global_config_path()
    return config_path.exists()


def _read_bool(data: dict, key: str, default: bool, config_path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' in {config_path} must be true or false, got {value!r}")
    return value


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config from ~/.gx/config.toml.

    Args:
        path: Config file path (defaults to ~/.gx/config.toml)

    Returns:
        GlobalConfig with loaded values, or defaults if the file doesn't exist

    Raises:
        ValueError: If the file is not valid TOML or a value has the wrong type
    """
    config_path = path if path is not None else global_config_path()

    if not config_path.exists():
        return GlobalConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    return GlobalConfig(
        use_color=_read_bool(data, "use_color", True, config_path),
        show_upstreams=_read_bool(data, "show_upstreams", True, config_path),
    )


def save_global_config(config: GlobalConfig, path: Path | None = None) -> None:
    """Save global config to ~/.gx/config.toml.

    Existing comments and unrelated keys are preserved using tomlkit.

    Args:
        config: GlobalConfig instance to save
        path: Config file path (defaults to ~/.gx/config.toml)
    """
    config_path = path if path is not None else global_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()
        doc.add(tomlkit.comment("Global gx configuration"))

    doc["use_color"] = config.use_color
    doc["show_upstreams"] = config.show_upstreams

    with config_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
