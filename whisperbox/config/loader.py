"""Configuration loading utilities."""

import json
import re
from pathlib import Path
from typing import Any

from whisperbox.config.schema import WhisperBoxConfig

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# (path, config) of the last load; the CLI reads a single file per process.
_loaded: tuple[Path, WhisperBoxConfig] | None = None


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".whisperbox" / "config.json"


def get_data_dir() -> Path:
    """Get the whisperbox data directory."""
    return Path.home() / ".whisperbox"


def load_config(config_path: Path | None = None) -> WhisperBoxConfig:
    """
    Load configuration from file or create default.

    WHISPERBOX_* environment variables are applied on top of the file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.

    Raises:
        ValueError: The file is not valid JSON or holds invalid values.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return WhisperBoxConfig()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        return WhisperBoxConfig(**convert_keys(data))
    except ValueError as e:
        raise ValueError(
            f"Failed to load config from {path}: {e}. "
            "Fix the file or remove it to regenerate defaults."
        ) from e


def get_config(config_path: Path | None = None) -> WhisperBoxConfig:
    """Return the config for ``config_path``, loading it on first use."""
    global _loaded
    path = (config_path or get_config_path()).expanduser()
    if _loaded is None or _loaded[0] != path:
        _loaded = (path, load_config(path))
    return _loaded[1]


def clear_config_cache() -> None:
    global _loaded
    _loaded = None


def save_config(config: WhisperBoxConfig, config_path: Path | None = None) -> Path:
    """Write configuration as camelCase JSON and return the path written."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(config.model_dump(mode="json"))
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


def _rename_keys(data: Any, rename) -> Any:
    if isinstance(data, dict):
        return {rename(k): _rename_keys(v, rename) for k, v in data.items()}
    if isinstance(data, list):
        return [_rename_keys(item, rename) for item in data]
    return data


def convert_keys(data: Any) -> Any:
    """camelCase keys (as stored on disk) to snake_case field names."""
    return _rename_keys(data, camel_to_snake)


def convert_to_camel(data: Any) -> Any:
    return _rename_keys(data, snake_to_camel)


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
