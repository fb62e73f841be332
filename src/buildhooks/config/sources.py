"""Custom pydantic-settings source for buildhooks configuration.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .buildhooks/config.yaml in the project root
3. User config: ~/.config/buildhooks/config.yaml (or BUILDHOOKS_CONFIG_DIR)

Nested mappings from the layers are merged key by key; any other value
in a higher layer replaces the lower one.

Environment variables:
- BUILDHOOKS_CONFIG_DIR: Override user config directory (default: ~/.config/buildhooks)
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "BUILDHOOKS_CONFIG_DIR"

PROJECT_CONFIG_PATH = _pathlib.Path(".buildhooks") / "config.yaml"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_user_config_path() -> _pathlib.Path:
    """Get path to user config, respecting BUILDHOOKS_CONFIG_DIR."""
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env) / "config.yaml"
    return _pathlib.Path.home() / ".config" / "buildhooks" / "config.yaml"


def merge_layers(
    base: _abc.Mapping[str, _typing.Any],
    override: _abc.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """Merge ``override`` into a copy of ``base``, recursing into mappings."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, _abc.Mapping) and isinstance(value, _abc.Mapping):
            merged[key] = merge_layers(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Load a YAML config file.

    Returns:
        The parsed mapping (empty for an empty file).

    Raises:
        ConfigFileError: If the file can't be read, isn't valid YAML, or
            doesn't hold a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
        data = _yaml.safe_load(content)
    except OSError as e:
        raise ConfigFileError(path, str(e)) from e
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, f"expected a mapping, got {type(data).__name__}")
    return data


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads layered YAML config files.

    Layers (lowest to highest precedence):
    1. User config (~/.config/buildhooks/config.yaml)
    2. Project config (.buildhooks/config.yaml)
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Project root for the project-level config.
                Defaults to the current directory.
            user_config_path: Override path for user config file (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root or _pathlib.Path.cwd()
        self._user_config_path = user_config_path or get_user_config_path()
        self._data = self._load_layers()

    def _load_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}
        for path in (self._user_config_path, self._project_root / PROJECT_CONFIG_PATH):
            # Missing config files are normal
            if path.is_file():
                merged = merge_layers(merged, load_yaml_file(path))
        return merged

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return merged config as a plain dict for Pydantic validation."""
        return dict(self._data)
