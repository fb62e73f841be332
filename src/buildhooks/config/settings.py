"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with BUILDHOOKS_ prefix
3. .env file (if present)
4. Layered YAML config files:
   - Project config: .buildhooks/config.yaml
   - User config: ~/.config/buildhooks/config.yaml

Nested config uses double underscore delimiter:
  BUILDHOOKS_PKGCONFIG__EXECUTABLE=/usr/bin/pkgconf
  BUILDHOOKS_PKGCONFIG__CONTINUE_ON_UNRESOLVED=true
"""

import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import buildhooks.config.sources as sources
import buildhooks.config.types as types


class Settings(_pydantic_settings.BaseSettings):
    """
    buildhooks configuration settings.

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (BUILDHOOKS_*)
    3. .env file
    4. Project config (.buildhooks/config.yaml)
    5. User config (~/.config/buildhooks/config.yaml)
    6. Field defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="BUILDHOOKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # BUILDHOOKS_PKGCONFIG__TIMEOUT
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (BUILDHOOKS_* env vars)
        3. dotenv_settings (.env file)
        4. YAML config files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading the .env file.

        Useful for test isolation and for reproducing issues without .env
        interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    pkgconfig: types.PkgConfigConfig = _pydantic.Field(
        default_factory=types.PkgConfigConfig
    )
    """Settings of the $(pkgconfig) builtin hook."""

    scripts: types.ScriptsConfig = _pydantic.Field(default_factory=types.ScriptsConfig)
    """Settings of script hooks."""
