"""Configuration section models for buildhooks settings.

- PkgConfigConfig: pkg-config executable, timeout, unresolved-package policy
- ScriptsConfig: modules copied into script-hook contexts
"""

import pydantic as _pydantic

import buildhooks.hooks.context as hooks_context


class ConfigBase(_pydantic.BaseModel):
    """Base class for config sections. Unknown keys are rejected."""

    model_config = _pydantic.ConfigDict(extra="forbid")


class PkgConfigConfig(ConfigBase):
    """Settings of the ``$(pkgconfig)`` builtin hook."""

    executable: str = "pkg-config"
    """pkg-config executable (name on PATH or absolute path)."""

    timeout: float = _pydantic.Field(default=30, gt=0)
    """Seconds before a pkg-config invocation is abandoned."""

    continue_on_unresolved: bool = False
    """Keep going after a dependency pkg-config doesn't know.

    By default the first unknown dependency ends the scan and the
    remaining dependencies are left untouched.
    """


class ScriptsConfig(ConfigBase):
    """Settings of script hooks."""

    context_modules: list[str] = _pydantic.Field(
        default_factory=lambda: list(hooks_context.DEFAULT_CONTEXT_MODULES)
    )
    """Modules copied into the context of every script hook."""
