"""
Build descriptor passed through the whole hook pipeline.

The descriptor is owned by the caller for the duration of one build.
Hooks and the standard build step mutate it in place; it is never copied.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

# Keys of the ``build`` section understood by the hook backend
_BUILD_KEYS = (
    "before_build",
    "after_build",
    "extra_variables",
    "conditional_variables",
)


@_dataclasses.dataclass
class BuildSection:
    """
    The ``build`` sub-record of a descriptor.

    Hook fields are left untyped on purpose: they come straight from user
    configuration and are validated by the hook parser, which reports
    malformed values with their field path.

    Attributes:
        before_build: Hook reference(s) run before the standard build.
        after_build: Hook reference(s) run after the standard build.
        extra_variables: Values appended to existing variables.
        conditional_variables: Flag name -> values appended when the flag
            is enabled in the environment.
        extra: Any other keys of the build section (build type, modules, ...).
    """

    before_build: _typing.Any = None
    after_build: _typing.Any = None
    extra_variables: _typing.Any = None
    conditional_variables: _typing.Any = None
    extra: dict[str, _typing.Any] = _dataclasses.field(default_factory=dict)


@_dataclasses.dataclass
class BuildDescriptor:
    """
    In-memory build configuration.

    Attributes:
        variables: The variable store shared by every hook.
        external_dependencies: Dependency names (the keys) with optional
            per-dependency hints.
        build: Build section holding the hook configuration.
        package: Package name, informational only.
    """

    variables: dict[str, _typing.Any] = _dataclasses.field(default_factory=dict)
    external_dependencies: dict[str, _typing.Any] = _dataclasses.field(
        default_factory=dict
    )
    build: BuildSection = _dataclasses.field(default_factory=BuildSection)
    package: str | None = None

    @classmethod
    def from_mapping(cls, data: _typing.Mapping[str, _typing.Any]) -> BuildDescriptor:
        """
        Create a descriptor from a plain mapping (e.g. a loaded rockspec).

        ``variables`` is used as-is so that the caller's store and the
        descriptor's store are the same object.
        """
        build_data = dict(data.get("build") or {})
        section = BuildSection(
            **{key: build_data.pop(key) for key in _BUILD_KEYS if key in build_data},
            extra=build_data,
        )

        variables = data.get("variables")
        if variables is None:
            variables = {}

        ext_deps = data.get("external_dependencies") or {}
        if not isinstance(ext_deps, dict):
            ext_deps = dict.fromkeys(ext_deps)

        return cls(
            variables=variables,
            external_dependencies=ext_deps,
            build=section,
            package=data.get("package"),
        )
