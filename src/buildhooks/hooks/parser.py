"""
Parsing of hook references.

A hook field (``build.before_build`` / ``build.after_build``) holds a single
hook reference or a list of them. Each reference is a whitespace-separated
string::

    TARGET [ARG ...]

where TARGET is either the path of a Python script or a builtin marker
``$(name)``. Arguments are split on whitespace; there is no quoting.
"""

from __future__ import annotations

import collections.abc as _abc
import re as _re
import typing as _typing

import buildhooks.hooks.registry as registry_mod
import buildhooks.hooks.script as script
import buildhooks.hooks.types as types

if _typing.TYPE_CHECKING:
    import buildhooks.descriptor as descriptor_mod

# Opening of a builtin marker: leading "$(" and the name up to ")" or whitespace
_BUILTIN_OPEN_RE = _re.compile(r"^\s*\$\(([^)\s]*)")
# What must follow the name
_BUILTIN_CLOSE_RE = _re.compile(r"\)\s*")


def resolve_builtin_hook(
    target: str,
    registry: registry_mod.BuiltinHookRegistry,
) -> types.HookFunc | None:
    """
    Resolve a ``$(name)`` target through the registry.

    Args:
        target: The hook target.
        registry: Registry to look the name up in.

    Returns:
        The hook callable, or None if the target is not a builtin marker.

    Raises:
        HookConfigError: If the marker is malformed, unknown or not callable.
    """
    match = _BUILTIN_OPEN_RE.match(target)
    if match is None:
        return None
    if not _BUILTIN_CLOSE_RE.fullmatch(target, match.end()):
        raise types.HookConfigError("Invalid builtin hook syntax")

    name = match.group(1)
    if not name:
        raise types.HookConfigError("Invalid builtin hook syntax: missing name")

    try:
        func = registry.get_or_raise(name)
    except KeyError as e:
        raise types.HookConfigError(
            f"Failed to load builtin-hook {name}: {e.args[0]}"
        ) from e

    if not callable(func):
        raise types.HookConfigError(f"Invalid builtin-hook {name}: not a function")
    return func  # type: ignore[no-any-return]


def parse_hook(
    value: str,
    display_name: str,
    *,
    registry: registry_mod.BuiltinHookRegistry,
    modules: _typing.Iterable[str] | None = None,
) -> types.HookDescriptor:
    """
    Parse and resolve a single hook reference.

    Args:
        value: The hook reference string.
        display_name: Name of the hook in messages.
        registry: Registry used for ``$(name)`` targets.
        modules: Context modules for script hooks.

    Raises:
        HookConfigError: If the reference is empty or cannot be resolved.
    """
    tokens = value.split()
    if not tokens:
        raise types.HookConfigError("empty hook")
    target, args = tokens[0], tuple(tokens[1:])

    kind = types.HookKind.BUILTIN
    func = resolve_builtin_hook(target, registry)
    if func is None:
        kind = types.HookKind.SCRIPT
        func = script.load_hook_script(target, modules=modules)

    return types.HookDescriptor(
        display_name=display_name,
        value=" ".join(tokens),
        target=target,
        args=args,
        func=func,
        kind=kind,
    )


def parse_hooks(
    descriptor: descriptor_mod.BuildDescriptor,
    name: str,
    *,
    registry: registry_mod.BuiltinHookRegistry | None = None,
    modules: _typing.Iterable[str] | None = None,
) -> list[types.HookDescriptor]:
    """
    Parse every hook of a build field, in order.

    Every hook is resolved before returning, so a bad reference is reported
    before anything runs.

    Args:
        descriptor: The build descriptor.
        name: Field of the build section, ``before_build`` or ``after_build``.
        registry: Builtin hook registry. Defaults to the global registry.
        modules: Context modules for script hooks.

    Returns:
        The parsed hooks. Empty if the field is not set.

    Raises:
        HookConfigError: If the field or any hook reference is invalid.
    """
    field_path = f"build.{name}"
    hooks = getattr(descriptor.build, name)
    if hooks is None or hooks is False:
        return []

    if registry is None:
        registry = registry_mod.get_default_registry()

    if isinstance(hooks, str):
        values = [hooks]
        is_array = False
    elif isinstance(hooks, _abc.Mapping):
        if hooks:
            raise types.HookConfigError(f"{field_path} must be an array of strings")
        return []
    elif isinstance(hooks, (list, tuple)):
        if not all(isinstance(v, str) for v in hooks):
            raise types.HookConfigError(f"{field_path} must be an array of strings")
        values = list(hooks)
        is_array = True
    else:
        raise types.HookConfigError(f"Invalid hook type: {type(hooks).__name__}")

    parsed: list[types.HookDescriptor] = []
    for index, value in enumerate(values, start=1):
        display_name = f"{field_path}#{index}" if is_array else field_path
        try:
            parsed.append(
                parse_hook(value, display_name, registry=registry, modules=modules)
            )
        except types.HookConfigError as e:
            raise types.HookConfigError(f"{display_name}: {e}") from e
    return parsed
