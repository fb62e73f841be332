"""
Script hooks - Python files run in an isolated context.

A script hook is a plain Python file. It runs with two extra globals:

    descriptor  the BuildDescriptor being built (mutable)
    args        tuple of the string arguments given after the script path

Example ``hooks/add_define.py``::

    name, value = args
    descriptor.variables["CFLAGS"] += f" -D{name}={value}"

configured as ``before_build: "hooks/add_define.py VERSION 3"``.
Raising any exception fails the build.
"""

from __future__ import annotations

import pathlib as _pathlib
import types as _types
import typing as _typing

import buildhooks.hooks.context as context
import buildhooks.hooks.types as types

if _typing.TYPE_CHECKING:
    import buildhooks.descriptor as descriptor_mod


class ScriptHook:
    """
    A compiled hook script.

    The script is compiled once, when the hook is parsed. Each call runs it
    in a freshly built context that is discarded afterwards.
    """

    def __init__(
        self,
        path: _pathlib.Path,
        code: _types.CodeType,
        *,
        modules: _typing.Iterable[str] | None = None,
    ) -> None:
        self.path = path
        self._code = code
        self._modules = tuple(modules) if modules is not None else None

    def __call__(
        self,
        descriptor: descriptor_mod.BuildDescriptor,
        *args: str,
    ) -> None:
        namespace = context.build_context(modules=self._modules)
        namespace["__file__"] = str(self.path)
        namespace["descriptor"] = descriptor
        namespace["args"] = args
        exec(self._code, namespace)

    def __repr__(self) -> str:
        return f"ScriptHook({str(self.path)!r})"


def load_hook_script(
    pathname: str,
    *,
    modules: _typing.Iterable[str] | None = None,
) -> ScriptHook:
    """
    Load a hook script.

    Args:
        pathname: Script path, relative to the current directory.
        modules: Modules copied into the script's context (see
            ``context.build_context``).

    Returns:
        The compiled hook.

    Raises:
        HookConfigError: If the file doesn't exist or fails to compile.
    """
    path = _pathlib.Path(pathname)
    if not path.is_file():
        raise types.HookConfigError(f'"{pathname}" hook script not found')

    try:
        source = path.read_bytes()
        code = compile(source, str(path), "exec")
    except (SyntaxError, ValueError, OSError) as e:
        raise types.HookConfigError(
            f'Failed to load hook script "{pathname}": {e}'
        ) from e

    return ScriptHook(path, code, modules=modules)
