"""
Execution contexts for script hooks.

A script hook runs with a namespace of its own: a private copy of the
builtins and private copies of a set of standard library modules. A hook
that rebinds a module attribute such as ``os.getcwd`` or
``string.ascii_letters`` only changes its own copy; the real module and
the copies seen by other hooks are unaffected. Mutable objects held by
those modules (``os.environ``, ``sys.path``) are still shared.

This limits accidental interference between hooks. It is not a security
boundary: hooks run in-process with full access to the interpreter.
"""

from __future__ import annotations

import builtins as _builtins
import importlib as _importlib
import types as _types
import typing as _typing

# Modules copied into every context unless configured otherwise
DEFAULT_CONTEXT_MODULES: tuple[str, ...] = (
    "os",
    "sys",
    "re",
    "math",
    "string",
    "json",
    "shutil",
    "pathlib",
)

CONTEXT_MODULE_NAME = "__buildhook__"


def copy_module(
    module: _types.ModuleType,
    visited: dict[int, _types.ModuleType] | None = None,
) -> _types.ModuleType:
    """
    Copy a module, recursively copying module-valued attributes.

    Functions, classes and other values are shared with the source; only
    the module objects themselves (their attribute tables) are duplicated.

    Args:
        module: Module to copy.
        visited: Copies made so far, keyed by ``id()`` of the source module.
            Modules referencing each other (``os.path.os is os``) resolve to
            the same copy instead of recursing forever.

    Returns:
        The copy.
    """
    if visited is None:
        visited = {}

    existing = visited.get(id(module))
    if existing is not None:
        return existing

    clone = _types.ModuleType(module.__name__, module.__doc__)
    visited[id(module)] = clone

    for name, value in vars(module).items():
        if isinstance(value, _types.ModuleType):
            value = copy_module(value, visited)
        setattr(clone, name, value)
    return clone


def _make_import(
    modules: dict[str, _types.ModuleType],
) -> _typing.Callable[..., _types.ModuleType]:
    """Build an ``__import__`` that serves context modules from their copies."""
    real_import = _builtins.__import__

    def _import(
        name: str,
        globals: _typing.Any = None,
        locals: _typing.Any = None,
        fromlist: _typing.Sequence[str] = (),
        level: int = 0,
    ) -> _types.ModuleType:
        if level == 0:
            top, _, rest = name.partition(".")
            module = modules.get(top)
            if module is not None:
                if not rest:
                    return module
                if not fromlist:
                    # "import os.path" binds the top-level package
                    real_import(name, globals, locals, fromlist, level)
                    return module
                # "from os.path import join" wants the submodule's copy
                try:
                    for part in rest.split("."):
                        module = getattr(module, part)
                    return module
                except AttributeError:
                    pass
        return real_import(name, globals, locals, fromlist, level)

    return _import


def build_context(
    *,
    modules: _typing.Iterable[str] | None = None,
) -> dict[str, _typing.Any]:
    """
    Build a fresh namespace for running one script hook.

    Args:
        modules: Names of modules to copy into the context. Defaults to
            ``DEFAULT_CONTEXT_MODULES``.

    Returns:
        A dict suitable as the globals of ``exec()``. The copied modules are
        bound by name and also returned by ``import`` inside the hook.
    """
    if modules is None:
        modules = DEFAULT_CONTEXT_MODULES

    visited: dict[int, _types.ModuleType] = {}
    copies: dict[str, _types.ModuleType] = {}
    for name in modules:
        copies[name] = copy_module(_importlib.import_module(name), visited)

    context_builtins = dict(vars(_builtins))
    context_builtins["__import__"] = _make_import(copies)

    context: dict[str, _typing.Any] = {
        "__builtins__": context_builtins,
        "__name__": CONTEXT_MODULE_NAME,
    }
    context.update(copies)
    return context
