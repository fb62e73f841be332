"""
Hook system for buildhooks.

Hooks run immediately before and after the standard build step. They are
configured in the build section of the descriptor:

    build:
      before_build:
        - $(pkgconfig)
        - scripts/configure.py --with-ssl
      after_build: scripts/strip.py

Example usage:
    from buildhooks.hooks import run

    result = run(descriptor, standard_build, target_dir=build_dir)
    if not result:
        print(result.error)
"""

from buildhooks.hooks.context import build_context, copy_module
from buildhooks.hooks.parser import parse_hook, parse_hooks
from buildhooks.hooks.registry import (
    BuiltinHookRegistry,
    create_default_registry,
    get_default_registry,
)
from buildhooks.hooks.runner import (
    WorkingDirectoryError,
    protected_call,
    run,
    run_hooks,
    working_directory,
)
from buildhooks.hooks.script import ScriptHook, load_hook_script
from buildhooks.hooks.types import (
    BuildResult,
    HookConfigError,
    HookDescriptor,
    HookKind,
    StandardBuild,
)

__all__ = [
    "BuildResult",
    "BuiltinHookRegistry",
    "HookConfigError",
    "HookDescriptor",
    "HookKind",
    "ScriptHook",
    "StandardBuild",
    "WorkingDirectoryError",
    "build_context",
    "copy_module",
    "create_default_registry",
    "get_default_registry",
    "load_hook_script",
    "parse_hook",
    "parse_hooks",
    "protected_call",
    "run",
    "run_hooks",
    "working_directory",
]
