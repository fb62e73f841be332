"""
Hook sequencer - runs hooks around the standard build.

Order of operations:
1. Parse and resolve ``build.before_build`` and ``build.after_build``.
   Nothing runs if either is invalid.
2. Run the before-hooks in order.
3. Run the standard build.
4. Run the after-hooks in order.

The first failure stops the sequence. Changes already made to the
descriptor by hooks that ran are kept.
"""

from __future__ import annotations

import contextlib as _contextlib
import logging as _logging
import os as _os
import pathlib as _pathlib
import traceback as _traceback
import typing as _typing

import buildhooks.hooks.parser as parser
import buildhooks.hooks.types as types

if _typing.TYPE_CHECKING:
    import buildhooks.config as config
    import buildhooks.descriptor as descriptor_mod
    import buildhooks.hooks.registry as registry_mod

_logger = _logging.getLogger(__name__)


class WorkingDirectoryError(OSError):
    """Raised when the working directory cannot be changed or restored."""

    pass


@_contextlib.contextmanager
def working_directory(
    path: str | _os.PathLike[str],
) -> _typing.Iterator[_pathlib.Path]:
    """
    Change the working directory for the duration of the block.

    The previous directory is restored on every exit path. If restoring
    fails, the resulting ``WorkingDirectoryError`` replaces any exception
    raised inside the block.

    Yields:
        The previous working directory.

    Raises:
        WorkingDirectoryError: If the directory cannot be changed or restored.
    """
    try:
        previous = _pathlib.Path.cwd()
        _os.chdir(path)
    except OSError as e:
        raise WorkingDirectoryError(
            f"Failed to change working directory to {path}: {e}"
        ) from e

    try:
        yield previous
    finally:
        _logger.info("Restoring working directory to %s", previous)
        try:
            _os.chdir(previous)
        except OSError as e:
            raise WorkingDirectoryError(
                f"Failed to restore working directory to {previous}: {e}"
            ) from e


def protected_call(
    func: _typing.Callable[..., _typing.Any],
    *args: _typing.Any,
) -> types.BuildResult:
    """
    Call ``func(*args)``, turning any exception into a failed result.

    ``SystemExit`` counts as a failure; ``KeyboardInterrupt`` propagates.

    The failed result carries the exception message and the formatted
    traceback.
    """
    try:
        func(*args)
    except (Exception, SystemExit) as e:
        return types.BuildResult.failure(
            str(e) or type(e).__name__,
            traceback=_traceback.format_exc(),
        )
    return types.BuildResult.ok()


def _run_hook_list(
    hooks: list[types.HookDescriptor],
    descriptor: descriptor_mod.BuildDescriptor,
) -> types.BuildResult:
    """Run hooks in order, stopping at the first failure."""
    for hook in hooks:
        _logger.info("Running hook: %s", hook.value)
        result = protected_call(hook, descriptor)
        if not result.success:
            _logger.debug("Hook %s failed:\n%s", hook.display_name, result.traceback)
            return types.BuildResult.failure(
                f'Failed to run "{hook.display_name}": {result.error}',
                traceback=result.traceback,
            )
    return types.BuildResult.ok()


def run_hooks(
    descriptor: descriptor_mod.BuildDescriptor,
    standard_build: types.StandardBuild,
    *,
    registry: registry_mod.BuiltinHookRegistry | None = None,
    context_modules: _typing.Iterable[str] | None = None,
) -> types.BuildResult:
    """
    Run before-hooks, the standard build and after-hooks.

    Args:
        descriptor: The build descriptor, mutated in place by the hooks.
        standard_build: The build step to run between the hook lists.
        registry: Builtin hook registry. Defaults to the global registry.
        context_modules: Modules copied into script-hook contexts.

    Returns:
        Success, or the first failure. A failure of the standard build is
        returned unchanged.
    """
    if context_modules is not None:
        context_modules = tuple(context_modules)

    try:
        before_hooks = parser.parse_hooks(
            descriptor, "before_build", registry=registry, modules=context_modules
        )
        after_hooks = parser.parse_hooks(
            descriptor, "after_build", registry=registry, modules=context_modules
        )
    except types.HookConfigError as e:
        return types.BuildResult.failure(str(e))

    result = _run_hook_list(before_hooks, descriptor)
    if not result.success:
        return result

    result = standard_build(descriptor)
    if not result.success:
        return result

    return _run_hook_list(after_hooks, descriptor)


def run(
    descriptor: descriptor_mod.BuildDescriptor,
    standard_build: types.StandardBuild,
    *,
    target_dir: str | _os.PathLike[str] | None = None,
    registry: registry_mod.BuiltinHookRegistry | None = None,
    settings: config.Settings | None = None,
) -> types.BuildResult:
    """
    Run the hook pipeline inside the build's target directory.

    Args:
        descriptor: The build descriptor.
        standard_build: The build step to run between the hook lists.
        target_dir: Directory to build in. Defaults to the current directory.
        registry: Builtin hook registry. Defaults to the global registry.
        settings: Settings providing the script context modules. Loaded if None.

    Returns:
        Result of ``run_hooks``. An exception escaping the standard build
        is reported as a failed result.

    Raises:
        WorkingDirectoryError: If the target directory cannot be entered, or
            the previous directory cannot be restored afterwards.
    """
    if target_dir is None:
        target_dir = _pathlib.Path.cwd()
    if settings is None:
        # Import here to avoid loading settings at import time
        import buildhooks.config as config

        settings = config.Settings()
    context_modules = settings.scripts.context_modules

    _logger.info("Changing working directory to %s", target_dir)
    with working_directory(target_dir):
        try:
            return run_hooks(
                descriptor,
                standard_build,
                registry=registry,
                context_modules=context_modules,
            )
        except (Exception, SystemExit) as e:
            return types.BuildResult.failure(
                str(e) or type(e).__name__,
                traceback=_traceback.format_exc(),
            )
