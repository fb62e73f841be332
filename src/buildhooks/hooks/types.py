"""
Hook descriptor and result dataclasses.

These define the core data structures of the hook pipeline:
- HookKind: Whether a hook is a builtin or a script file
- HookDescriptor: A parsed, resolved hook reference
- BuildResult: Outcome of a hook, of the standard build, or of a whole run
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import typing as _typing

if _typing.TYPE_CHECKING:
    import buildhooks.descriptor as descriptor_mod

HookFunc = _typing.Callable[..., _typing.Any]
"""A hook callable: ``func(descriptor, *args)``. Raises on failure."""


class HookConfigError(ValueError):
    """Raised when a hook reference is malformed or cannot be resolved."""

    pass


class HookKind(_enum.Enum):
    """How a hook target was resolved."""

    BUILTIN = "builtin"
    """``$(name)`` resolved through the builtin hook registry."""

    SCRIPT = "script"
    """A Python script file."""


@_dataclasses.dataclass
class HookDescriptor:
    """
    A parsed hook reference, ready to run.

    Attributes:
        display_name: Field path used in messages, e.g. ``build.before_build#2``
        value: The hook reference with whitespace normalized
        target: Script path or ``$(name)`` marker
        args: Arguments passed to the hook after the descriptor
        func: The resolved callable
        kind: Builtin or script
    """

    display_name: str
    value: str
    target: str
    args: tuple[str, ...]
    func: HookFunc
    kind: HookKind

    def __call__(self, descriptor: descriptor_mod.BuildDescriptor) -> _typing.Any:
        return self.func(descriptor, *self.args)


@_dataclasses.dataclass
class BuildResult:
    """
    Outcome of a build step.

    Attributes:
        success: Whether the step completed
        error: Error message (on failure)
        traceback: Formatted traceback of the failure, when one was captured
    """

    success: bool = True
    error: str | None = None
    traceback: str | None = None

    @classmethod
    def ok(cls) -> BuildResult:
        """Create a successful result."""
        return cls(success=True)

    @classmethod
    def failure(cls, error: str, traceback: str | None = None) -> BuildResult:
        """Create a failed result."""
        return cls(success=False, error=error, traceback=traceback)

    def __bool__(self) -> bool:
        return self.success


StandardBuild = _typing.Callable[["descriptor_mod.BuildDescriptor"], BuildResult]
"""The standard build step the hooks run around."""
