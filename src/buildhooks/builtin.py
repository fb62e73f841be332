"""
Builtin hooks shipped with buildhooks.

Referenced from the build configuration as ``$(name)``::

    build:
      before_build:
        - $(pkgconfig)
        - $(extra-vars)
"""

from __future__ import annotations

import typing as _typing

import buildhooks.pkgconfig.reconcile as reconcile
import buildhooks.variables as variables

if _typing.TYPE_CHECKING:
    import buildhooks.descriptor as descriptor_mod


def resolve_pkgconfig(descriptor: descriptor_mod.BuildDescriptor, *args: str) -> None:
    """The ``$(pkgconfig)`` builtin hook."""
    reconcile.reconcile(descriptor)


BUILTIN_HOOKS: dict[str, _typing.Callable[..., None]] = {
    "pkgconfig": resolve_pkgconfig,
    "extra-vars": variables.append_extra_vars,
}
