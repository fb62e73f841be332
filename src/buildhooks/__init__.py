"""
buildhooks - before/after build hooks for package builds

Runs user-defined hooks around a standard build step, with builtin hooks
for pkg-config dependency discovery and additive variable merging.
"""

import importlib.metadata as _metadata

# Version comes from the installed package metadata
_raw_version = _metadata.version("buildhooks")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from buildhooks.config import Settings  # noqa: E402
from buildhooks.descriptor import BuildDescriptor, BuildSection  # noqa: E402
from buildhooks.hooks import BuildResult, run, run_hooks  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "BuildDescriptor",
    "BuildResult",
    "BuildSection",
    "Settings",
    "run",
    "run_hooks",
]
