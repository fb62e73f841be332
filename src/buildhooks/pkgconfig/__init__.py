"""
pkg-config integration.

Resolves external dependencies with pkg-config and reconciles their
metadata into the build variables.
"""

from buildhooks.pkgconfig.client import PkgConfig, PkgConfigError, create_client
from buildhooks.pkgconfig.reconcile import (
    VAR_MAP,
    extract_variables,
    update_variables,
)
from buildhooks.pkgconfig.resolver import find_package

__all__ = [
    "VAR_MAP",
    "PkgConfig",
    "PkgConfigError",
    "create_client",
    "extract_variables",
    "find_package",
    "update_variables",
]
