"""Package name lookup against ``pkg-config --list-all``."""

from __future__ import annotations

import logging as _logging

import buildhooks.pkgconfig.client as client_mod

_logger = _logging.getLogger(__name__)


def find_package(
    name: str,
    client: client_mod.PkgConfig | None = None,
) -> tuple[str | None, list[str]]:
    """
    Find a package by name, ignoring case.

    The package list is filtered case-insensitively by ``name`` (anywhere
    in the line, like ``grep -i``). An exact, case-sensitive match wins
    immediately; otherwise the first match whose name equals ``name``
    ignoring case is returned.

    Args:
        name: Package name to look for.
        client: pkg-config client. Created from Settings if None.

    Returns:
        ``(resolved_name, suggestions)``. ``resolved_name`` is None if no
        package matched; ``suggestions`` lists every matching package name
        in pkg-config's output order. If pkg-config cannot be run, returns
        ``(None, [])``.
    """
    if client is None:
        client = client_mod.create_client()

    try:
        lines = client.list_all()
    except client_mod.PkgConfigError as e:
        _logger.warning("%s", e)
        return None, []

    needle = name.lower()
    suggestions: list[str] = []
    by_lower_name: dict[str, list[str]] = {}
    for line in lines:
        if needle not in line.lower():
            continue
        fields = line.split(maxsplit=1)
        if not fields:
            continue

        candidate = fields[0]
        if candidate == name:
            return candidate, []

        suggestions.append(candidate)
        by_lower_name.setdefault(candidate.lower(), []).append(candidate)

    matches = by_lower_name.get(needle)
    return (matches[0] if matches else None), suggestions
