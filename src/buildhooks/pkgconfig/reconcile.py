"""
Reconciliation of pkg-config metadata into build variables.

For every external dependency, the variables named ``<PACKAGE>_*`` are
replaced by freshly queried pkg-config values::

    includedir -> <PACKAGE>_INCDIR
    libdir     -> <PACKAGE>_LIBDIR
    prefix     -> <PACKAGE>_DIR
    bindir     -> <PACKAGE>_BINDIR
    other      -> <PACKAGE>_<OTHER> (upper-cased)

Each change is logged as added, updated, kept or removed. Prefixed
variables that pkg-config no longer reports are removed.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import buildhooks.pkgconfig.client as client_mod
import buildhooks.pkgconfig.resolver as resolver

if _typing.TYPE_CHECKING:
    import buildhooks.config as config
    import buildhooks.descriptor as descriptor_mod

_logger = _logging.getLogger(__name__)

VAR_MAP: dict[str, str] = {
    "includedir": "INCDIR",
    "libdir": "LIBDIR",
    "prefix": "DIR",
    "bindir": "BINDIR",
}


def variable_name(prefix: str, field: str) -> str:
    """Name of the build variable holding a pkg-config field."""
    return prefix + VAR_MAP.get(field, field.upper())


def extract_variables(
    variables: dict[str, _typing.Any],
    prefix: str,
) -> dict[str, _typing.Any]:
    """Remove and return every variable whose name starts with ``prefix``."""
    extracted = {k: v for k, v in variables.items() if k.startswith(prefix)}
    for key in extracted:
        del variables[key]
    return extracted


def update_variables(
    variables: dict[str, _typing.Any],
    new_vars: dict[str, str],
    old_vars: dict[str, _typing.Any],
) -> None:
    """
    Write ``new_vars`` into the store and log the changes against ``old_vars``.

    ``old_vars`` is consumed: entries reproduced by ``new_vars`` are removed
    from it, and whatever is left is reported as removed.
    """
    for key, value in new_vars.items():
        if key not in old_vars:
            _logger.info("added %s = %s", key, value)
        elif old_vars[key] != value:
            _logger.info("updated %s = %s (replaced %s)", key, value, old_vars[key])
        else:
            _logger.info("kept %s = %s", key, value)
        old_vars.pop(key, None)
        variables[key] = value

    for key, value in old_vars.items():
        _logger.info("removed %s = %s", key, value)


def _log_package_info(package: str, data: dict[str, str]) -> None:
    name = data.get("Name")
    description = data.get("Description")
    if name or description:
        info = name or package
        if description:
            info = f"{info} - {description}"
        _logger.info("%s", info)
    if "Modversion" in data:
        _logger.info("Version: %s", data["Modversion"])


def reconcile(
    descriptor: descriptor_mod.BuildDescriptor,
    *,
    client: client_mod.PkgConfig | None = None,
    settings: config.Settings | None = None,
) -> None:
    """
    Reconcile the variables of every external dependency with pkg-config.

    Processing stops at the first dependency that pkg-config doesn't know,
    unless ``pkgconfig.continue_on_unresolved`` is set. It also stops when
    pkg-config cannot be run; the variables of the dependency being
    processed are then left removed.

    Args:
        descriptor: The build descriptor; ``variables`` is updated in place.
        client: pkg-config client. Created from settings if None.
        settings: Settings. Loaded if None.
    """
    ext_deps = descriptor.external_dependencies
    if not ext_deps:
        return

    if settings is None:
        # Import here to avoid loading settings at import time
        import buildhooks.config as config

        settings = config.Settings()
    if client is None:
        client = client_mod.create_client(settings)

    _logger.info("builtin-hook.pkgconfig: resolving external dependencies...")

    variables = descriptor.variables
    for name in ext_deps:
        _logger.info("checking %s ...", name)

        pkgname, suggestions = resolver.find_package(name, client)
        if pkgname is None:
            _logger.info("%s is not registered in pkg-config.", name)
            if suggestions:
                _logger.info("Did you mean: %s?", ", ".join(suggestions))
            if settings.pkgconfig.continue_on_unresolved:
                continue
            # TODO: make continue_on_unresolved the default once existing
            # builds no longer rely on the first unknown package ending the scan.
            return

        if pkgname != name:
            _logger.info("resolved to %s", pkgname)

        prefix = pkgname.upper() + "_"
        old_vars = extract_variables(variables, prefix)
        try:
            pkg_data = client.get_package_data(pkgname)
        except client_mod.PkgConfigError as e:
            _logger.warning("failed to get pkg-config data: %s", e)
            return
        _log_package_info(pkgname, pkg_data)

        new_vars = {variable_name(prefix, field): value for field, value in pkg_data.items()}
        update_variables(variables, new_vars, old_vars)
