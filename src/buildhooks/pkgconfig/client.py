"""
pkg-config client.

Runs the ``pkg-config`` executable and parses its line-oriented output.
Every query goes through ``run_command`` so tests can substitute a fake.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re
import subprocess as _subprocess
import typing as _typing

_logger = _logging.getLogger(__name__)

# Variable definitions in a .pc file: "name=value"
_PC_VARIABLE_RE = _re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=")
# Metadata fields in a .pc file: "Name: value"
_PC_METADATA_RE = _re.compile(r"^(Name|Description|Version):\s*(.*)$")


class PkgConfigError(RuntimeError):
    """Raised when pkg-config cannot be run."""

    pass


class PkgConfig:
    """
    Thin wrapper around the ``pkg-config`` executable.

    Only a failure to start the executable is an error. A query that
    pkg-config answers with a non-zero exit (unknown package, unknown
    variable) yields empty output.
    """

    def __init__(
        self,
        executable: str = "pkg-config",
        *,
        timeout: float | None = 30,
    ) -> None:
        self.executable = executable
        self.timeout = timeout

    def run_command(self, *args: str) -> list[str]:
        """
        Run pkg-config with the given arguments.

        Returns:
            Output lines (without line endings). Empty if pkg-config
            exited with an error.

        Raises:
            PkgConfigError: If the executable cannot be started or times out.
        """
        cmd = [self.executable, *args]
        try:
            proc = _subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, _subprocess.TimeoutExpired) as e:
            raise PkgConfigError(f"failed to run {' '.join(cmd)}: {e}") from e

        if proc.returncode != 0:
            _logger.debug(
                "%s exited with %d: %s", " ".join(cmd), proc.returncode, proc.stderr.strip()
            )
            return []
        return proc.stdout.splitlines()

    def _single_value(self, *args: str) -> str:
        return "\n".join(self.run_command(*args)).strip()

    def list_all(self) -> list[str]:
        """Lines of ``pkg-config --list-all``: ``<name> <description>``."""
        return self.run_command("--list-all")

    def variable(self, package: str, name: str) -> str:
        """Value of variable ``name`` of ``package``, or "" if undefined."""
        return self._single_value(f"--variable={name}", package)

    def libs(self, package: str) -> str:
        return self._single_value("--libs", package)

    def cflags(self, package: str) -> str:
        return self._single_value("--cflags", package)

    def modversion(self, package: str) -> str:
        return self._single_value("--modversion", package)

    def read_pc_file(self, package: str) -> list[str]:
        """
        Lines of the package's ``.pc`` file.

        Returns:
            The lines, or an empty list if the file cannot be located or read.
        """
        pcdir = self.variable(package, "pcfiledir")
        if not pcdir:
            return []
        pcfile = _pathlib.Path(pcdir) / f"{package}.pc"
        try:
            return pcfile.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            _logger.debug("Cannot read %s: %s", pcfile, e)
            return []

    def get_package_data(self, package: str) -> dict[str, str]:
        """
        Fetch every variable and metadata field of a package.

        Includes each variable declared in the ``.pc`` file, the ``Name``,
        ``Description`` and ``Version`` fields, and the computed ``Libs``,
        ``Cflags`` and ``Modversion``. Values are stripped; empty values
        are left out.

        Returns:
            Field name -> value. Empty if the package has no ``.pc`` file.

        Raises:
            PkgConfigError: If pkg-config cannot be run.
        """
        lines = self.read_pc_file(package)
        if not lines:
            return {}

        fields: list[tuple[str, str]] = []
        for line in lines:
            match = _PC_VARIABLE_RE.match(line)
            if match:
                name = match.group(1)
                fields.append((name, self.variable(package, name)))

        for line in lines:
            match = _PC_METADATA_RE.match(line)
            if match:
                fields.append((match.group(1), match.group(2)))

        fields.append(("Libs", self.libs(package)))
        fields.append(("Cflags", self.cflags(package)))
        fields.append(("Modversion", self.modversion(package)))

        data: dict[str, str] = {}
        for name, value in fields:
            value = value.strip()
            if value:
                data[name] = value
        return data


def create_client(settings: _typing.Any | None = None) -> PkgConfig:
    """
    Create a client from Settings.

    Args:
        settings: buildhooks.config.Settings instance. Loaded if None.
    """
    if settings is None:
        # Import here to avoid loading settings at import time
        import buildhooks.config as config

        settings = config.Settings()
    return PkgConfig(settings.pkgconfig.executable, timeout=settings.pkgconfig.timeout)
