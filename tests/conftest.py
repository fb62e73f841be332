"""
Shared pytest fixtures for buildhooks tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import buildhooks.descriptor as descriptor
import buildhooks.hooks.registry as registry
import buildhooks.hooks.types as hook_types
import buildhooks.pkgconfig.client as pkgconfig_client

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "BUILDHOOKS_CONFIG_DIR",
    "BUILDHOOKS_PKGCONFIG__EXECUTABLE",
    "BUILDHOOKS_PKGCONFIG__TIMEOUT",
    "BUILDHOOKS_PKGCONFIG__CONTINUE_ON_UNRESOLVED",
    "BUILDHOOKS_SCRIPTS__CONTEXT_MODULES",
]


@_pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: _pytest.MonkeyPatch,
    tmp_path_factory: _pytest.TempPathFactory,
) -> None:
    """Clear buildhooks env vars and point the user config at an empty dir."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("BUILDHOOKS_CONFIG_DIR", str(tmp_path_factory.mktemp("user-config")))


@_pytest.fixture(autouse=True)
def restore_cwd() -> _typing.Iterator[None]:
    """Guard against tests leaking a changed working directory."""
    cwd = _os.getcwd()
    yield
    _os.chdir(cwd)


@_pytest.fixture
def info_logs(caplog: _pytest.LogCaptureFixture) -> _pytest.LogCaptureFixture:
    """Capture buildhooks INFO logs."""
    caplog.set_level(_logging.INFO, logger="buildhooks")
    return caplog


# =============================================================================
# Descriptors and hooks
# =============================================================================


@_pytest.fixture
def make_descriptor() -> _typing.Callable[..., descriptor.BuildDescriptor]:
    """Factory for build descriptors."""

    def _make(
        variables: dict[str, _typing.Any] | None = None,
        external_dependencies: _typing.Iterable[str] | None = None,
        **build: _typing.Any,
    ) -> descriptor.BuildDescriptor:
        return descriptor.BuildDescriptor(
            variables=variables if variables is not None else {},
            external_dependencies=dict.fromkeys(external_dependencies or ()),
            build=descriptor.BuildSection(**build),
        )

    return _make


class HookSpy:
    """Records hook calls into a shared log; optionally fails."""

    def __init__(
        self,
        name: str,
        calls: list[tuple[str, tuple[str, ...]]],
        *,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.calls = calls
        self.error = error

    def __call__(self, desc: descriptor.BuildDescriptor, *args: str) -> None:
        self.calls.append((self.name, args))
        if self.error is not None:
            raise self.error


class BuildSpy:
    """Standard build stand-in that records its calls."""

    def __init__(
        self,
        calls: list[tuple[str, tuple[str, ...]]],
        result: hook_types.BuildResult | None = None,
    ) -> None:
        self.calls = calls
        self.result = result or hook_types.BuildResult.ok()

    def __call__(self, desc: descriptor.BuildDescriptor) -> hook_types.BuildResult:
        self.calls.append(("build", ()))
        return self.result


@_pytest.fixture
def calls() -> list[tuple[str, tuple[str, ...]]]:
    """Shared call log for hook and build spies."""
    return []


@_pytest.fixture
def spy_registry(
    calls: list[tuple[str, tuple[str, ...]]],
) -> registry.BuiltinHookRegistry:
    """Registry with spy hooks ``a`` to ``d`` and a failing ``fail`` hook."""
    reg = registry.BuiltinHookRegistry()
    for name in ("a", "b", "c", "d"):
        reg.register(name, HookSpy(name, calls))
    reg.register("fail", HookSpy("fail", calls, error=RuntimeError("boom")))
    reg.register("not-callable", 42)
    return reg


@_pytest.fixture
def build_spy(calls: list[tuple[str, tuple[str, ...]]]) -> BuildSpy:
    return BuildSpy(calls)


# =============================================================================
# pkg-config
# =============================================================================


class FakePkgConfig(pkgconfig_client.PkgConfig):
    """
    pkg-config client answering from in-memory tables.

    ``.pc`` files are written to a real directory so that the client's
    file parsing is exercised.
    """

    def __init__(self, pcdir: _pathlib.Path) -> None:
        super().__init__("pkg-config")
        self.pcdir = pcdir
        self.listing: list[str] = []
        self.packages: dict[str, dict[str, str]] = {}
        self.fail_list = False
        self.fail_query = False
        self.commands: list[tuple[str, ...]] = []

    def add_package(
        self,
        name: str,
        variables: dict[str, str],
        *,
        description: str = "",
        version: str = "1.0.0",
        libs: str = "",
        cflags: str = "",
    ) -> None:
        """Register a package and write its .pc file."""
        lines = [f"{k}={v}" for k, v in variables.items()]
        lines += [
            "",
            f"Name: {name}",
            f"Description: {description}",
            f"Version: {version}",
            f"Libs: {libs}",
            f"Cflags: {cflags}",
        ]
        (self.pcdir / f"{name}.pc").write_text("\n".join(lines) + "\n")
        self.packages[name] = {
            **variables,
            "pcfiledir": str(self.pcdir),
            "--libs": libs,
            "--cflags": cflags,
            "--modversion": version,
        }
        self.listing.append(f"{name:<20} {name} - {description}")

    def run_command(self, *args: str) -> list[str]:
        self.commands.append(args)
        if args == ("--list-all",):
            if self.fail_list:
                raise pkgconfig_client.PkgConfigError("failed to run pkg-config --list-all")
            return list(self.listing)

        if self.fail_query:
            raise pkgconfig_client.PkgConfigError("failed to run pkg-config")

        option, package = args
        values = self.packages.get(package)
        if values is None:
            return []
        key = option.removeprefix("--variable=")
        value = values.get(key)
        return [value] if value is not None else []


@_pytest.fixture
def fake_pkgconfig(tmp_path: _pathlib.Path) -> FakePkgConfig:
    pcdir = tmp_path / "pkgconfig"
    pcdir.mkdir()
    return FakePkgConfig(pcdir)
