"""Tests for buildhooks settings and YAML config layers."""

import os as _os
import pathlib as _pathlib

import pydantic as _pydantic
import pytest as _pytest

import buildhooks.config as config
import buildhooks.config.sources as sources
import buildhooks.hooks.context as hooks_context


def _write(path: _pathlib.Path, text: str) -> _pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@_pytest.fixture
def user_config() -> _pathlib.Path:
    return _pathlib.Path(_os.environ["BUILDHOOKS_CONFIG_DIR"]) / "config.yaml"


@_pytest.fixture
def project(tmp_path: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch) -> _pathlib.Path:
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


class TestDefaults:
    """Settings without any configuration."""

    def test_defaults(self, project: _pathlib.Path) -> None:
        settings = config.Settings.construct_without_dotenv()
        assert settings.pkgconfig.executable == "pkg-config"
        assert settings.pkgconfig.timeout == 30
        assert settings.pkgconfig.continue_on_unresolved is False
        assert settings.scripts.context_modules == list(hooks_context.DEFAULT_CONTEXT_MODULES)

    def test_unknown_section_key_is_rejected(self, project: _pathlib.Path) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings.construct_without_dotenv(pkgconfig={"exe": "pkgconf"})

    def test_timeout_must_be_positive(self, project: _pathlib.Path) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings.construct_without_dotenv(pkgconfig={"timeout": 0})


class TestEnvironment:
    """BUILDHOOKS_* environment variables."""

    def test_nested_override(
        self, project: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUILDHOOKS_PKGCONFIG__EXECUTABLE", "/usr/bin/pkgconf")
        monkeypatch.setenv("BUILDHOOKS_PKGCONFIG__CONTINUE_ON_UNRESOLVED", "true")
        settings = config.Settings.construct_without_dotenv()
        assert settings.pkgconfig.executable == "/usr/bin/pkgconf"
        assert settings.pkgconfig.continue_on_unresolved is True

    def test_env_beats_project_config(
        self, project: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch
    ) -> None:
        _write(project / ".buildhooks" / "config.yaml", "pkgconfig:\n  executable: from-yaml\n")
        monkeypatch.setenv("BUILDHOOKS_PKGCONFIG__EXECUTABLE", "from-env")
        assert config.Settings.construct_without_dotenv().pkgconfig.executable == "from-env"

    def test_constructor_beats_env(
        self, project: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("BUILDHOOKS_PKGCONFIG__EXECUTABLE", "from-env")
        settings = config.Settings.construct_without_dotenv(pkgconfig={"executable": "explicit"})
        assert settings.pkgconfig.executable == "explicit"


class TestYamlLayers:
    """User and project YAML config files."""

    def test_user_config(self, project: _pathlib.Path, user_config: _pathlib.Path) -> None:
        _write(user_config, "scripts:\n  context_modules: [os, math]\n")
        settings = config.Settings.construct_without_dotenv()
        assert settings.scripts.context_modules == ["os", "math"]

    def test_project_overrides_user_per_key(
        self, project: _pathlib.Path, user_config: _pathlib.Path
    ) -> None:
        _write(user_config, "pkgconfig:\n  executable: pkgconf\n  timeout: 5\n")
        _write(
            project / ".buildhooks" / "config.yaml",
            "pkgconfig:\n  continue_on_unresolved: true\n  timeout: 10\n",
        )
        settings = config.Settings.construct_without_dotenv()
        assert settings.pkgconfig.executable == "pkgconf"
        assert settings.pkgconfig.timeout == 10
        assert settings.pkgconfig.continue_on_unresolved is True

    def test_empty_file(self, project: _pathlib.Path, user_config: _pathlib.Path) -> None:
        _write(user_config, "")
        assert config.Settings.construct_without_dotenv().pkgconfig.executable == "pkg-config"

    def test_invalid_yaml(self, project: _pathlib.Path) -> None:
        _write(project / ".buildhooks" / "config.yaml", "pkgconfig: [unclosed\n")
        with _pytest.raises(config.ConfigFileError, match="invalid YAML") as exc_info:
            config.Settings.construct_without_dotenv()
        assert exc_info.value.path == _pathlib.Path.cwd() / sources.PROJECT_CONFIG_PATH

    def test_non_mapping_document(
        self, project: _pathlib.Path, user_config: _pathlib.Path
    ) -> None:
        _write(user_config, "- a\n- b\n")
        with _pytest.raises(config.ConfigFileError, match="expected a mapping, got list"):
            config.Settings.construct_without_dotenv()


class TestMergeLayers:
    """Tests for merge_layers()."""

    def test_nested_mappings_merge(self) -> None:
        merged = sources.merge_layers(
            {"a": {"x": 1, "y": 2}, "b": [1]},
            {"a": {"y": 3}, "b": [2]},
        )
        assert merged == {"a": {"x": 1, "y": 3}, "b": [2]}

    def test_inputs_are_not_modified(self) -> None:
        base = {"a": {"x": 1}}
        sources.merge_layers(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}


class TestUserConfigPath:
    """Tests for get_user_config_path()."""

    def test_env_override(self, monkeypatch: _pytest.MonkeyPatch, tmp_path: _pathlib.Path) -> None:
        monkeypatch.setenv(sources.ENV_CONFIG_DIR, str(tmp_path))
        assert sources.get_user_config_path() == tmp_path / "config.yaml"

    def test_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(sources.ENV_CONFIG_DIR)
        expected = _pathlib.Path.home() / ".config" / "buildhooks" / "config.yaml"
        assert sources.get_user_config_path() == expected
