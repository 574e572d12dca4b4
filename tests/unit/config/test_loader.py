"""Tests for configuration loading and validation."""

from datetime import date
from pathlib import Path

import pytest

from runner_mock.config import (
    CONFIG_ENV_VAR,
    ConfigLoader,
    MockServiceConfig,
    deep_merge,
    load_config,
    resolve_env_vars,
)
from runner_mock.errors import MockServiceError
from runner_mock.types import LogFormat, LogLevel


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no config env var."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return tmp_path


class TestResolveEnvVars:
    """Tests for ${VAR} resolution."""

    def test_set_variable(self, monkeypatch):
        monkeypatch.setenv("RM_PORT", "9090")
        assert resolve_env_vars("${RM_PORT}") == "9090"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("RM_UNSET", raising=False)
        assert resolve_env_vars("${RM_UNSET:-fallback}") == "fallback"
        assert resolve_env_vars("${RM_UNSET:-}") == ""

    def test_required_missing(self, monkeypatch):
        monkeypatch.delenv("RM_UNSET", raising=False)
        with pytest.raises(MockServiceError) as exc_info:
            resolve_env_vars("${RM_UNSET}")
        assert exc_info.value.code == "CONFIG_INVALID"
        assert "RM_UNSET" in exc_info.value.detail

    def test_custom_error_message(self, monkeypatch):
        monkeypatch.delenv("RM_UNSET", raising=False)
        with pytest.raises(MockServiceError) as exc_info:
            resolve_env_vars("${RM_UNSET:?log file path required}")
        assert exc_info.value.detail == "log file path required"

    def test_plain_text_untouched(self):
        assert resolve_env_vars("no variables here") == "no variables here"


class TestDeepMerge:
    """Tests for deep_merge()."""

    def test_nested_override(self):
        base = {"server": {"host": "0.0.0.0", "port": 1}, "auth": {"enabled": True}}
        result = deep_merge(base, {"server": {"port": 2}})
        assert result == {"server": {"host": "0.0.0.0", "port": 2}, "auth": {"enabled": True}}
        assert base["server"]["port"] == 1


class TestConfigLoader:
    """Tests for ConfigLoader.load()."""

    def test_defaults_without_file(self, isolated_cwd):
        assert ConfigLoader().load() == MockServiceConfig()

    def test_local_file_picked_up(self, isolated_cwd):
        (isolated_cwd / "runner-mock.yaml").write_text("server:\n  port: 9000\n")
        config = ConfigLoader().load()
        assert config.server.port == 9000

    def test_env_var_path(self, isolated_cwd, monkeypatch):
        path = isolated_cwd / "custom.yaml"
        path.write_text("auth:\n  enabled: false\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        config = ConfigLoader().load()
        assert config.auth.enabled is False

    def test_explicit_missing_file(self, isolated_cwd):
        with pytest.raises(MockServiceError) as exc_info:
            ConfigLoader().load(isolated_cwd / "missing.yaml")
        assert exc_info.value.code == "CONFIG_INVALID"
        assert "not found" in exc_info.value.detail

    def test_full_file(self, isolated_cwd, monkeypatch):
        monkeypatch.setenv("RM_LOG", "/tmp/rm.log")
        path = isolated_cwd / "config.yaml"
        path.write_text(
            "server:\n"
            "  host: 0.0.0.0\n"
            "  port: 8081\n"
            "  poll_interval: 0.5\n"
            "logging:\n"
            "  level: debug\n"
            "  format: JSON\n"
            "  file: ${RM_LOG}\n"
            "registry:\n"
            "  partition_by_scope: true\n"
            "release:\n"
            "  version: 2.320.0\n"
        )
        config = ConfigLoader().load(path)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8081
        assert config.server.poll_interval == 0.5
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert config.logging.file == "/tmp/rm.log"
        assert config.registry.partition_by_scope is True
        assert config.release.version == "2.320.0"

    def test_overrides_win_over_file(self, isolated_cwd):
        path = isolated_cwd / "config.yaml"
        path.write_text("server:\n  port: 9000\n  host: 0.0.0.0\n")
        config = ConfigLoader().load(path, {"server": {"port": 9001}})
        assert config.server.port == 9001
        assert config.server.host == "0.0.0.0"

    def test_invalid_yaml(self, isolated_cwd):
        path = isolated_cwd / "bad.yaml"
        path.write_text("server: [unclosed\n")
        with pytest.raises(MockServiceError) as exc_info:
            ConfigLoader().load(path)
        assert "Invalid YAML" in exc_info.value.detail

    def test_non_mapping_file(self, isolated_cwd):
        path = isolated_cwd / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(MockServiceError):
            ConfigLoader().load(path)

    def test_empty_file_gives_defaults(self, isolated_cwd):
        path = isolated_cwd / "empty.yaml"
        path.write_text("")
        assert ConfigLoader().load(path) == MockServiceConfig()

    def test_load_config_helper(self, isolated_cwd):
        assert load_config(overrides={"auth": {"enabled": False}}).auth.enabled is False


class TestValidation:
    """Tests for ConfigLoader.validate()."""

    @pytest.mark.parametrize(
        "data,path",
        [
            ({"server": {"port": 70000}}, "server.port"),
            ({"server": {"port": "8080"}}, "server.port"),
            ({"server": {"port": True}}, "server.port"),
            ({"server": {"poll_interval": 0}}, "server.poll_interval"),
            ({"auth": {"enabled": "yes"}}, "auth.enabled"),
            ({"logging": {"level": "verbose"}}, "logging.level"),
            ({"logging": {"format": "xml"}}, "logging.format"),
            ({"registry": {"id_min": 10, "id_max": 5}}, "registry"),
            ({"server": "8080"}, "server"),
        ],
    )
    def test_invalid_values(self, data, path):
        result = ConfigLoader().validate(data)
        assert not result.valid
        assert path in [issue.path for issue in result.errors]

    def test_unknown_section_is_warning(self):
        result = ConfigLoader().validate({"metrics": {}})
        assert result.valid
        assert result.warnings[0].path == "metrics"

    def test_load_reports_every_error(self):
        with pytest.raises(MockServiceError) as exc_info:
            ConfigLoader().load_from_dict(
                {"server": {"port": -1}, "auth": {"enabled": 1}}
            )
        detail = exc_info.value.detail
        assert "- server.port:" in detail
        assert "- auth.enabled:" in detail

    def test_port_zero_allowed(self):
        config = ConfigLoader().load_from_dict({"server": {"port": 0}})
        assert config.server.port == 0


class TestStringSettings:
    """Tests for settings that must stay text after YAML parsing."""

    def test_unquoted_api_version_date(self, isolated_cwd):
        """Test an unquoted YYYY-MM-DD version is kept as its text."""
        path = isolated_cwd / "config.yaml"
        path.write_text("server:\n  api_version: 2022-11-28\n")
        config = ConfigLoader().load(path)
        assert config.server.api_version == "2022-11-28"
        assert isinstance(config.server.api_version, str)

    @pytest.mark.parametrize(
        "yaml_text,path",
        [
            ("server:\n  host: 127\n", "server.host"),
            ("server:\n  api_version: 20221128\n", "server.api_version"),
            ("release:\n  version: 2.5\n", "release.version"),
            ("release:\n  documentation_url: 5\n", "release.documentation_url"),
            ("registry:\n  runner_os: [Linux]\n", "registry.runner_os"),
            ("logging:\n  file: 42\n", "logging.file"),
        ],
    )
    def test_non_string_values_rejected(self, isolated_cwd, yaml_text, path):
        config_file = isolated_cwd / "config.yaml"
        config_file.write_text(yaml_text)
        with pytest.raises(MockServiceError) as exc_info:
            ConfigLoader().load(config_file)
        assert f"- {path}:" in exc_info.value.detail

    def test_null_log_file_allowed(self):
        config = ConfigLoader().load_from_dict({"logging": {"file": None}})
        assert config.logging.file is None

    def test_input_not_mutated_by_date_coercion(self):
        data = {"server": {"api_version": date(2022, 11, 28)}}
        ConfigLoader().load_from_dict(data)
        assert data["server"]["api_version"] == date(2022, 11, 28)
