"""Tests for container settings."""

import os
from pathlib import Path

import pytest

from sprig.config import ContainerSettings, env_overrides, load_settings, load_yaml
from sprig.errors import ConfigurationError


class TestContainerSettings:
    """Test the settings model."""

    def test_defaults(self):
        settings = ContainerSettings()

        assert settings.log_level == "INFO"
        assert settings.strict is False
        assert settings.search_paths == []

    def test_log_level_is_normalized(self):
        assert ContainerSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            ContainerSettings(log_level="chatty")

    def test_search_paths_from_string(self):
        value = os.pathsep.join(["/opt/a", "/opt/b.zip", "/opt/a"])

        settings = ContainerSettings(search_paths=value)

        assert settings.search_paths == [Path("/opt/a"), Path("/opt/b.zip")]


class TestLoadSettings:
    """Test merging files and environment."""

    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "sprig.yaml"
        path.write_text("log_level: debug\nstrict: true\nsearch_paths:\n  - /opt/plugins\n")

        settings = load_settings(path, environ={})

        assert settings.log_level == "DEBUG"
        assert settings.strict is True
        assert settings.search_paths == [Path("/opt/plugins")]

    def test_settings_nested_under_sprig_key(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("sprig:\n  strict: true\nunrelated: 1\n")

        assert load_settings(path, environ={}).strict is True

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "sprig.yaml"
        path.write_text("log_level: debug\nstrict: false\n")

        settings = load_settings(path, environ={
            "SPRIG_LOG_LEVEL": "warning",
            "SPRIG_STRICT": "true",
            "SPRIG_UNKNOWN": "ignored",
            "OTHER_STRICT": "false",
        })

        assert settings.log_level == "WARNING"
        assert settings.strict is True

    def test_default_file_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "sprig.yaml").write_text("strict: true\n")
        monkeypatch.chdir(tmp_path)

        assert load_settings(environ={}).strict is True

    def test_no_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert load_settings(environ={}) == ContainerSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "missing.yaml", environ={})

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("log_level: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml(path)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="dictionary"):
            load_yaml(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "sprig.yaml"
        path.write_text("log_level: chatty\n")

        with pytest.raises(ConfigurationError) as ctx:
            load_settings(path, environ={})

        assert not ctx.value.recoverable

    def test_env_overrides_only_known_fields(self):
        overrides = env_overrides({"SPRIG_STRICT": "1", "SPRIG_NOPE": "x", "PATH": "/bin"})

        assert overrides == {"strict": "1"}
