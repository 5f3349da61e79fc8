"""
Tests for configuration loading and resolution.
"""

import logging

import pytest
import yaml

from archlink.core import configuration
from archlink.core.configuration import (
    ArchlinkConfig, ConfigurationManager, read_config_file, resolve_max_results,
    write_default_config
)
from archlink.core.exceptions import ConfigurationError


@pytest.fixture
def isolated_lookup(tmp_path, monkeypatch):
    """Point the default config lookup at an empty temporary directory."""
    user_dir = tmp_path / "user"
    monkeypatch.setattr(configuration, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(configuration, "SYSTEM_CONFIG_FILE", tmp_path / "etc" / "config.toml")
    monkeypatch.delenv("ARCHLINK_CONFIG", raising=False)
    return tmp_path


class TestResolveMaxResults:
    """Test cases for resolve_max_results."""

    def test_valid_value(self):
        assert resolve_max_results(25) == 25

    @pytest.mark.parametrize("value", [None, 0, -3, "15", 2.5, True])
    def test_falls_back_to_default(self, value):
        assert resolve_max_results(value) == 10

    def test_warns_on_invalid_value(self, caplog):
        with caplog.at_level(logging.WARNING, logger="archlink.core.configuration"):
            resolve_max_results(0)
        assert "Invalid max_results" in caplog.text


class TestConfigurationManager:
    """Test cases for ConfigurationManager."""

    def test_defaults_without_file(self, isolated_lookup):
        config = ConfigurationManager().load()
        assert config == ArchlinkConfig()
        assert config.max_results == 10

    def test_yaml_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("max_results: 5\nofficial_backend: local\nrequest_timeout: 3\n")

        config = ConfigurationManager(path).load()

        assert config.max_results == 5
        assert config.official_backend == "local"
        assert config.request_timeout == 3
        assert config.retry_count == 3

    def test_toml_config(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('max_results = 20\nsync_db_path = "/tmp/sync"\n')

        config = ConfigurationManager(path).load()

        assert config.max_results == 20
        assert config.sync_db_path == "/tmp/sync"

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('max_results = 0\nofficial_backend = "ftp"\nretry_count = -1\n')

        config = ConfigurationManager(path).load()

        assert config.max_results == 10
        assert config.official_backend == "web"
        assert config.retry_count == 3

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigurationManager(tmp_path / "nope.yaml").load()

    def test_explicit_malformed_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("max_results = = 3")

        with pytest.raises(ConfigurationError):
            ConfigurationManager(path).load()

    def test_discovered_malformed_file_uses_defaults(self, isolated_lookup, caplog):
        user_dir = isolated_lookup / "user"
        user_dir.mkdir()
        (user_dir / "config.yaml").write_text("max_results: [unclosed\n")

        with caplog.at_level(logging.WARNING, logger="archlink.core.configuration"):
            config = ConfigurationManager().load()

        assert config.max_results == 10
        assert "Invalid config file format" in caplog.text

    def test_lookup_order(self, isolated_lookup, monkeypatch):
        user_dir = isolated_lookup / "user"
        user_dir.mkdir()
        (user_dir / "config.toml").write_text("max_results = 7\n")
        etc_dir = isolated_lookup / "etc"
        etc_dir.mkdir()
        (etc_dir / "config.toml").write_text("max_results = 8\n")

        assert ConfigurationManager().load().max_results == 7

        env_file = isolated_lookup / "env.yaml"
        env_file.write_text("max_results: 9\n")
        monkeypatch.setenv("ARCHLINK_CONFIG", str(env_file))

        assert ConfigurationManager().load().max_results == 9

    def test_system_config(self, isolated_lookup):
        etc_dir = isolated_lookup / "etc"
        etc_dir.mkdir()
        (etc_dir / "config.toml").write_text("max_results = 8\n")

        manager = ConfigurationManager()

        assert manager.load().max_results == 8
        assert manager.find_config_file() == etc_dir / "config.toml"


class TestConfigFiles:
    """Test cases for reading and writing config files."""

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert read_config_file(path) == {}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            read_config_file(path)

    def test_write_default_config(self, tmp_path):
        path = write_default_config(tmp_path / "archlink" / "config.yaml")

        data = yaml.safe_load(path.read_text())
        assert data["max_results"] == 10
        assert ConfigurationManager(path).load() == ArchlinkConfig()

    def test_write_default_config_refuses_overwrite(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("max_results: 3\n")

        with pytest.raises(ConfigurationError):
            write_default_config(path)

        write_default_config(path, force=True)
        assert ConfigurationManager(path).load().max_results == 10
