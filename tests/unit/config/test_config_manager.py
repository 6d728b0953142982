"""Tests for configuration loading."""

from __future__ import annotations

import pytest
import toml

from btannounce.config.config import ConfigManager
from btannounce.models import LogLevel
from btannounce.utils.exceptions import ConfigurationError

pytestmark = [pytest.mark.unit, pytest.mark.config]


@pytest.fixture(autouse=True)
def _no_discovered_config(monkeypatch, tmp_path):
    """Run from an empty directory with an empty home."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def test_defaults():
    """Test defaults without file, environment or overrides."""
    config = ConfigManager(env={}).config

    assert config.network.listen_port == 6881
    assert config.network.request_compact is True
    assert config.observability.log_level is LogLevel.INFO


def test_toml_file(tmp_path):
    """Test values are read from an explicit TOML file."""
    path = tmp_path / "custom.toml"
    path.write_text(toml.dumps({"network": {"listen_port": 51413, "tracker_timeout": 7.5}}))

    config = ConfigManager(path, env={}).config

    assert config.network.listen_port == 51413
    assert config.network.tracker_timeout == 7.5


def test_discovers_file_in_cwd(tmp_path):
    """Test btannounce.toml in the working directory is used."""
    (tmp_path / "btannounce.toml").write_text('[observability]\nlog_level = "DEBUG"\n')

    manager = ConfigManager(env={})

    assert manager.config_file == tmp_path / "btannounce.toml"
    assert manager.config.observability.log_level is LogLevel.DEBUG


def test_precedence(tmp_path):
    """Test file < environment < overrides."""
    path = tmp_path / "c.toml"
    path.write_text(toml.dumps({"network": {"listen_port": 1000, "user_agent": "file"}}))
    env = {"BTANNOUNCE_LISTEN_PORT": "2000", "BTANNOUNCE_USER_AGENT": "env/1.0"}

    config = ConfigManager(path, {"network": {"listen_port": 3000}}, env=env).config

    assert config.network.listen_port == 3000
    assert config.network.user_agent == "env/1.0"


def test_env_value_parsing():
    """Test booleans, floats and lowercase levels from the environment."""
    env = {
        "BTANNOUNCE_REQUEST_COMPACT": "false",
        "BTANNOUNCE_TRACKER_TIMEOUT": "2.5",
        "BTANNOUNCE_LOG_LEVEL": "warning",
        "BTANNOUNCE_STRUCTURED_LOGGING": "yes",
    }

    config = ConfigManager(env=env).config

    assert config.network.request_compact is False
    assert config.network.tracker_timeout == 2.5
    assert config.observability.log_level is LogLevel.WARNING
    assert config.observability.structured_logging is True


def test_reads_process_environment(monkeypatch):
    """Test os.environ is the default environment."""
    monkeypatch.setenv("BTANNOUNCE_LISTEN_PORT", "4242")
    assert ConfigManager().config.network.listen_port == 4242


def test_invalid_value():
    """Test validation errors become ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        ConfigManager(env={"BTANNOUNCE_LISTEN_PORT": "70000"})


def test_missing_explicit_file(tmp_path):
    """Test an explicit path must exist."""
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigManager(tmp_path / "nope.toml", env={})


def test_broken_toml(tmp_path):
    """Test unparsable TOML becomes ConfigurationError."""
    path = tmp_path / "broken.toml"
    path.write_text("[network\nlisten_port = ")

    with pytest.raises(ConfigurationError, match="Failed to load config file"):
        ConfigManager(path, env={})
