"""Tests for relay configuration."""

import pytest

from server.config import RelayConfig


def test_defaults() -> None:
    config = RelayConfig.from_env({})
    assert config == RelayConfig()
    assert config.gpsd_host == "localhost"
    assert config.gpsd_port == 2947
    assert config.gpsd_timeout is None
    assert config.queue_size == 10
    assert config.idle_timeout == pytest.approx(5.0)


def test_overrides() -> None:
    config = RelayConfig.from_env(
        {
            "GPSD_HOST": "10.0.0.2",
            "GPSD_PORT": "2948",
            "GPSD_TIMEOUT": "3.5",
            "RELAY_QUEUE_SIZE": "2",
            "RELAY_IDLE_TIMEOUT": "30",
            "RELAY_LOG_LEVEL": "debug",
        }
    )
    assert config.gpsd_host == "10.0.0.2"
    assert config.gpsd_port == 2948
    assert config.gpsd_timeout == pytest.approx(3.5)
    assert config.queue_size == 2
    assert config.idle_timeout == pytest.approx(30.0)
    assert config.log_level == "DEBUG"


def test_empty_timeout_blocks() -> None:
    assert RelayConfig.from_env({"GPSD_TIMEOUT": ""}).gpsd_timeout is None


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPSD_HOST", "gps.example")
    assert RelayConfig.from_env().gpsd_host == "gps.example"


def test_invalid_port_is_rejected() -> None:
    with pytest.raises(ValueError):
        RelayConfig.from_env({"GPSD_PORT": "gps"})
