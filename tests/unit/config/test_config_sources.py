"""Tests for environment and file configuration sources."""

import orjson
import pytest

from memsentinel.config import (
    ConfigError,
    config_from_env,
    env_bool,
    env_float,
    env_int,
    env_str,
    load_config_file,
    resolve_config_path,
)


class TestEnvHelpers:
    def test_env_str_treats_blank_as_unset(self, monkeypatch):
        monkeypatch.setenv("MEMSENTINEL_TEST", "   ")
        assert env_str("MEMSENTINEL_TEST", or_value="fallback") == "fallback"

    def test_env_int_parses(self, monkeypatch):
        monkeypatch.setenv("MEMSENTINEL_TEST", " 42 ")
        assert env_int("MEMSENTINEL_TEST") == 42

    def test_env_int_invalid_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("MEMSENTINEL_TEST", "soon")
        with pytest.raises(ConfigError) as exc_info:
            env_int("MEMSENTINEL_TEST")
        assert exc_info.value.field == "MEMSENTINEL_TEST"

    def test_env_float_invalid_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("MEMSENTINEL_TEST", "high")
        with pytest.raises(ConfigError):
            env_float("MEMSENTINEL_TEST")

    @pytest.mark.parametrize("raw, expected", [("yes", True), ("0", False), ("On", True)])
    def test_env_bool_parses(self, monkeypatch, raw, expected):
        monkeypatch.setenv("MEMSENTINEL_TEST", raw)
        assert env_bool("MEMSENTINEL_TEST") is expected

    def test_env_bool_invalid_raises(self, monkeypatch):
        monkeypatch.setenv("MEMSENTINEL_TEST", "maybe")
        with pytest.raises(ConfigError):
            env_bool("MEMSENTINEL_TEST")


def test_config_from_env_builds_partial(monkeypatch):
    monkeypatch.setenv("MEMSENTINEL_INTERVAL_MS", "15000")
    monkeypatch.setenv("MEMSENTINEL_SENSITIVITY", "HIGH")
    monkeypatch.setenv("MEMSENTINEL_HEAP_THRESHOLD", "0.7")
    monkeypatch.setenv("MEMSENTINEL_ALERTING_ENABLED", "false")

    assert config_from_env() == {
        "monitoring": {"interval": 15000},
        "threshold": {"heap": 0.7},
        "detection": {"sensitivity": "high"},
        "alerting": {"enabled": False},
    }


def test_config_from_env_empty_when_unset(monkeypatch):
    for name in (
        "MEMSENTINEL_INTERVAL_MS",
        "MEMSENTINEL_SENSITIVITY",
        "MEMSENTINEL_HEAP_THRESHOLD",
        "MEMSENTINEL_ALERTING_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    assert config_from_env() == {}


def test_load_config_file_reads_object(tmp_path):
    path = tmp_path / "memsentinel.json"
    path.write_bytes(orjson.dumps({"detection": {"sensitivity": "low"}}))

    assert load_config_file(path) == {"detection": {"sensitivity": "low"}}


@pytest.mark.parametrize("content", [b"{not json", b"[1, 2, 3]"])
def test_load_config_file_rejects_bad_content(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_bytes(content)

    with pytest.raises(ConfigError):
        load_config_file(path)


def test_load_config_file_missing(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        load_config_file(tmp_path / "absent.json")
    assert "does not exist" in str(exc_info.value)


def test_resolve_config_path_prefers_explicit(monkeypatch, tmp_path):
    monkeypatch.setenv("MEMSENTINEL_CONFIG", str(tmp_path / "env.json"))

    assert resolve_config_path(tmp_path / "explicit.json") == tmp_path / "explicit.json"
    assert resolve_config_path() == tmp_path / "env.json"

    monkeypatch.delenv("MEMSENTINEL_CONFIG")
    assert resolve_config_path() is None
