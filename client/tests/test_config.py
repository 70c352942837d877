import json

import pytest

from nothingbox_core import config
from nothingbox_core.constants import DEFAULT_API_URL
from nothingbox_core.models import format_time


@pytest.fixture()
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config, "CONFIG_FILE", path)
    monkeypatch.delenv("NOTHINGBOX_API_URL", raising=False)
    return path


def test_default_server_url(config_file):
    assert config.resolve_server_url() == DEFAULT_API_URL


def test_config_file_server_url(config_file):
    config_file.write_text(json.dumps({"serverUrl": "https://nothing.example/api/"}))
    assert config.resolve_server_url() == "https://nothing.example/api"


def test_env_var_wins(config_file, monkeypatch):
    config_file.write_text(json.dumps({"serverUrl": "https://from-file.example/api"}))
    monkeypatch.setenv("NOTHINGBOX_API_URL", "http://from-env.example:8080/api/")
    assert config.resolve_server_url() == "http://from-env.example:8080/api"


def test_corrupt_config_is_ignored(config_file):
    config_file.write_text("{{{")
    assert config.load_config() == {}
    assert config.resolve_server_url() == DEFAULT_API_URL


def test_non_object_config_is_ignored(config_file):
    config_file.write_text(json.dumps(["http://a.test"]))
    assert config.load_config() == {}
    assert config.resolve_server_url() == DEFAULT_API_URL


@pytest.mark.parametrize("seconds, text", [
    (0, "0h 0m 0s"),
    (59, "0h 0m 59s"),
    (3600, "1h 0m 0s"),
    (3725, "1h 2m 5s"),
    (90061, "25h 1m 1s"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text
