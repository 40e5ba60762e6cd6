"""Unit tests for core.config."""

import pytest

from trader_sync.core.config import DEFAULT_ENDPOINTS, Config, load_config
from trader_sync.core.errors import ConfigError

ENV_KEYS = [
    "TRADER_API_URL", "TRADER_API_KEY", "REQUEST_TIMEOUT", "STATUS_CACHE_TTL",
    "POLL_INTERVAL", "TOAST_LIFETIME", "TRADE_TOAST_LIFETIME",
    "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_files(tmp_path):
    config = load_config(project_root=tmp_path)
    assert config.status_cache_ttl == 5.0
    assert config.poll_interval == 300.0
    assert config.toast_lifetime == 4.0
    assert config.trade_toast_lifetime == 3.0
    assert config.endpoints == DEFAULT_ENDPOINTS
    assert config.api_key == ""


def test_yaml_then_env_overlay(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text(
        "api:\n"
        "  base_url: http://trader:9000/\n"
        "sync:\n"
        "  poll_interval: 5\n"
        "endpoints:\n"
        "  status: /api/v2/status\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("STATUS_CACHE_TTL", "2.5")
    monkeypatch.setenv("TRADER_API_KEY", " abc ")
    config = load_config(project_root=tmp_path)
    assert config.api_base_url == "http://trader:9000"
    assert config.poll_interval == 5.0
    assert config.status_cache_ttl == 2.5
    assert config.api_key == "abc"
    assert config.endpoint("status") == "/api/v2/status"
    assert config.endpoint("performance") == DEFAULT_ENDPOINTS["performance"]


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    # register the key so teardown removes what load_dotenv writes
    monkeypatch.setenv("TRADER_API_KEY", "placeholder")
    monkeypatch.delenv("TRADER_API_KEY")
    (tmp_path / ".env").write_text("TRADER_API_KEY=from-dotenv\n", encoding="utf-8")
    config = load_config(project_root=tmp_path)
    assert config.api_key == "from-dotenv"


def test_bad_env_number_falls_back(tmp_path, monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL", "soon")
    assert load_config(project_root=tmp_path).poll_interval == 300.0


@pytest.mark.parametrize("field", ["status_cache_ttl", "poll_interval", "toast_lifetime"])
def test_non_positive_values_rejected(field):
    with pytest.raises(ConfigError):
        Config(**{field: 0})


def test_unknown_endpoint():
    with pytest.raises(ConfigError):
        Config().endpoint("orders")
