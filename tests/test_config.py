"""
Tests for utils/config.py — Config base class, ClientConfig, AppConfig.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import (
    DEFAULT_API_BASE_URL,
    TITLE_NUMBERS,
    AppConfig,
    ClientConfig,
    Config,
)


class TestConfigBase:
    def test_to_dict_lists_settings(self):
        data = ClientConfig().to_dict()
        assert data["api_base_url"] == DEFAULT_API_BASE_URL
        assert data["max_retries"] == 0

    def test_private_attrs_excluded(self):
        cfg = Config()
        cfg._secret = 1
        cfg.visible = 2
        assert cfg.to_dict() == {"visible": 2}


class TestClientConfig:
    def test_defaults(self):
        cfg = ClientConfig()
        assert cfg.api_base_url == DEFAULT_API_BASE_URL
        assert cfg.timeout_seconds == 30.0
        assert cfg.max_retries == 0


class TestAppConfig:
    def test_defaults(self, monkeypatch):
        for var in ("APP_HOST", "APP_PORT", "APP_LOG_FORMAT", "APP_CORS_ORIGINS",
                    "ECFR_API_BASE_URL", "ECFR_API_TIMEOUT", "ECFR_API_RETRIES",
                    "VIEW_TTL_SECONDS", "VIEW_MAX_INSTANCES"):
            monkeypatch.delenv(var, raising=False)
        cfg = AppConfig.from_env()
        assert cfg.api_host == "127.0.0.1"
        assert cfg.api_port == 3000
        assert cfg.log_format == "text"
        assert cfg.cors_origins == ["*"]
        assert cfg.api_base_url == "http://localhost:8080/api"
        assert cfg.api_timeout == 30.0
        assert cfg.api_retries == 0
        assert cfg.view_ttl_seconds == 1800.0
        assert cfg.view_max_instances == 1000

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("ECFR_API_BASE_URL", "http://backend:8080/api/")
        monkeypatch.setenv("ECFR_API_RETRIES", "2")
        cfg = AppConfig.from_env()
        assert cfg.api_port == 9000
        assert cfg.cors_origins == ["http://a.test", "http://b.test"]
        assert cfg.api_base_url == "http://backend:8080/api"
        assert cfg.api_retries == 2

    def test_client_config_projection(self, monkeypatch):
        monkeypatch.setenv("ECFR_API_TIMEOUT", "7.5")
        cc = AppConfig.from_env().client_config()
        assert isinstance(cc, ClientConfig)
        assert cc.timeout_seconds == 7.5


def test_title_numbers():
    assert TITLE_NUMBERS[0] == 1
    assert TITLE_NUMBERS[-1] == 50
    assert len(TITLE_NUMBERS) == 50
