from muhurat_finder.api.dependencies import build_ephemeris_provider, get_geo_config
from muhurat_finder.config import Settings, get_settings
from muhurat_finder.services.ephemeris.subprocess_provider import (
    WORKER_MODULE,
    SubprocessEphemerisProvider,
)


def test_defaults(monkeypatch):
    monkeypatch.delenv("EPHEMERIS_BACKEND", raising=False)
    monkeypatch.delenv("DEFAULT_TIMEZONE", raising=False)
    settings = Settings(_env_file=None)
    assert settings.EPHEMERIS_BACKEND == "swisseph"
    assert settings.DEFAULT_TIMEZONE == "Asia/Kolkata"
    assert settings.ALLOW_APPROXIMATE_DAYLIGHT is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EPHEMERIS_BACKEND", "subprocess")
    monkeypatch.setenv("EPHEMERIS_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("EPHEMERIS_WORKER_PYTHON", "/usr/bin/python3")
    settings = Settings(_env_file=None)
    provider = build_ephemeris_provider(settings)
    assert isinstance(provider, SubprocessEphemerisProvider)
    assert provider.timeout_sec == 2.5
    assert provider.command == ["/usr/bin/python3", "-m", WORKER_MODULE]


def test_geo_config_follows_settings(monkeypatch):
    monkeypatch.setenv("GEOCODER_TIMEOUT_SEC", "3")
    get_settings.cache_clear()
    try:
        cfg = get_geo_config()
        assert cfg.timeout_sec == 3.0
        assert cfg.user_agent == get_settings().GEOCODER_USER_AGENT
    finally:
        get_settings.cache_clear()
