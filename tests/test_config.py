import pytest

from voice2text.config import Settings, load_settings


def test_load_settings_defaults(monkeypatch):
    for name in ("ASR_ENGINE", "ASR_REGION", "ASR_POLL_INTERVAL", "ASR_MAX_WAIT", "AUTO_RECOGNIZE"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.engine == "16k_zh"
    assert settings.region == "ap-guangzhou"
    assert settings.poll_interval == 0.618
    assert settings.auto_recognize is False


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("ASR_ENGINE", "16k_en")
    monkeypatch.setenv("AUTO_RECOGNIZE", "true")
    monkeypatch.setenv("ASR_MAX_WAIT", "300")
    settings = load_settings()
    assert settings.engine == "16k_en"
    assert settings.auto_recognize is True
    assert settings.max_wait == 300.0


def test_unknown_engine_rejected():
    with pytest.raises(ValueError):
        Settings(engine="48k_klingon")
