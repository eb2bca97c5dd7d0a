import pytest

from bikehub.config import Settings


def test_defaults(monkeypatch):
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    settings = Settings.from_env()
    assert settings.port == 3000
    assert settings.listing_store == "sql"
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.mpesa_default_amount == 13000
    assert settings.mpesa_consumer_key is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LISTING_STORE", "memory")
    monkeypatch.setenv("MPESA_SHORT_CODE", "600000")
    monkeypatch.setenv("MPESA_CALLBACK_URL", "https://bikes.example/api/callback")

    settings = Settings.from_env()
    assert settings.port == 8080
    assert settings.listing_store == "memory"
    assert settings.mpesa_short_code == "600000"
    assert settings.mpesa_callback_url == "https://bikes.example/api/callback"


def test_empty_variable_keeps_default(monkeypatch):
    monkeypatch.setenv("PORT", "")
    assert Settings.from_env().port == 3000


def test_rejects_unknown_store(monkeypatch):
    monkeypatch.setenv("LISTING_STORE", "mongo")
    with pytest.raises(ValueError):
        Settings.from_env()
