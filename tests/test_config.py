import pytest

from hospital_directory.core.config import Settings


def test_store_credentials_come_from_the_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://directory.example.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    settings = Settings()
    assert (settings.supabase_url, settings.supabase_key) == ("https://directory.example.co", "anon-key")


def test_store_credentials_default_to_empty(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    settings = Settings(_env_file=None)
    assert (settings.supabase_url, settings.supabase_key) == ("", "")


def test_collection_for_unknown_type():
    with pytest.raises(ValueError):
        Settings().collection_for("clinic")
