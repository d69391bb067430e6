"""Tests for environment-driven settings"""

from notesync.config import Settings, load_settings


class TestSettings:
    def test_store_url_prefers_explicit_url(self):
        settings = Settings(supabase_url="https://custom.example", project_id="demo")
        assert settings.store_url == "https://custom.example"

    def test_store_url_from_project_id(self):
        assert Settings(project_id="demo").store_url == "https://demo.supabase.co"
        assert Settings().store_url is None

    def test_windows_in_seconds(self):
        settings = Settings(commit_delay_ms=500, typing_idle_ms=800)
        assert settings.commit_delay == 0.5
        assert settings.typing_idle == 0.8

    def test_load_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOTES_API_KEY", "anon-key")
        monkeypatch.setenv("NOTES_PROJECT_ID", "demo")
        monkeypatch.delenv("NOTES_APP_ID", raising=False)
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("NOTES_COMMIT_DELAY_MS", "250")

        settings = load_settings()

        assert settings.api_key == "anon-key"
        assert settings.store_url == "https://demo.supabase.co"
        assert settings.commit_delay_ms == 250
        assert settings.connection_status()["NOTES_APP_ID"] is False
        assert settings.connection_status()["NOTES_API_KEY"] is True

    def test_cors_origins_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOTES_CORS_ORIGINS", "https://a.example, https://b.example,")
        assert load_settings().cors_origins == ["https://a.example", "https://b.example"]

        monkeypatch.delenv("NOTES_CORS_ORIGINS")
        assert load_settings().cors_origins == ["*"]
