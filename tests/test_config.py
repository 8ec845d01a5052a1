"""Tests for environment-based settings."""

from src.askmycar.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "ANTHROPIC_API_KEY",
            "OPENAI_API_KEY",
            "BRAVE_SEARCH_API_KEY",
            "AGENT_MAX_ROUNDS",
            "CORS_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env(dotenv=False)

        assert settings.agent_max_rounds == 5
        assert settings.agent_max_tokens == 1024
        assert settings.tool_timeout_seconds == 4.0
        assert settings.chatbot_enabled is False
        assert settings.web_search_enabled is False
        assert "http://localhost:3000" in settings.cors_origins

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("BRAVE_SEARCH_API_KEY", "brave")
        monkeypatch.setenv("AGENT_MAX_ROUNDS", "3")
        monkeypatch.setenv("IMAGE_CACHE_MAX_ENTRIES", "64")
        monkeypatch.setenv("CORS_ORIGINS", "https://askmycar.app, https://www.askmycar.app")
        monkeypatch.setenv("PORT", "9000")

        settings = Settings.from_env(dotenv=False)

        assert settings.chatbot_enabled is True
        assert settings.web_search_enabled is True
        assert settings.agent_max_rounds == 3
        assert settings.image_cache_max_entries == 64
        assert settings.cors_origins == ["https://askmycar.app", "https://www.askmycar.app"]
        assert settings.port == 9000

    def test_blank_keys_are_unset(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "   ")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        assert Settings.from_env(dotenv=False).anthropic_api_key is None
