"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError

from unidir.config.settings import (
    DEFAULT_JWT_SECRET,
    AuthSettings,
    Environment,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test in an empty directory without UNIDIR_ variables."""
    for name in ("UNIDIR_ENV", "UNIDIR_AUTH__JWT_SECRET", "UNIDIR_RUNTIME__PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestProductionGuard:
    """The default JWT secret is refused in production."""

    def test_default_secret_refused_in_production(self):
        with pytest.raises(ValidationError, match="JWT secret must be changed"):
            Settings(env="production")

    def test_default_secret_refused_when_env_comes_from_environment(self, monkeypatch):
        monkeypatch.setenv("UNIDIR_ENV", "production")
        with pytest.raises(ValidationError):
            Settings()

    def test_custom_secret_accepted_in_production(self):
        settings = Settings(env="production", auth=AuthSettings(jwt_secret="s3cret"))
        assert settings.is_production()

    def test_default_secret_allowed_in_development(self):
        settings = Settings()
        assert settings.env is Environment.DEVELOPMENT
        assert settings.auth.jwt_secret == DEFAULT_JWT_SECRET


class TestEnvFile:
    """Settings read ``.env`` files."""

    def test_dotenv_in_working_directory(self, tmp_path):
        (tmp_path / ".env").write_text("UNIDIR_RUNTIME__PORT=4100\n")
        assert load_settings().runtime.port == 4100

    def test_explicit_env_file(self, tmp_path):
        env_file = tmp_path / "staging.env"
        env_file.write_text("UNIDIR_ENV=staging\nUNIDIR_AUTH__JWT_SECRET=from-file\n")
        settings = load_settings(env_file)
        assert settings.env is Environment.STAGING
        assert settings.auth.jwt_secret == "from-file"

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("UNIDIR_RUNTIME__PORT=4100\n")
        monkeypatch.setenv("UNIDIR_RUNTIME__PORT", "4200")
        assert load_settings().runtime.port == 4200
