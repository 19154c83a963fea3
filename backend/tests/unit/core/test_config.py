"""
Unit Tests for settings and startup configuration checks
"""
import pytest
from unittest.mock import patch

from velonix.core.config import DEFAULT_JWT_SECRET, Settings, parse_cors_origins
from velonix.main import validate_critical_config


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.ACCESS_TOKEN_EXPIRE_MINUTES == 1440
        assert config.BCRYPT_ROUNDS >= 4
        assert config.REGISTRATION_FEE == 300

    def test_legacy_jwt_secret_name(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        monkeypatch.setenv("JWT_SECRET", "legacy-jwt-secret")

        assert Settings().JWT_SECRET_KEY == "legacy-jwt-secret"

    def test_upload_dir_created(self, tmp_path):
        config = Settings(UPLOAD_PATH=str(tmp_path / "shots"))

        assert config.UPLOAD_DIR.is_dir()

    def test_upload_url(self):
        config = Settings(APP_URL="https://velonix.example/")

        assert config.get_upload_url("/uploads/1-a.png") == "https://velonix.example/uploads/1-a.png"

    @pytest.mark.parametrize("raw,expected", [
        ("http://a.test, http://b.test", ["http://a.test", "http://b.test"]),
        ('["http://a.test"]', ["http://a.test"]),
        ("", []),
    ])
    def test_cors_origins(self, raw, expected):
        assert parse_cors_origins(raw) == expected


class TestStartupValidation:

    @pytest.mark.asyncio
    async def test_development_defaults_only_warn(self):
        config = Settings(ENVIRONMENT="development", JWT_SECRET_KEY=DEFAULT_JWT_SECRET, ADMIN_PASSWORD="")

        with patch("velonix.main.settings", config):
            assert await validate_critical_config() is True

    @pytest.mark.asyncio
    async def test_production_rejects_default_secret(self):
        config = Settings(ENVIRONMENT="production", JWT_SECRET_KEY=DEFAULT_JWT_SECRET, ADMIN_PASSWORD="s3cret-pass")

        with patch("velonix.main.settings", config):
            with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
                await validate_critical_config()

    @pytest.mark.asyncio
    async def test_production_requires_admin_password(self):
        config = Settings(ENVIRONMENT="production", JWT_SECRET_KEY="a-real-secret", ADMIN_PASSWORD="")

        with patch("velonix.main.settings", config):
            with pytest.raises(RuntimeError, match="ADMIN_PASSWORD"):
                await validate_critical_config()

    @pytest.mark.asyncio
    async def test_production_ok(self):
        config = Settings(ENVIRONMENT="production", JWT_SECRET_KEY="a-real-secret", ADMIN_PASSWORD="s3cret-pass")

        with patch("velonix.main.settings", config):
            assert await validate_critical_config() is True
