from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


DEFAULT_JWT_SECRET = "CHANGE_ME"
DEV_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "VELONIX'2K26"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000

    # Externally reachable base URL, used for links inside emails
    APP_URL: str = "http://localhost:3000"

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./velonix.db"
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str = Field(
        default=DEFAULT_JWT_SECRET,
        validation_alias=AliasChoices("JWT_SECRET_KEY", "JWT_SECRET"),
    )
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 1 day
    BCRYPT_ROUNDS: int = 10

    # Seeded administrator
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    # ==========================================
    # Email
    # ==========================================
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = Field(
        default="",
        validation_alias=AliasChoices("SMTP_PASSWORD", "SMTP_PASS"),
    )
    EMAIL_FROM: str = ""
    EMAIL_FROM_NAME: str = "VELONIX'2K26"
    ADMIN_ALERT_EMAIL: str = ""
    NOTIFICATION_QUEUE_SIZE: int = 100

    # ==========================================
    # Uploads
    # ==========================================
    UPLOAD_PATH: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5242880  # 5MB

    # ==========================================
    # Payment details shown to applicants
    # ==========================================
    REGISTRATION_FEE: int = 300
    PAYMENT_UPI_ID: str = "velonix2k26@upi"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"
    REGISTER_RATE_LIMIT: str = "10/minute"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
        "populate_by_name": True,
    }

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._upload_dir = Path(self.UPLOAD_PATH).resolve()
        self._upload_dir.mkdir(exist_ok=True, parents=True)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def UPLOAD_DIR(self) -> Path:
        return self._upload_dir

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def email_sender(self) -> str:
        """Address used in From: headers, falls back to the SMTP login"""
        return self.EMAIL_FROM or self.SMTP_USER

    @property
    def admin_alert_recipient(self) -> str:
        return self.ADMIN_ALERT_EMAIL or self.SMTP_USER

    def get_upload_url(self, path: str) -> str:
        """Absolute URL for a stored upload path like /uploads/x.png"""
        return f"{self.APP_URL.rstrip('/')}{path}"


# Create settings instance
settings = Settings()
