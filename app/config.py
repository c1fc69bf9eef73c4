from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str = "sqlite:///./finance_tracker.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Application
    APP_NAME: str = "Finance Tracker API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Sessions (server-side, cookie carries an opaque token)
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_TTL_DAYS: int = 7
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = "lax"

    # Passwords
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Dashboard
    ATTENTION_WINDOW_DAYS: int = 60

    # Policy documents
    STORAGE_BACKEND: str = "local"  # "local" or "s3"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024
    S3_BUCKET: str = ""
    S3_REGION: str = "eu-north-1"
    S3_ENDPOINT_URL: str | None = None
    S3_PREFIX: str = "policy-documents"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def session_ttl_seconds(self) -> int:
        return self.SESSION_TTL_DAYS * 24 * 60 * 60


# Global settings instance
settings = Settings()
