"""Application configuration."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # App
    APP_NAME: str = "Damon_Service_Panel"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Database (one table per sheet)
    DATABASE_URL: str = "sqlite:///./damon_panel.db"
    # Every write waits on the global lock at most this long.
    WRITE_LOCK_TIMEOUT_SECONDS: float = 30.0

    # Sessions
    SESSION_TTL_HOURS: int = 24
    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    # Shared-key login used by the panel frontend. Disabled when unset.
    ADMIN_TOKEN_KEY: str | None = None
    BOOTSTRAP_ADMIN_USERNAME: str = "admin"
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None
    BOOTSTRAP_ADMIN_FULL_NAME: str = "Admin"

    # List limits
    AUDIT_LIST_LIMIT: int = 100
    NOTIFICATION_LIST_LIMIT: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
