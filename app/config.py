from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str

    # API
    API_TITLE: str = "Content API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    FRONTEND_URI: str = "http://localhost:3000"

    # Identity provider
    AUTH0_DOMAIN: str
    AUTH0_AUDIENCE: str
    AUTH0_ROLES_CLAIM: str = "https://content-app/roles"
    ADMIN_ROLE: str = "admin"
    JWKS_CACHE_SECONDS: int = 600

    # Content
    PREVIEW_MAX_LENGTH: int = 500
    DEFAULT_READING_TIME_MINUTES: int = 10

    # Metrics
    METRICS_CACHE_TTL_MINUTES: int = 15
    METRICS_TOP_POSTS: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

# Create settings instance
settings = Settings()
