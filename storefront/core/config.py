# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - ACCESS_TOKEN_SECRET  (signs short-lived bearer tokens)
      - REFRESH_TOKEN_SECRET (signs refresh tokens kept in the cookie)

    Optional:
      - DATABASE_URL (defaults to a SQLite file next to the process)
      - ENVIRONMENT  ("production" turns on Secure cookies + prod CORS origin)
    """

    PROJECT_NAME: str = "Storefront Backend"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Single SQLite file store
    DATABASE_URL: str = "sqlite:///./users.db"

    # JWT signing
    ACCESS_TOKEN_SECRET: str
    REFRESH_TOKEN_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10

    CORS_ORIGIN_DEV: str = "http://localhost:3000"
    CORS_ORIGIN_PROD: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        origin = self.CORS_ORIGIN_PROD if self.is_production else self.CORS_ORIGIN_DEV
        if not origin:
            return []
        return [o.strip() for o in origin.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
