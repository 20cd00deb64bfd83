"""
Application settings and environment configuration.

Purpose:
- Centralize all config (API metadata, DB connection, pool sizing, CORS)
- Load from environment variables (and .env) for 12-factor app compliance
- Provide sensible defaults for local development

The DB connection is described by the discrete DB_HOST / DB_PORT / DB_USER /
DB_PASSWORD / DB_DATABASE variables. DATABASE_URL, when set, wins over them
(used by tests to point at sqlite+aiosqlite).
"""
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Configuration
    API_TITLE: str = "User API"
    API_DESCRIPTION: str = "API documentation for managing users"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Logging: DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = "INFO"

    # Database: MySQL connection parts
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_DATABASE: str = "users_db"

    # Full async URL override, e.g. sqlite+aiosqlite:///:memory:
    DATABASE_URL: str | None = None

    # Connection pool
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600

    # Create tables on startup (development convenience; use Alembic in prod)
    DB_CREATE_TABLES: bool = False

    # CORS - comma separated origins, "*" for any
    CORS_ORIGINS: str = "*"

    class Config:
        env_file = ".env"  # Load from .env file if present
        extra = "ignore"

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the configured database."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASSWORD)}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_DATABASE}"
        )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


# Global settings instance
settings = Settings()
