from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    CMS_DB_USER: str
    CMS_DB_PASSWORD: str
    CMS_DB_NAME: str
    CMS_DB_HOST: str = "localhost"
    CMS_DB_PORT: int = 3306

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 300

    REDIS_URL: str = "redis://localhost:6379/0"

    JWT_SECRET: str = ""
    JWT_VERIFY_MODE: Literal["hs256", "jwks"] = "hs256"
    JWT_ALGORITHM: str = "HS256"
    JWKS_URL: str | None = None

    CORS_ORIGINS: list[str] = ["*"]

    # Deployment-level overrides; win over the stored settings hash.
    NEXTJS_FRONTEND_URL: str | None = None
    NEXTJS_REVALIDATION_SECRET: str | None = None

    REVALIDATION_SETTINGS_KEY: str = "nextjs_wordpress_plugin_settings"

    REVALIDATE_TIMEOUT_SECONDS: float = 10.0
    REVALIDATE_CONCURRENCY: int = 4
    REVALIDATE_MAX_ATTEMPTS: int = 2
    REVALIDATE_BACKOFF_SECONDS: float = 0.5
    REVALIDATE_BACKOFF_MAX_SECONDS: float = 5.0
    REVALIDATE_BATCH_DEADLINE_SECONDS: float | None = None

    ROUTE_PREFIXES: dict[str, str] = {"post": "/blog"}
    LISTING_SLUG: str = "/blog"
    COMMON_SLUGS: list[str] = ["/", "/blog", "/about"]
    RECENT_POSTS_LIMIT: int = 10

    CMS_EVENTS_STREAM: str = "cms.events"
    CMS_EVENTS_GROUP: str = "revalidation-service"

    @property
    def database_url(self) -> str:
        return (
            f"mysql+aiomysql://{self.CMS_DB_USER}:{self.CMS_DB_PASSWORD}"
            f"@{self.CMS_DB_HOST}:{self.CMS_DB_PORT}/{self.CMS_DB_NAME}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
