from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = Field(default="development")
    APP_SECRET: str = Field(default="please-change-me")
    LOG_LEVEL: str = Field(default="INFO")

    DATABASE_URL: str | None = Field(default=None)
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=5432)
    DB_USER: str = Field(default="kashpages")
    DB_PASSWORD: str = Field(default="kashpages")
    DB_NAME: str = Field(default="kashpages")
    DB_SYNC_ECHO: bool = Field(default=False)
    DB_POOL_SIZE: int = Field(default=10)
    DB_MAX_OVERFLOW: int = Field(default=20)
    DB_POOL_TIMEOUT: int = Field(default=30)

    SITE_URL: str = Field(default="https://kashpages.in")
    SITE_NAME: str = Field(default="KashPages")

    SESSION_COOKIE_NAME: str = Field(default="admin_session")
    SESSION_MAX_AGE_SECONDS: int = Field(default=60 * 60 * 24 * 5)
    # honour X-Forwarded-For only behind a reverse proxy that overwrites it
    TRUST_PROXY_HEADERS: bool = Field(default=False)

    IDENTITY_API_KEY: str | None = Field(default=None)
    IDENTITY_BASE_URL: str = Field(default="https://identitytoolkit.googleapis.com")
    IDENTITY_TIMEOUT_SECONDS: float = Field(default=10.0)

    REBUILD_WEBHOOK_URL: str | None = Field(default=None)
    REBUILD_WEBHOOK_TOKEN: str | None = Field(default=None)
    REBUILD_EVENT_TYPE: str = Field(default="rebuild-site")
    REBUILD_TIMEOUT_SECONDS: float = Field(default=10.0)

    CDN_PURGE_URL: str | None = Field(default=None)
    CDN_PURGE_TOKEN: str | None = Field(default=None)

    TELEGRAM_BOT_TOKEN: str | None = Field(default=None)
    TELEGRAM_CHAT_ID: str | None = Field(default=None)

    IMAGE_HOST_ALLOWLIST: str = Field(
        default="firebaseapp.com,firebase.google.com,firebasestorage.googleapis.com"
    )
    STATIC_EXPORT_DIR: str = Field(default="dist")

    @property
    def sync_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def site_url(self) -> str:
        return self.SITE_URL.rstrip("/")

    @property
    def image_hosts(self) -> List[str]:
        return [h.strip().lower() for h in self.IMAGE_HOST_ALLOWLIST.split(",") if h.strip()]


settings = Settings()
