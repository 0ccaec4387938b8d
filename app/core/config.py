import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(val: str | None) -> list[str]:
    return [v.strip() for v in (val or "").split(",") if v.strip()]


class Settings(BaseSettings):
    # App
    APP_NAME: str = "VideoTube Backend"
    ENV: str = os.getenv("ENV", "production")

    # DB
    DATABASE_URL: str = "sqlite:///./videotube.db"
    SQL_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Media (S3)
    AWS_REGION: Optional[str] = None
    S3_BUCKET_NAME: str = "videotube-media"
    MEDIA_PUBLIC_BASE_URL: Optional[str] = None  # e.g. a CDN in front of the bucket

    # CORS (schemed origins like https://www.videotube.app)
    ALLOW_ORIGINS: list[str] = Field(default_factory=list)  # override via ALLOWED_ORIGINS (CSV)
    ALLOW_METHODS: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    ALLOW_HEADERS: list[str] = ["*"]
    ALLOW_CREDENTIALS: bool = True

    # Auth / JWT
    JWT_SECRET: str = "dev-access-secret-change-me"
    REFRESH_TOKEN_SECRET: str = "dev-refresh-secret-change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRES_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRES_MINUTES: int = 60 * 24 * 10  # 10 days

    # Passwords
    BCRYPT_ROUNDS: int = 12

    # Cookies
    ACCESS_COOKIE_NAME: str = "accessToken"
    REFRESH_COOKIE_NAME: str = "refreshToken"
    COOKIE_DOMAIN: Optional[str] = None
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = "lax"  # 'lax', 'strict' or 'none'

    # Load .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ---------- Helpers ----------

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def cookie_secure(self) -> bool:
        # browsers drop SameSite=None cookies that are not Secure
        return self.COOKIE_SECURE or self.COOKIE_SAMESITE.lower() == "none"


def build_settings() -> Settings:
    s = Settings()

    # Heroku-style URLs
    if s.DATABASE_URL.startswith("postgres://"):
        s.DATABASE_URL = s.DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # Load CORS overrides
    env_origins = _split_csv(os.getenv("ALLOWED_ORIGINS"))
    if env_origins:
        s.ALLOW_ORIGINS = env_origins
    elif not s.ALLOW_ORIGINS:
        s.ALLOW_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

    return s


settings = build_settings()
