from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://trainlog_user:trainlog_password@db:5432/trainlog_db"
    SQL_ECHO: bool = False
    # Recreate tables on startup (local development only)
    RESET_DATABASE: bool = False

    SECRET_KEY: str = "SECRET_KEY_FOR_TRAINLOG"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "VITE_GEMINI_API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    AI_TIMEOUT_SECONDS: float = 30.0

    # Optional external identity provider used to validate bearer tokens
    AUTH_PROVIDER_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "AUTH_PROVIDER_URL", "SUPABASE_URL", "VITE_SUPABASE_URL"
        ),
    )
    AUTH_PROVIDER_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "AUTH_PROVIDER_KEY", "SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"
        ),
    )

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
    LOG_LEVEL: str = "INFO"

    @field_validator("AUTH_PROVIDER_URL")
    @classmethod
    def strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value

    @property
    def async_database_url(self) -> str:
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.DATABASE_URL

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()
