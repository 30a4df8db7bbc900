"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./questions.db"
    DATABASE_ECHO: bool = False

    # JWT (both secrets are required; a missing or blank one fails startup)
    JWT_SECRET: str
    JWT_REFRESH_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Passwords
    BCRYPT_ROUNDS: int = 10

    # AI provider
    AI_PROVIDER: str = "auto"
    GROQ_API_KEY: str = ""
    GOOGLE_AI_API_KEY: str = ""
    AI_MODEL: str = "llama-3.1-8b-instant"
    GOOGLE_AI_MODEL: str = "gemini-1.5-flash"
    AI_TIMEOUT_SECONDS: float = 30.0
    AI_MAX_TOKENS: int = 500
    AI_TEMPERATURE: float = 0.7

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Rate limiting (requests per RATE_LIMIT_WINDOW_SECONDS per client)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    RATE_LIMIT_STANDARD: int = 100
    RATE_LIMIT_AUTH: int = 5
    # Key clients on X-Forwarded-For; enable only behind a proxy that sets it
    RATE_LIMIT_TRUST_FORWARDED: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    @field_validator("JWT_SECRET", "JWT_REFRESH_SECRET")
    @classmethod
    def secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
