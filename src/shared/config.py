"""Application settings assembled from the environment.

A `.env` file in the working directory is loaded first (if present), so local
development does not need exported variables. Settings are cached; tests that
change the environment call ``get_settings.cache_clear()``.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_JWT_SECRET = "change-me"


def _get_int(name: str, fallback: int) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw_value!r}") from exc


def get_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("ENV") or "development").lower()


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    database_url: str = "sqlite:///./storefront.db"
    lock_timeout_ms: int = 5000
    placement_max_attempts: int = 3
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    payment_currency: str = "usd"
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_minutes: int = 60

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls(
            environment=get_environment(),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            lock_timeout_ms=_get_int("LOCK_TIMEOUT_MS", cls.lock_timeout_ms),
            placement_max_attempts=_get_int("PLACEMENT_MAX_ATTEMPTS", cls.placement_max_attempts),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY") or None,
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
            payment_currency=os.getenv("PAYMENT_CURRENCY", cls.payment_currency).lower(),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_expires_minutes=_get_int("JWT_EXPIRES_MINUTES", cls.jwt_expires_minutes),
        )
        if settings.is_production and settings.jwt_secret == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production")
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
