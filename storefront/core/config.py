"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

_INSECURE_SECRET = "CHANGE-ME-TO-A-RANDOM-64-CHAR-HEX-STRING-IN-PRODUCTION"


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "Storefront"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ── Database (any SQLAlchemy async URL) ─────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./storefront.db"

    # ── JWT ──────────────────────────────────────────────────────────
    SECRET_KEY: str = _INSECURE_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    # ── Pricing ──────────────────────────────────────────────────────
    TAX_RATE: Decimal = Decimal("0.08")

    # ── CORS ─────────────────────────────────────────────────────────
    CORS_ORIGINS: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Rate limiting (slowapi) ──────────────────────────────────────
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"

    # ── Seeding ──────────────────────────────────────────────────────
    FIRST_ADMIN_EMAIL: str = "admin@storefront.local"
    FIRST_ADMIN_PASSWORD: str = "changeme123"
    FIRST_ADMIN_NAME: str = "Admin User"
    # Named sample dataset; when on, the catalog is filled with demo products
    # at startup and /health reports the sample mode.
    SEED_SAMPLE_CATALOG: bool = False

    # ── Orders ───────────────────────────────────────────────────────
    ORDER_STOCK_CHECK: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()

if settings.SECRET_KEY == _INSECURE_SECRET:
    import logging

    logging.getLogger("storefront.core.config").warning(
        "You are running with the default INSECURE secret key! "
        "Set SECRET_KEY in your .env file."
    )
