# product_service/config.py

"""
Environment configuration for the Product Service.
Values are read when ``get_settings()`` is called, so tests can build their
own ``Settings`` or change the environment before creating the app.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _default_database_url() -> str:
    postgres_user = os.getenv("POSTGRES_USER", "postgres")
    postgres_password = os.getenv("POSTGRES_PASSWORD", "postgres")
    postgres_db = os.getenv("POSTGRES_DB", "products")
    postgres_host = os.getenv("POSTGRES_HOST", "localhost")
    postgres_port = os.getenv("POSTGRES_PORT", "5432")
    return (
        "postgresql://"
        f"{postgres_user}:{postgres_password}@"
        f"{postgres_host}:{postgres_port}/{postgres_db}"
    )


@dataclass(frozen=True)
class Settings:
    """Settings for one application instance."""

    database_url: str
    db_connect_max_retries: int = 10
    db_connect_retry_delay_seconds: float = 5.0
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


def get_settings() -> Settings:
    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL") or _default_database_url(),
        db_connect_max_retries=int(os.getenv("DB_CONNECT_MAX_RETRIES", "10")),
        db_connect_retry_delay_seconds=float(
            os.getenv("DB_CONNECT_RETRY_DELAY_SECONDS", "5")
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )
