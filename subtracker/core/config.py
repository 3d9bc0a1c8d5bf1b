from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Immutable application configuration, built once at startup."""

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24
    bcrypt_rounds: int = 10
    database_path: Path = Path("data/subtracker.db")
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 3000
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        environment = os.getenv("APP_ENV", "development")
        load_dotenv(f".env.{environment}.local")
        load_dotenv()
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            cors_allow_origins = ["*"]
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", "change-me"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=_get_int("JWT_EXPIRES_MINUTES", default=60 * 24),
            bcrypt_rounds=_get_int("BCRYPT_ROUNDS", default=10),
            database_path=Path(os.getenv("DATABASE_PATH", "data/subtracker.db")).resolve(),
            cors_allow_origins=cors_allow_origins,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=_get_int("PORT", default=3000),
            environment=environment,
        )


def _get_int(key: str, default: Optional[int] = None) -> int:
    value = os.getenv(key)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {key} must be an integer") from exc
