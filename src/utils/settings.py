"""Process-wide configuration.

Settings are read from the environment once at startup and passed to the
components that need them. The object is frozen; nothing mutates it after
construction.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_FRONTEND_URL = "http://localhost:3000"


@dataclass(frozen=True)
class Settings:
    """Immutable service configuration."""
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    mongo_url: str | None = None
    database_name: str = "accounts"
    environment: str = "development"
    frontend_url: str = DEFAULT_FRONTEND_URL
    cors_origins: tuple[str, ...] = (DEFAULT_FRONTEND_URL,)
    bcrypt_rounds: int = 12
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    mail_username: str | None = field(default=None, repr=False)
    mail_password: str | None = field(default=None, repr=False)
    mail_from_name: str = "Account Service"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def mail_configured(self) -> bool:
        return bool(self.smtp_host and self.mail_username and self.mail_password)


def parse_cors_origins(raw: str | None, fallback: str) -> tuple[str, ...]:
    """Split a comma-separated origin list, tolerating "a, b" spacing."""
    if not raw:
        return (fallback,)
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Raises:
        ValueError: JWT_SECRET_KEY is missing or a numeric variable is malformed
    """
    env = os.environ if env is None else env

    secret = env.get("JWT_SECRET_KEY")
    if not secret:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    frontend_url = env.get("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/")

    try:
        bcrypt_rounds = int(env.get("BCRYPT_ROUNDS", "12"))
        smtp_port = int(env.get("SMTP_PORT", "587"))
    except ValueError as e:
        raise ValueError(f"Invalid numeric setting: {e}") from e

    if not 4 <= bcrypt_rounds <= 31:
        raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")

    return Settings(
        jwt_secret_key=secret,
        jwt_algorithm=env.get("JWT_ALGORITHM", "HS256"),
        mongo_url=env.get("MONGO_URL") or None,
        database_name=env.get("MONGODB_DATABASE", "accounts"),
        environment=env.get("APP_ENV", "development"),
        frontend_url=frontend_url,
        cors_origins=parse_cors_origins(env.get("CORS_ORIGINS"), frontend_url),
        bcrypt_rounds=bcrypt_rounds,
        smtp_host=env.get("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=smtp_port,
        mail_username=env.get("MAIL_USERNAME") or None,
        mail_password=env.get("MAIL_PASSWORD") or None,
        mail_from_name=env.get("MAIL_FROM_NAME", "Account Service"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
