import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv(override=False)


def _env(name, default):
    return os.getenv(name, default)


def _env_float(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Config:
    # HTTP
    HOST: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    PORT: int = field(default_factory=lambda: int(_env_float("PORT", 4000)))
    CLIENT_ORIGIN: str = field(default_factory=lambda: _env("CLIENT_ORIGIN", "http://localhost:5173"))
    PRODUCTION: bool = field(default_factory=lambda: _env("APP_ENV", "development").lower() == "production")

    # Storage
    DATABASE_URL: str = field(default_factory=lambda: _env("DATABASE_URL", "sqlite:///tasks.db"))

    # CSRF / session cookie
    SECRET_KEY: str = field(default_factory=lambda: _env("SECRET_KEY", "dev-only-change-me"))
    CSRF_HEADER: str = "X-CSRF-Token"

    # Client side
    API_BASE_URL: str = field(default_factory=lambda: _env("API_BASE_URL", "http://localhost:4000/api"))
    REQUEST_TIMEOUT: float = field(default_factory=lambda: _env_float("REQUEST_TIMEOUT", 10.0))
    HIGHLIGHT_SECONDS: float = 4.0                # how long a created/updated task stays highlighted

    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

CONFIG = Config()
