import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _split(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


DEFAULT_PRECACHE_URLS = ",".join(
    [
        "/",
        "/index.html",
        "/manifest.json",
        "/offline.html",
    ]
)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Worker identity
    app_id: str = os.getenv("APP_ID", "offline-cache")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")

    # Origin
    origin_url: str = os.getenv("ORIGIN_URL", "http://localhost:8080")
    origin_timeout: float = float(os.getenv("ORIGIN_TIMEOUT", "5.0"))

    # Interception
    precache_urls: tuple[str, ...] = field(
        default_factory=lambda: _split(os.getenv("PRECACHE_URLS", DEFAULT_PRECACHE_URLS))
    )
    offline_path: str = os.getenv("OFFLINE_PATH", "/offline.html")
    dynamic_prefixes: tuple[str, ...] = field(
        default_factory=lambda: _split(os.getenv("DYNAMIC_PREFIXES", "/api/"))
    )
    skip_waiting: bool = os.getenv("SKIP_WAITING", "false").lower() == "true"
    max_background_tasks: int = int(os.getenv("MAX_BACKGROUND_TASKS", "16"))
    install_on_startup: bool = os.getenv("INSTALL_ON_STARTUP", "true").lower() == "true"

    # Storage
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    cache_namespace: str = os.getenv("CACHE_NAMESPACE", "offline_cache")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "text")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.offline_path not in self.precache_urls:
            raise ValueError(
                f"OFFLINE_PATH {self.offline_path!r} must be listed in PRECACHE_URLS "
                "so it is stored at install time"
            )

        if self.max_background_tasks < 1:
            raise ValueError("MAX_BACKGROUND_TASKS must be at least 1")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"LOG_FORMAT must be 'text' or 'json', got {self.log_format!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_redis_client(settings: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    settings = settings or get_settings()
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
