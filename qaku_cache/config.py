"""Process configuration read from the environment."""

import os
from dataclasses import dataclass, field

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CODEX_API_URL = "http://codex:8080"
DEFAULT_WAKU_API_URL = "http://nwaku:8645"
DEFAULT_CONTENT_TOPIC = "/0/qaku/1/persist/json"
DEFAULT_MAX_DATASET_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_IN_FLIGHT = 16
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8080
DEFAULT_METRICS_PORT = 8003
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "https://qaku.app")


@dataclass(frozen=True)
class PolicyConfig:
    """Size policy applied to every announcement."""

    max_dataset_size_bytes: int = DEFAULT_MAX_DATASET_SIZE

    def __post_init__(self) -> None:
        if self.max_dataset_size_bytes <= 0:
            raise ValueError("max_dataset_size_bytes must be positive")


@dataclass(frozen=True)
class Settings:
    """All settings of the cache node."""

    codex_api_url: str = DEFAULT_CODEX_API_URL
    waku_api_url: str = DEFAULT_WAKU_API_URL
    content_topic: str = DEFAULT_CONTENT_TOPIC
    max_dataset_size: int = DEFAULT_MAX_DATASET_SIZE
    max_in_flight: int = DEFAULT_MAX_IN_FLIGHT
    dedupe_in_flight: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    metrics_port: int = DEFAULT_METRICS_PORT
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    @property
    def policy(self) -> PolicyConfig:
        return PolicyConfig(max_dataset_size_bytes=self.max_dataset_size)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables, keeping defaults for bad values."""
        env = os.environ if environ is None else environ

        return cls(
            codex_api_url=_url(env, "CODEX_API_URL", DEFAULT_CODEX_API_URL),
            waku_api_url=_url(env, "WAKU_API_URL", DEFAULT_WAKU_API_URL),
            content_topic=env.get("QAKU_CONTENT_TOPIC") or DEFAULT_CONTENT_TOPIC,
            max_dataset_size=_positive_int(
                env, "QAKU_CACHE_MAX_SIZE", DEFAULT_MAX_DATASET_SIZE
            ),
            max_in_flight=_positive_int(
                env, "QAKU_CACHE_MAX_IN_FLIGHT", DEFAULT_MAX_IN_FLIGHT
            ),
            dedupe_in_flight=_flag(env, "QAKU_CACHE_DEDUPE"),
            poll_interval=_positive_float(
                env, "WAKU_POLL_INTERVAL", DEFAULT_POLL_INTERVAL
            ),
            api_host=env.get("API_HOST") or DEFAULT_API_HOST,
            api_port=_positive_int(env, "API_PORT", DEFAULT_API_PORT),
            metrics_port=_positive_int(env, "METRICS_PORT", DEFAULT_METRICS_PORT),
            cors_origins=_csv(env, "CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )


def _url(env, name: str, default: str) -> str:
    value = env.get(name)
    if not value:
        return default
    return value.rstrip("/")


def _positive_int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, got %s; using default %s", name, value, default)
        return default
    return value


def _positive_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, got %s; using default %s", name, value, default)
        return default
    return value


def _flag(env, name: str) -> bool:
    return (env.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


def _csv(env, name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = env.get(name)
    if not raw:
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default
