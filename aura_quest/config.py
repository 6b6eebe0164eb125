"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from aura_quest.exceptions import ConfigurationError

load_dotenv()

# Storage
# - 'file' (default): one file per key under DATA_PATH, shared by every process on the host
# - 'redis': keys in Redis, changes announced on a pub/sub channel
# - 'memory': in-process only (tests, demos)
STORE_BACKEND: str = os.getenv("STORE_BACKEND", "file").lower()
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
STORE_KEY_PREFIX: str = os.getenv("STORE_KEY_PREFIX", "aq_")

# Sync
SYNC_POLL_INTERVAL: float = float(os.getenv("SYNC_POLL_INTERVAL", "1.0"))

# API
API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
API_PORT: int = int(os.getenv("API_PORT", "8080"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Metrics
ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

STORE_BACKENDS = ("memory", "file", "redis")


def validate_config() -> None:
    """Validate configuration"""
    if STORE_BACKEND not in STORE_BACKENDS:
        raise ConfigurationError(
            f"Unknown STORE_BACKEND '{STORE_BACKEND}' (expected one of {', '.join(STORE_BACKENDS)})",
            config_key="STORE_BACKEND",
        )
    if SYNC_POLL_INTERVAL <= 0:
        raise ConfigurationError(
            "SYNC_POLL_INTERVAL must be positive",
            config_key="SYNC_POLL_INTERVAL",
        )
