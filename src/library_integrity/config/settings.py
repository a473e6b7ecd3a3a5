"""
Configuration settings for the library integrity suite
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "postgres")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Environment-driven settings for stores, fake data and logging"""

    database_url: Optional[str] = field(default_factory=lambda: os.getenv("DATABASE_URL") or None)
    store_backend: str = field(default_factory=lambda: os.getenv("STORE_BACKEND", "memory").lower())

    # asyncpg pool
    pool_min_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_MIN_SIZE", "1")))
    pool_max_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_MAX_SIZE", "5")))
    command_timeout: float = field(default_factory=lambda: float(os.getenv("DB_COMMAND_TIMEOUT", "60")))
    bootstrap_schema: bool = field(default_factory=lambda: _env_bool("DB_BOOTSTRAP_SCHEMA", True))

    # Test data
    faker_locale: str = field(default_factory=lambda: os.getenv("FAKER_LOCALE", "id_ID"))
    borrowing_period_days: int = field(default_factory=lambda: int(os.getenv("BORROWING_PERIOD_DAYS", "14")))

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    @property
    def postgres_available(self) -> bool:
        return bool(self.database_url)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.store_backend not in BACKENDS:
            errors.append(f"STORE_BACKEND must be one of {', '.join(BACKENDS)}, got '{self.store_backend}'")
        if self.store_backend == "postgres" and not self.database_url:
            errors.append("DATABASE_URL is required when STORE_BACKEND=postgres")
        if self.pool_min_size < 1 or self.pool_max_size < self.pool_min_size:
            errors.append(
                f"Invalid pool size: min={self.pool_min_size}, max={self.pool_max_size}"
            )
        if self.borrowing_period_days < 1:
            errors.append("BORROWING_PERIOD_DAYS must be positive")

        return errors


def get_settings(**overrides) -> Settings:
    """Get validated settings"""
    settings = Settings(**overrides)
    errors = settings.validate()

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return settings


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug(f"Logging configured at {level}")
