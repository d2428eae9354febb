"""Estimator configuration settings.

Loads configuration from environment variables with sensible defaults.
A local .env file is honoured for development overrides.
"""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Calculation limits
    max_units: float = field(default_factory=lambda: float(os.getenv("ESTIMATOR_MAX_UNITS", "50000")))
    max_cost: float = field(default_factory=lambda: float(os.getenv("ESTIMATOR_MAX_COST", "10000000")))

    # Engine option defaults
    enable_caching: bool = field(default_factory=lambda: _env_bool("ESTIMATOR_ENABLE_CACHING", "true"))
    max_cache_size: int = field(default_factory=lambda: int(os.getenv("ESTIMATOR_MAX_CACHE_SIZE", "1000")))
    timeout_ms: int = field(default_factory=lambda: int(os.getenv("ESTIMATOR_TIMEOUT_MS", "30000")))
    strict_validation: bool = field(default_factory=lambda: _env_bool("ESTIMATOR_STRICT_VALIDATION", "false"))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a limit or option is out of range.
        """
        if self.max_units <= 0:
            raise ValueError("ESTIMATOR_MAX_UNITS must be positive")
        if self.max_cost <= 0:
            raise ValueError("ESTIMATOR_MAX_COST must be positive")
        if self.max_cache_size < 1:
            raise ValueError("ESTIMATOR_MAX_CACHE_SIZE must be at least 1")
        if self.timeout_ms < 0:
            raise ValueError("ESTIMATOR_TIMEOUT_MS cannot be negative")


# Singleton settings instance
settings = Settings()
