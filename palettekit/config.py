"""
palettekit Configuration
Manages environment variables and defaults for the clustering and palette services.
"""
import os
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    return float(value) if value else None


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value else None


class Config:
    """Configuration class for palettekit services."""

    # Service identity
    SERVICE_NAME: str = "palettekit"
    VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTEKIT_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("PALETTEKIT_LOG_JSON", "0")))

    # Clustering defaults
    DEFAULT_K: int = int(os.environ.get("PALETTEKIT_DEFAULT_K", "5"))
    MAX_K: int = int(os.environ.get("PALETTEKIT_MAX_K", "64"))
    MAX_ITERATIONS: int = int(os.environ.get("PALETTEKIT_MAX_ITERATIONS", "300"))
    EMPTY_CLUSTER_POLICY: str = os.environ.get("PALETTEKIT_EMPTY_CLUSTER_POLICY", "reseed_nearest")
    MAX_RESTARTS: int = int(os.environ.get("PALETTEKIT_MAX_RESTARTS", "10"))
    TOLERANCE: Optional[float] = _optional_float("PALETTEKIT_TOLERANCE")
    N_INIT: int = int(os.environ.get("PALETTEKIT_N_INIT", "1"))
    WORKERS: Optional[int] = _optional_int("PALETTEKIT_WORKERS")
    DEFAULT_SEED: int = int(os.environ.get("PALETTEKIT_DEFAULT_SEED", "42"))

    # Request limits
    MAX_SAMPLES: int = int(os.environ.get("PALETTEKIT_MAX_SAMPLES", "50000"))

    @classmethod
    def validate_k(cls, k: int) -> bool:
        """Validate requested palette size."""
        return 1 <= k <= cls.MAX_K


# Global config instance
config = Config()
