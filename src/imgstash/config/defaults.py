"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Default storage settings
DEFAULT_DB_PATH = Path.home() / ".imgstash" / "images.db"
DEFAULT_TTL_SECONDS = 300
DEFAULT_KEY_LENGTH = 50
DEFAULT_CACHE_MAX_MB = 64.0
DEFAULT_REPOPULATE_ON_READ = False

# Default image settings
DEFAULT_JPEG_QUALITY = 75

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "db_path": str(DEFAULT_DB_PATH),
        "ttl_seconds": DEFAULT_TTL_SECONDS,
        "key_length": DEFAULT_KEY_LENGTH,
        "cache_max_mb": DEFAULT_CACHE_MAX_MB,
        "repopulate_on_read": DEFAULT_REPOPULATE_ON_READ,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "log_level": DEFAULT_LOG_LEVEL,
    }
