"""
Configuration module for tokenauth.

Centralizes configuration with environment variable support and
validation.
"""

import os
from pathlib import Path
from typing import Dict

from .storage import InMemoryStorage, SqliteStorage, Storage

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("TOKENAUTH_ENV", "dev")  # dev|stage|prod

# Storage backend: memory|sqlite
STORAGE_BACKEND = os.getenv("TOKENAUTH_STORAGE", "memory")
DB_PATH = os.getenv("TOKENAUTH_DB_PATH", "data/tokenauth.db")

# Logging
LOG_LEVEL = os.getenv("TOKENAUTH_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("TOKENAUTH_LOG_JSON", "true").lower() in ("1", "true", "yes")
LOG_FILE = os.getenv("TOKENAUTH_LOG_FILE", "")

VALID_ENVS = ("dev", "stage", "prod")
VALID_BACKENDS = ("memory", "sqlite")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================
# Factories
# ============================================================

def create_storage(backend: str = None, db_path: str = None) -> Storage:
    """Build the configured storage backend."""
    backend = backend or STORAGE_BACKEND
    if backend == "memory":
        return InMemoryStorage()
    if backend == "sqlite":
        return SqliteStorage(db_path or DB_PATH)
    raise ValueError(f"Unknown storage backend: {backend}")


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Check configuration values.
    Returns dict of setting -> valid.
    """
    checks = {
        "env": ENV in VALID_ENVS,
        "storage": STORAGE_BACKEND in VALID_BACKENDS,
        "log_level": LOG_LEVEL.upper() in VALID_LOG_LEVELS,
    }
    if STORAGE_BACKEND == "sqlite" and DB_PATH != ":memory:":
        parent = Path(DB_PATH).parent
        checks["db_path"] = not parent.exists() or parent.is_dir()
    if LOG_FILE:
        checks["log_file"] = Path(LOG_FILE).parent.is_dir()
    return checks


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("TOKENAUTH_DEBUG", "").lower() in ("1", "true", "yes")
