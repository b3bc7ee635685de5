"""Runtime settings read from the environment.

Importing this module loads `.env` via python-dotenv, so values set there are
visible to every default below. Variables already set in the process
environment take precedence.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ENVIRONMENTS = ('development', 'production')
ENVIRONMENT = os.environ.get('ENVIRONMENT', '').strip().lower()
IS_PRODUCTION_ENVIRONMENT = ENVIRONMENT == 'production'

if ENVIRONMENT not in ENVIRONMENTS:
    logger.warning(
        f"ENVIRONMENT='{ENVIRONMENT}' is not one of {', '.join(ENVIRONMENTS)}; running as development"
    )

DEFAULT_DB_NAME = 'events_db'
DEFAULT_PORT = 5000
DEFAULT_UPLOAD_DIR = 'uploads'
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, '').strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'")

@dataclass
class Settings:
    """
    Service settings.

    Every value has a safe default except the database URL in production,
    which must come from DATABASE_URL.

    Fields:
        database_url: Store connection string (None means derive a SQLite path in development)
        db_name: Store name, used for the development SQLite file
        port: Listening port
        upload_dir: Directory uploaded files are written to and served from
        max_file_size: Upload size ceiling in bytes
        is_production: Whether the service runs in production mode
        cors_origins: Allowed origins in production
    """
    database_url: Optional[str] = field(default_factory=lambda: os.environ.get('DATABASE_URL') or None)
    db_name: str = field(default_factory=lambda: os.environ.get('DB_NAME') or DEFAULT_DB_NAME)
    port: int = field(default_factory=lambda: _env_int('PORT', DEFAULT_PORT))
    upload_dir: Path = field(default_factory=lambda: Path(os.environ.get('UPLOAD_DIR') or DEFAULT_UPLOAD_DIR))
    max_file_size: int = field(default_factory=lambda: _env_int('MAX_FILE_SIZE', DEFAULT_MAX_FILE_SIZE))
    is_production: bool = IS_PRODUCTION_ENVIRONMENT
    cors_origins: list[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.environ.get('CORS_ORIGINS', '').split(',')
            if origin.strip()
        ]
    )

    def __post_init__(self):
        self.upload_dir = Path(self.upload_dir)

    def validate(self) -> bool:
        """Validate the configuration."""
        if self.is_production and not self.database_url:
            raise ValueError("DATABASE_URL environment variable is required in production environment")
        if self.max_file_size <= 0:
            raise ValueError("MAX_FILE_SIZE must be a positive number of bytes")
        return True

    @property
    def max_file_size_mb(self) -> float:
        """Upload ceiling in megabytes, for user-facing messages."""
        size = self.max_file_size / (1024 * 1024)
        return int(size) if size == int(size) else round(size, 2)
