# config.py

"""Configuration for the member statistics service."""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


# --- DATABASE CONFIGURATION ---
# Defaults to a local SQLite file so the service boots without Postgres.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./member_stats.db")

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))

# Request Size Limits
MAX_REQUEST_BODY_SIZE = int(os.getenv("MAX_REQUEST_BODY_SIZE", 1024 * 1024))  # 1MB default

# Authentication
AUTH_SECRET = os.getenv("AUTH_SECRET", "mysecret")
VALID_ISSUERS = _csv(os.getenv("VALID_ISSUERS", ""))
JWT_ALGORITHMS = _csv(os.getenv("JWT_ALGORITHMS", "HS256"))
ADMIN_ROLES = _csv(os.getenv("ADMIN_ROLES", "administrator,admin"))

# Statistics
PUBLIC_GROUP_ID = int(os.getenv("PUBLIC_GROUP_ID", "10"))
STATISTICS_SECURE_FIELDS = _csv(os.getenv("STATISTICS_SECURE_FIELDS", "createdBy,updatedBy"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")


class Settings:
    """Settings class for configuration."""

    def __init__(self):
        self.DATABASE_URL = DATABASE_URL
        self.DB_POOL_SIZE = DB_POOL_SIZE
        self.DB_MAX_OVERFLOW = DB_MAX_OVERFLOW
        self.API_HOST = API_HOST
        self.API_PORT = API_PORT
        self.MAX_REQUEST_BODY_SIZE = MAX_REQUEST_BODY_SIZE
        self.AUTH_SECRET = AUTH_SECRET
        self.VALID_ISSUERS = VALID_ISSUERS
        self.JWT_ALGORITHMS = JWT_ALGORITHMS
        self.ADMIN_ROLES = ADMIN_ROLES
        self.PUBLIC_GROUP_ID = PUBLIC_GROUP_ID
        self.STATISTICS_SECURE_FIELDS = STATISTICS_SECURE_FIELDS
        self.LOG_LEVEL = LOG_LEVEL
        self.LOG_FORMAT = LOG_FORMAT


# Global settings instance
settings = Settings()
