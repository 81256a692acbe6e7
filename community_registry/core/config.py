import logging
import sys

from community_registry.core.logging import InterceptHandler
from loguru import logger
from starlette.config import Config
from starlette.datastructures import Secret

# Load .env
config = Config(".env")

# Core App Settings
API_PREFIX = "/api/v1"
VERSION = "0.1.0"

# JWT / Admin session
# Load SECRET_KEY as Starlette Secret, fallback default included
try:
    SECRET_KEY: Secret = config("SECRET_KEY", cast=Secret)
except Exception:
    SECRET_KEY = Secret("testsecretkey1234567890")

ALGORITHM: str = config("ALGORITHM", default="HS256")

# 7 days, the lifetime of an admin session cookie
ACCESS_TOKEN_EXPIRE_MINUTES: int = config("ACCESS_TOKEN_EXPIRE_MINUTES", cast=int, default=60 * 24 * 7)
SESSION_COOKIE_NAME: str = config("SESSION_COOKIE_NAME", default="admin_session")
SESSION_COOKIE_SECURE: bool = config("SESSION_COOKIE_SECURE", cast=bool, default=False)

DEBUG: bool = config("DEBUG", cast=bool, default=False)
PRELOAD_STORAGE: bool = config("PRELOAD_STORAGE", cast=bool, default=True)
DESCRIPTION: str = config("DESCRIPTION", default="Community event registration API")
DOCS_URL: str = config("DOCS_URL", default="/api/v1/docs")
PROJECT_NAME: str = config("PROJECT_NAME", default="community-registry")

# DB Connection Pieces
POSTGRES_HOST: str = config("POSTGRES_HOST", default="127.0.0.1")
POSTGRES_PORT: str = config("POSTGRES_PORT", default="5432")
POSTGRES_USER: str = config("POSTGRES_USER", default="postgres")
POSTGRES_PASSWORD: str = config("POSTGRES_PASSWORD", default="password")
POSTGRES_DB: str = config("POSTGRES_DB", default="registrations")

# A full DATABASE_URL wins over the individual pieces
DATABASE_URL: str = config(
    "DATABASE_URL",
    default=(
        f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}"
        f"@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}"
    ),
)
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)

# Connection Pooling
MAX_CONNECTIONS_COUNT: int = config("MAX_CONNECTIONS_COUNT", cast=int, default=20)
MIN_CONNECTIONS_COUNT: int = config("MIN_CONNECTIONS_COUNT", cast=int, default=10)

# Table names
REGISTRATIONS_TABLE: str = config("REGISTRATIONS_TABLE", default="registrations")
ADMIN_USERS_TABLE: str = config("ADMIN_USERS_TABLE", default="admin_users")

# Admin listing
LIST_DEFAULT_LIMIT: int = config("LIST_DEFAULT_LIMIT", cast=int, default=20)
LIST_MAX_LIMIT: int = config("LIST_MAX_LIMIT", cast=int, default=100)

# Signed photo URLs (seconds)
PHOTO_URL_DEFAULT_EXPIRES: int = config("PHOTO_URL_DEFAULT_EXPIRES", cast=int, default=600)
PHOTO_URL_MIN_EXPIRES: int = config("PHOTO_URL_MIN_EXPIRES", cast=int, default=60)
PHOTO_URL_MAX_EXPIRES: int = config("PHOTO_URL_MAX_EXPIRES", cast=int, default=3600)

# Public photo endpoint guard; empty means open
REGISTRATIONS_ADMIN_TOKEN: Secret = config("REGISTRATIONS_ADMIN_TOKEN", cast=Secret, default="")

# Object storage (S3 compatible)
PHOTOS_BUCKET: str = config("PHOTOS_BUCKET", default="registration-photos")
STORAGE_ENDPOINT_URL: str = config("STORAGE_ENDPOINT_URL", default="")
STORAGE_REGION: str = config("STORAGE_REGION", default="us-east-1")
STORAGE_ACCESS_KEY_ID: str = config("STORAGE_ACCESS_KEY_ID", default="")
STORAGE_SECRET_ACCESS_KEY: Secret = config("STORAGE_SECRET_ACCESS_KEY", cast=Secret, default="")

# Logging
LOGGING_LEVEL = logging.DEBUG if DEBUG else logging.INFO
logging.basicConfig(
    handlers=[InterceptHandler(level=LOGGING_LEVEL)],
    level=LOGGING_LEVEL,
)
logger.configure(handlers=[{"sink": sys.stderr, "level": LOGGING_LEVEL}])
