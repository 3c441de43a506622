import string
from enum import StrEnum


class Shortcode:
    """Short code shape."""

    # URL-safe alphabet for generated codes (64 symbols)
    ALPHABET = string.ascii_letters + string.digits + '_-'
    LENGTH = 6  # Length of generated codes
    MAX_ATTEMPTS = 5  # Generated code collisions tolerated before giving up

    # Custom alias bounds (inclusive)
    ALIAS_MIN_LENGTH = 3
    ALIAS_MAX_LENGTH = 32


class Crypto:
    """AES-GCM parameters."""

    KEY_BYTES = 32  # 256-bit key
    NONCE_BYTES = 12  # 96-bit nonce


class Defaults:
    """Fallback configuration values."""

    APP_ENV = 'local'
    BASE_URL = 'http://localhost:3000'
    KEY_PATH = 'encryption.key'
    LOG_LEVEL = 'INFO'

    REDIS_HOST = 'localhost'
    REDIS_PORT = 6379
    REDIS_DB = 0
    REDIS_FSYNC = True
    REDIS_FSYNC_TIMEOUT_MS = 1_000
    REDIS_SCAN_COUNT = 500


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        LOG_LEVEL = 'LOG_LEVEL'
        BASE_URL = 'SHORTENER_BASE_URL'
        KEY_PATH = 'SHORTENER_KEY_PATH'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105
        # Durable writes via WAITAOF (requires appendonly yes)
        FSYNC = 'REDIS_FSYNC'
        FSYNC_TIMEOUT_MS = 'REDIS_FSYNC_TIMEOUT_MS'
        SCAN_COUNT = 'REDIS_SCAN_COUNT'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
