"""Utility functions for application configuration management.

All configuration is read from environment variables (names are listed in
`sealedshortener.constants.ENV`). `load_config()` assembles them into a
single document with this structure:

    {
        "redis": {
            "host": "localhost",
            "port": 6379,
            "db": 0,
            "username": None,
            "password": None
        },
        "storage": {
            "fsync": True,
            "fsync_timeout_ms": 1000,
            "scan_count": 500
        },
        "encryption": {
            "key_path": PosixPath("encryption.key")
        }
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config() -> dict
        Load and validate the configuration document.

Example:
    Typical usage while wiring the service:

        >>> from sealedshortener.utils.config import load_config
        >>> config = load_config()
        >>> print(config['redis']['host'])
        localhost
"""

import os
import logging
from pathlib import Path
from typing import Any

from sealedshortener.constants import ENV, Defaults
from sealedshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off'})


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, Defaults.APP_ENV).lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'sealedshortener'
        >>> app_name()
        'sealedshortener'
    """
    return os.environ.get(ENV.App.APP_NAME) or None


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'sealedshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'sealedshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise BadConfigurationError(f"Environment variable '{name}' must be an integer (given value: {raw!r}).") from e
    if value < minimum:
        raise BadConfigurationError(f"Environment variable '{name}' must be >= {minimum} (given value: {value}).")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default

    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise BadConfigurationError(f"Environment variable '{name}' must be a boolean (given value: {raw!r}).")


def load_config() -> dict[str, Any]:
    """Load the application configuration from environment variables

    Returns:
        dict:
            Configuration document with 'redis', 'storage' and 'encryption' sections.

    Raises:
        BadConfigurationError:
            If a numeric or boolean variable holds an invalid value.

    Example:
        >>> os.environ['REDIS_PORT'] = '6380'
        >>> load_config()['redis']['port']
        6380
    """
    config = {
        'redis': {
            'host': os.environ.get(ENV.Redis.HOST) or Defaults.REDIS_HOST,
            'port': _env_int(ENV.Redis.PORT, Defaults.REDIS_PORT, minimum=1),
            'db': _env_int(ENV.Redis.DB, Defaults.REDIS_DB),
            'username': os.environ.get(ENV.Redis.USERNAME) or None,
            'password': os.environ.get(ENV.Redis.PASSWORD) or None,
        },
        'storage': {
            'fsync': _env_bool(ENV.Redis.FSYNC, Defaults.REDIS_FSYNC),
            'fsync_timeout_ms': _env_int(ENV.Redis.FSYNC_TIMEOUT_MS, Defaults.REDIS_FSYNC_TIMEOUT_MS),
            'scan_count': _env_int(ENV.Redis.SCAN_COUNT, Defaults.REDIS_SCAN_COUNT, minimum=1),
        },
        'encryption': {
            'key_path': Path(os.environ.get(ENV.App.KEY_PATH) or Defaults.KEY_PATH),
        },
    }

    logger.debug(
        'Loaded configuration.',
        extra={
            'appEnv': app_env(),
            'redisHost': config['redis']['host'],
            'redisPort': config['redis']['port'],
            'redisDb': config['redis']['db'],
            'fsync': config['storage']['fsync'],
        },
    )
    return config
