"""Process-wide wiring of the URL mapping service.

The encryption key is loaded (or generated) exactly once per process, before
the first request is served, and shared by reference with every request
afterwards. A failure to load the key aborts construction: the service never
runs without a valid key.

Functions:
    build_service(config: dict | None = None) -> ShortURLService
        Construct a service from a configuration document.
    get_service() -> ShortURLService
        Return the process-wide service, building it on first use.
"""

import os
import logging
from functools import lru_cache
from typing import Any

from sealedshortener.constants import ENV, Defaults
from sealedshortener.dao.redis import KeyValueRedisDAO
from sealedshortener.encryption import URLCipher
from sealedshortener.exceptions import KeyStorageError
from sealedshortener.service.url_service import ShortURLService
from sealedshortener.utils.config import app_prefix, load_config


logger = logging.getLogger(__name__)


def build_service(config: dict[str, Any] | None = None) -> ShortURLService:
    """Construct a ShortURLService

    Args:
        config (dict | None):
            Configuration document (see `load_config()`). Loaded from the
            environment when omitted.

    Returns:
        ShortURLService:
            Service bound to a Redis DAO and the persisted encryption key.

    Raises:
        KeyStorageError:
            If the key file is unusable (fatal).
        DataStoreError:
            If Redis is unreachable.
        BadConfigurationError:
            If the configuration is invalid.
    """
    config = config or load_config()

    try:
        cipher = URLCipher.from_key_file(config['encryption']['key_path'])
    except KeyStorageError:
        logger.critical('Failed to load the encryption key. Refusing to start.', exc_info=True)
        raise

    redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}
    dao = KeyValueRedisDAO(**redis_config, **config['storage'], prefix=app_prefix())

    logger.info('URL service initialized.', extra={'prefix': app_prefix()})
    return ShortURLService(
        dao=dao,
        cipher=cipher,
        base_url=os.environ.get(ENV.App.BASE_URL) or Defaults.BASE_URL,
    )


@lru_cache(maxsize=1)
def get_service() -> ShortURLService:
    """Return the process-wide ShortURLService (built once, then cached)."""
    return build_service()
