"""Check that a local Redis and the encryption key file are usable

Connection details come from the usual environment variables
(REDIS_HOST, REDIS_PORT, REDIS_DB, REDIS_FSYNC, SHORTENER_KEY_PATH, ...).

Expect to see "OK" printed for Redis and for the key file. Nothing is written
to Redis; the key file is generated if it doesn't exist yet.
"""

from sealedshortener.dao.redis import KeyValueRedisDAO
from sealedshortener.encryption import URLCipher
from sealedshortener.utils import app_prefix, load_config


def main():
    config = load_config()
    redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}

    KeyValueRedisDAO(**redis_config, **config['storage'], prefix=app_prefix())  # PINGs Redis
    print(f"Redis at {config['redis']['host']}:{config['redis']['port']}/{config['redis']['db']}: OK")

    cipher = URLCipher.from_key_file(config['encryption']['key_path'])
    if cipher.decrypt(cipher.encrypt('https://example.com/')) != 'https://example.com/':
        raise SystemExit('Key file round-trip failed')
    print(f"Key file {config['encryption']['key_path']}: OK")


if __name__ == '__main__':
    main()
