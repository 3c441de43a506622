from collections.abc import Iterator

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealedshortener.dao.base import KeyValueBaseDAO
from sealedshortener.dao.exceptions import KeyAlreadyExistsError
from sealedshortener.encryption import URLCipher
from sealedshortener.service import ShortURLService


class InMemoryKeyValueDAO(KeyValueBaseDAO):
    """Dict-backed KeyValueBaseDAO which counts mutations."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes = 0

    def put(self, key: str, value: str, **kwargs) -> 'InMemoryKeyValueDAO':
        self.data[key] = value
        self.writes += 1
        return self

    def insert(self, key: str, value: str, **kwargs) -> 'InMemoryKeyValueDAO':
        if key in self.data:
            raise KeyAlreadyExistsError(f"Key '{key}' already exists.")
        return self.put(key, value)

    def get(self, key: str, **kwargs) -> str | None:
        return self.data.get(key)

    def scan(self, prefix: str = '', **kwargs) -> Iterator[tuple[str, str]]:
        for key, value in list(self.data.items()):
            if key.startswith(prefix):
                yield key, value


@pytest.fixture
def base_url() -> str:
    return 'https://sho.rt'


@pytest.fixture
def key() -> bytes:
    return AESGCM.generate_key(bit_length=256)


@pytest.fixture
def cipher(key) -> URLCipher:
    return URLCipher(key)


@pytest.fixture
def kv_store() -> InMemoryKeyValueDAO:
    return InMemoryKeyValueDAO()


@pytest.fixture
def service(kv_store, cipher, base_url) -> ShortURLService:
    return ShortURLService(dao=kv_store, cipher=cipher, base_url=base_url)
