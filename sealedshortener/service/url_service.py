"""URL mapping service: the business rules of the shortener.

This module decides how a shortening request resolves to a short code and how
a short code resolves back to its URL. Stored URLs are always encrypted; the
store only ever sees `base64(nonce || ciphertext || tag)`.

Shortening follows this order (it encodes the conflict-resolution policy):
    1. Validate and normalize the URL.
    2. Custom alias given: validate its shape, then
         - alias free                   -> mint it (step 4)
         - alias bound to the same URL  -> return it, no write
         - alias bound to another URL   -> AliasAlreadyExistsError
    3. No alias: scan every stored mapping, decrypt, compare. A match is
       returned as-is (dedup), no write.
    4. Mint: encrypt the URL and insert it create-only under the alias or a
       freshly generated code.

Concurrency:
    The service holds no lock and the dedup scan is not isolated from
    concurrent writes. Two requests shortening the same new URL at the same
    time can both miss each other in step 3 and mint two different codes for
    one URL. Codes themselves stay unique, because every mint is a create-only
    insert (SET NX) into the store.

Classes:
    ShortURLService:
        Shorten and resolve URLs on top of a KeyValueBaseDAO and a URLCipher.

Example:
    >>> service = ShortURLService(dao=dao, cipher=cipher, base_url='https://sho.rt')
    >>> service.shorten('https://example.com/b', custom_alias='my-link')
    ShortURLModel(shortcode='my-link', target='https://example.com/b', short_url='https://sho.rt/my-link')
    >>> service.resolve('my-link')
    'https://example.com/b'
"""

import base64
import binascii
import logging
from collections.abc import Callable

from sealedshortener.constants import Shortcode, Defaults
from sealedshortener.dao.base import KeyValueBaseDAO
from sealedshortener.dao.exceptions import DataStoreError, KeyAlreadyExistsError
from sealedshortener.encryption import URLCipher
from sealedshortener.exceptions import (
    AliasAlreadyExistsError,
    EncryptionError,
    ShortcodeGenerationError,
    ShortURLNotFoundError,
)
from sealedshortener.models import ShortURLModel
from sealedshortener.utils.shortener import generate_shortcode
from sealedshortener.utils.validators import normalize_url, validate_alias


logger = logging.getLogger(__name__)


class ShortURLService:
    """Shorten URLs into codes and resolve codes back into URLs.

    Attributes:
        dao (KeyValueBaseDAO):
            Store of short code -> encrypted URL mappings.
        cipher (URLCipher):
            Encryption engine bound to the persistent key.
        base_url (str):
            Public base URL short URLs are built from.
        max_attempts (int):
            Generated codes tried before giving up on collisions.
    """

    def __init__(
        self,
        dao: KeyValueBaseDAO,
        cipher: URLCipher,
        base_url: str = Defaults.BASE_URL,
        shortcode_factory: Callable[[], str] = generate_shortcode,
        max_attempts: int = Shortcode.MAX_ATTEMPTS,
    ):
        self.dao = dao
        self.cipher = cipher
        self.base_url = base_url
        self.max_attempts = max_attempts
        self._shortcode_factory = shortcode_factory

    def shorten(self, url: str, custom_alias: str | None = None, base_url: str | None = None) -> ShortURLModel:
        """Map a URL to a short code

        Args:
            url (str):
                URL to shorten. Must be absolute.
            custom_alias (str | None):
                Caller-chosen short code. Optional.
            base_url (str | None):
                Public base URL for this request. Defaults to the service's.

        Returns:
            ShortURLModel:
                The new or the existing mapping.

        Raises:
            InvalidURLError:
                If the URL isn't an absolute, well-formed URL.
            InvalidAliasError:
                If the alias has the wrong length or characters.
            AliasAlreadyExistsError:
                If the alias is bound to a different URL.
            ShortcodeGenerationError:
                If every generated code collided with an existing one.
            DataStoreError:
                If the store fails or holds a corrupted value under the alias.
            EncryptionError:
                If the URL can't be encrypted, or the alias' value can't be decrypted.
        """
        target = normalize_url(url)
        base_url = base_url or self.base_url

        if custom_alias is not None:
            alias = validate_alias(custom_alias)
            existing = self._lookup_alias(alias, target)
            if existing is not None:
                return self._model(existing, target, base_url)
            return self._mint_alias(alias, target, base_url)

        existing = self._find_existing(target)
        if existing is not None:
            logger.debug('URL already exists. Reusing its short code.', extra={'shortcode': existing})
            return self._model(existing, target, base_url)

        return self._mint_generated(target, base_url)

    def resolve(self, shortcode: str) -> str:
        """Return the URL a short code points to

        Args:
            shortcode (str):
                Short code to resolve.

        Returns:
            str:
                The normalized original URL.

        Raises:
            ShortURLNotFoundError:
                If no mapping exists for shortcode.
            DataStoreError:
                If the store fails or the stored value isn't valid base64.
            DecryptionError:
                If the stored value fails authentication or isn't UTF-8.
        """
        value = self.dao.get(shortcode)
        if value is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self._unseal(shortcode, value)

    def _lookup_alias(self, alias: str, target: str) -> str | None:
        """Return alias if it's already bound to target, None if it's free."""
        value = self.dao.get(alias)
        if value is None:
            return None

        if self._unseal(alias, value) != target:
            raise AliasAlreadyExistsError(f"Alias '{alias}' is already taken.")

        logger.debug('URL already exists with requested alias.', extra={'shortcode': alias})
        return alias

    def _find_existing(self, target: str) -> str | None:
        """Return the short code of an existing mapping for target, if any.

        O(number of stored mappings): every value is decrypted and compared.
        """
        for shortcode, value in self.dao.scan(''):
            try:
                if self._unseal(shortcode, value) == target:
                    return shortcode
            except (DataStoreError, EncryptionError):
                logger.warning(
                    'Skipping unreadable mapping while searching for duplicates.',
                    exc_info=True,
                    extra={'shortcode': shortcode},
                )
        return None

    def _mint_alias(self, alias: str, target: str, base_url: str) -> ShortURLModel:
        sealed = self._seal(target)
        try:
            self.dao.insert(alias, sealed)
        except KeyAlreadyExistsError:
            # A concurrent request claimed the alias between lookup and insert.
            # Mappings are never deleted, so the alias is bound now: either to
            # target (idempotent success) or to another URL (conflict).
            self._lookup_alias(alias, target)
            return self._model(alias, target, base_url)

        logger.info('Minted new short URL with custom alias.', extra={'shortcode': alias})
        return self._model(alias, target, base_url)

    def _mint_generated(self, target: str, base_url: str) -> ShortURLModel:
        sealed = self._seal(target)
        for attempt in range(1, self.max_attempts + 1):
            shortcode = self._shortcode_factory()
            try:
                self.dao.insert(shortcode, sealed)
            except KeyAlreadyExistsError:
                logger.warning(
                    'Generated short code collided with an existing one. Retrying.',
                    extra={'shortcode': shortcode, 'attempt': attempt},
                )
                continue

            logger.info('Minted new short URL.', extra={'shortcode': shortcode})
            return self._model(shortcode, target, base_url)

        raise ShortcodeGenerationError(f'Failed to generate a free short code after {self.max_attempts} attempts.')

    def _seal(self, url: str) -> str:
        return base64.b64encode(self.cipher.encrypt(url)).decode('ascii')

    def _unseal(self, shortcode: str, value: str) -> str:
        try:
            blob = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DataStoreError(f"Stored value for '{shortcode}' is not valid base64.") from e
        return self.cipher.decrypt(blob)

    @staticmethod
    def _model(shortcode: str, target: str, base_url: str) -> ShortURLModel:
        return ShortURLModel(
            shortcode=shortcode,
            target=target,
            short_url=f'{base_url.rstrip("/")}/{shortcode}',
        )
