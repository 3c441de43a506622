from __future__ import annotations

import os
from pathlib import Path

from beartype import beartype
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealedshortener.constants import Crypto
from sealedshortener.encryption.key_file import load_or_generate_key
from sealedshortener.exceptions import DecryptionError, EncryptionFailedError, KeyStorageError


class URLCipher:
    """AES-256-GCM encryption of URLs under a single persistent key.

    The cipher is immutable once constructed and safe to share between
    concurrent requests. Every call to encrypt() draws a fresh random 96-bit
    nonce, which is prepended to the sealed output:

        nonce (12 bytes) || ciphertext || tag (16 bytes)

    No associated data is authenticated.
    """

    def __init__(self, key: bytes):
        """Initialize the cipher with a raw key.

        Args:
            key: 32-byte AES-256 key

        Raises:
            KeyStorageError: If the key isn't exactly 32 bytes long
        """
        if len(key) != Crypto.KEY_BYTES:
            raise KeyStorageError(f'Invalid key length (expected {Crypto.KEY_BYTES} bytes, got {len(key)})')
        self._cipher = AESGCM(key)

    @classmethod
    def from_key_file(cls, key_path: Path | str) -> URLCipher:
        """Build a cipher from the key file, generating the file on first run.

        Args:
            key_path: Path to the key file

        Returns:
            Cipher bound to the persisted key

        Raises:
            KeyStorageError: If the key file is unusable
        """
        return cls(load_or_generate_key(key_path))

    @beartype
    def encrypt(self, plaintext: str) -> bytes:
        """Encrypt plaintext using AES-GCM.

        Args:
            plaintext: Text to encrypt

        Returns:
            Encrypted data (nonce + ciphertext + tag)

        Raises:
            EncryptionFailedError: If the plaintext can't be encoded or sealed
        """
        nonce = os.urandom(Crypto.NONCE_BYTES)
        try:
            sealed = self._cipher.encrypt(nonce, plaintext.encode('utf-8'), None)
        except (UnicodeEncodeError, OverflowError) as e:
            raise EncryptionFailedError('Failed to encrypt data') from e
        return nonce + sealed

    @beartype
    def decrypt(self, blob: bytes) -> str:
        """Decrypt data produced by encrypt().

        Args:
            blob: Encrypted data (nonce + ciphertext + tag)

        Returns:
            Decrypted plaintext

        Raises:
            DecryptionError: If the data is truncated, fails authentication
                (tampered with or sealed under another key), or isn't UTF-8
        """
        if len(blob) < Crypto.NONCE_BYTES:
            raise DecryptionError('Invalid encrypted data (shorter than the nonce)')

        nonce, sealed = blob[: Crypto.NONCE_BYTES], blob[Crypto.NONCE_BYTES :]
        try:
            plaintext = self._cipher.decrypt(nonce, sealed, None)
        except InvalidTag as e:
            raise DecryptionError('Failed to decrypt data (authentication failed)') from e

        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecryptionError('Invalid UTF-8 in decrypted data') from e
