"""Load-or-generate management of the persistent encryption key file.

The key file holds a single 256-bit AES key as standard base64 text. It is
created on first run and reloaded on every subsequent run. Deleting or
replacing the file orphans every URL encrypted under the previous key.

Functions:
    load_or_generate_key(key_path) -> bytes
        Return the key stored at key_path, generating and persisting a new one
        if the file doesn't exist yet.

Example:
    >>> from sealedshortener.encryption import load_or_generate_key
    >>> key = load_or_generate_key('encryption.key')
    >>> len(key)
    32
"""

import os
import base64
import binascii
import logging
import tempfile
from pathlib import Path

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealedshortener.constants import Crypto
from sealedshortener.exceptions import KeyStorageError


logger = logging.getLogger(__name__)


def load_or_generate_key(key_path: Path | str) -> bytes:
    """Load the key file, or generate it on first run

    A new key is written and fsynced to a private (0600) temporary file in the
    key's directory, then published with a hard link. Linking is atomic and
    fails if the key file already exists, so key_path is either absent or
    holds a complete key: a failed first write leaves nothing behind, and a
    process losing the race against a concurrent cold start loads the
    winner's key instead of its own.

    Args:
        key_path (Path | str):
            Path of the key file.

    Returns:
        bytes:
            32-byte AES-256 key.

    Raises:
        KeyStorageError:
            If the key file can't be read, decoded or written, or doesn't hold
            exactly 32 bytes.
    """
    key_path = Path(key_path)
    if key_path.exists():
        return _load_key(key_path)

    key = AESGCM.generate_key(bit_length=Crypto.KEY_BYTES * 8)
    try:
        key_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f'.{key_path.name}.', suffix='.tmp', dir=key_path.parent)
    except OSError as e:
        raise KeyStorageError(f'Failed to create key file {key_path}: {e.strerror}') from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, 'w', encoding='ascii') as f:
            f.write(base64.b64encode(key).decode('ascii'))
            f.flush()
            os.fsync(f.fileno())
        os.link(tmp_path, key_path)
    except FileExistsError:
        logger.info('Key file was created concurrently. Loading it instead.', extra={'keyPath': str(key_path)})
        return _load_key(key_path)
    except OSError as e:
        raise KeyStorageError(f'Failed to write key file {key_path}: {e.strerror}') from e
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.warning(
        'Generated a new encryption key. Back it up: losing it makes every stored URL unrecoverable.',
        extra={'keyPath': str(key_path)},
    )
    return key


def _load_key(key_path: Path) -> bytes:
    try:
        encoded = key_path.read_text(encoding='ascii').strip()
    except (OSError, UnicodeDecodeError) as e:
        raise KeyStorageError(f'Failed to read key file {key_path}') from e

    try:
        key = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        raise KeyStorageError(f'Failed to decode key file {key_path} (expected base64 text)') from e

    if len(key) != Crypto.KEY_BYTES:
        raise KeyStorageError(f'Invalid key length in {key_path} (expected {Crypto.KEY_BYTES} bytes, got {len(key)})')

    logger.debug('Loaded encryption key.', extra={'keyPath': str(key_path)})
    return key
