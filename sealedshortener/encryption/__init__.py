from sealedshortener.encryption.cipher import URLCipher
from sealedshortener.encryption.key_file import load_or_generate_key


__all__ = [
    'URLCipher',
    'load_or_generate_key',
]
