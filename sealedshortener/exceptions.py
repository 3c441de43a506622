class SealedShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:sealedshortener_error'


class ValidationError(SealedShortenerError):
    """Base exception for rejected client input."""

    error_code = 'input:validation_error'


class InvalidURLError(ValidationError):
    """Raised when a submitted URL is not an absolute, well-formed URL."""

    error_code = 'input:invalid_url'


class InvalidAliasError(ValidationError):
    """Raised when a custom alias has the wrong length or characters."""

    error_code = 'input:invalid_alias'


class AliasAlreadyExistsError(SealedShortenerError):
    """Raised when a custom alias is already bound to a different URL."""

    error_code = 'mapping:alias_already_exists'


class ShortURLNotFoundError(SealedShortenerError):
    """Raised when a short code has no stored mapping."""

    error_code = 'mapping:short_url_not_found'


class ShortcodeGenerationError(SealedShortenerError):
    """Raised when every generated short code collided with an existing one."""

    error_code = 'mapping:shortcode_generation_error'


class EncryptionError(SealedShortenerError):
    """Base exception for all encryption engine errors."""

    error_code = 'crypto:encryption_error'


class KeyStorageError(EncryptionError):
    """Raised when the key file can't be read, decoded, written or has the wrong length."""

    error_code = 'crypto:key_storage_error'


class EncryptionFailedError(EncryptionError):
    """Raised when sealing a plaintext fails."""

    error_code = 'crypto:encryption_failed'


class DecryptionError(EncryptionError):
    """Raised when a ciphertext is truncated, tampered with, sealed under another key or not UTF-8."""

    error_code = 'crypto:decryption_error'


class ConfigurationError(SealedShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
