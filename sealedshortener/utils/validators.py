"""Validation of client input for the URL mapping service.

Functions:
    normalize_url(url: str) -> str
        Validate an absolute URL and return its canonical serialization.
    validate_alias(alias: str) -> str
        Validate the shape of a custom alias.

Example:
    >>> from sealedshortener.utils.validators import normalize_url, validate_alias
    >>> normalize_url('HTTPS://Example.com')
    'https://example.com/'
    >>> validate_alias('my-link')
    'my-link'
"""

import re

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sealedshortener.constants import Shortcode
from sealedshortener.exceptions import InvalidAliasError, InvalidURLError


_URL_ADAPTER = TypeAdapter(AnyUrl)
_ALIAS_CHARS = re.compile(r'[A-Za-z0-9_-]+')


def normalize_url(url: str) -> str:
    """Validate an absolute URL and return its canonical form

    Parsing follows the WHATWG URL standard (pydantic delegates to the Rust
    `url` crate): scheme and host are lowercased, default ports dropped,
    special-scheme URLs get at least a '/' path and unsafe characters are
    percent-encoded. The canonical form is what gets compared and stored.

    Args:
        url (str): URL submitted by the client.

    Returns:
        str: Canonical serialization of the URL.

    Raises:
        InvalidURLError: If url isn't a string or isn't an absolute, well-formed URL.
    """
    if not isinstance(url, str):
        raise InvalidURLError(f'URL must be a string (given type: {type(url).__name__}).')

    try:
        return str(_URL_ADAPTER.validate_python(url))
    except PydanticValidationError as e:
        raise InvalidURLError(f'Invalid URL format: {url}') from e


def validate_alias(alias: str) -> str:
    """Validate the shape of a custom alias

    Args:
        alias (str): Alias requested by the client.

    Returns:
        str: The alias, unchanged.

    Raises:
        InvalidAliasError: If the alias is too short, too long, or contains
            characters other than ASCII letters, digits, '-' and '_'.
    """
    if not isinstance(alias, str):
        raise InvalidAliasError(f'Alias must be a string (given type: {type(alias).__name__}).')
    if len(alias) < Shortcode.ALIAS_MIN_LENGTH:
        raise InvalidAliasError(f'Alias must be at least {Shortcode.ALIAS_MIN_LENGTH} characters long')
    if len(alias) > Shortcode.ALIAS_MAX_LENGTH:
        raise InvalidAliasError(f'Alias must not exceed {Shortcode.ALIAS_MAX_LENGTH} characters')
    if not _ALIAS_CHARS.fullmatch(alias):
        raise InvalidAliasError('Alias can only contain alphanumeric characters, hyphens, and underscores')
    return alias
