"""Shortcode generation utility

This module provides a helper function for generating short, random,
URL-safe codes for newly shortened URLs.

Functions:
    generate_shortcode(length=6, alphabet=Shortcode.ALPHABET):
        Generate a random short code suitable for use as a URL slug.

Example:
    >>> from sealedshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'V1StGX'
"""

import secrets

from sealedshortener.constants import Shortcode


def generate_shortcode(length: int = Shortcode.LENGTH, alphabet: str = Shortcode.ALPHABET) -> str:
    """Generate a random URL-safe short code.

    Every character is drawn independently from alphabet using the operating
    system's CSPRNG, so codes are not predictable from previously issued ones.

    Args:
        length (int, optional):
            Length of the resulting code. Defaults to 6.

        alphabet (str, optional):
            Characters to draw from. Defaults to the 64-symbol URL-safe
            alphabet [A-Za-z0-9_-].

    Returns:
        str: A random code of exactly `length` characters.

    NOTE:
        - Codes are not checked for uniqueness here. The caller inserts them
          create-only and draws again on collision.
        - With 64^6 (~6.9e10) codes, a collision becomes likely only after
          roughly 260k stored mappings (birthday bound).
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if not alphabet:
        raise ValueError(f'Alphabet must be a non-empty string (given value: {alphabet!r}).')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
