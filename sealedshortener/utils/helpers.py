"""Helper utilities for request handlers.

Functions:
    base_url(event) -> str
        Extract correct public base URL from an API Gateway event
    get_short_url(shortcode, event) -> str
        Get string representation of short URL for a given shortcode
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into HTTP 500 responses

Example:
    Typical usage inside a handler:

        >>> from sealedshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> os.environ['SHORTENER_BASE_URL'] = 'https://sho.rt'
        >>> base_url(event)
        'https://sho.rt'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from typing import Any
from collections.abc import Callable

from sealedshortener.constants import ENV, Defaults, UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL for the current request

    The configured SHORTENER_BASE_URL always wins. Otherwise, works with both
    custom and default AWS API Gateway domains: if a custom domain is used,
    the stage name is omitted, if the default execute-api domain is used, the
    stage name is included.

    Args:
        event (dict): API Gateway event object passed to the handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    configured = os.environ.get(ENV.App.BASE_URL)
    if configured:
        return configured

    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (tests, local server, etc.)
        return Defaults.BASE_URL


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to the handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def guarantee_500_response(handler: Callable[..., dict]) -> Callable[..., dict]:
    """Decorator ensuring a handler always answers, even on unexpected errors

    Any exception escaping the handler is logged with its traceback and turned
    into a generic HTTP 500 response. Internal error details never reach the
    client.

    Args:
        handler (Callable[..., dict]):
            Request handler returning an API Gateway proxy response.

    Returns:
        Callable[..., dict]:
            Wrapped handler.
    """

    @functools.wraps(handler)
    def wrapper(event: dict, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception:
            logger.exception(
                'Unhandled exception in handler. Responding with 500.',
                extra={'handler': handler.__module__, 'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
