import logging
from typing import Any

from sealedshortener.service import get_service
from sealedshortener.dao.exceptions import DataStoreError
from sealedshortener.exceptions import ConfigurationError, DecryptionError, EncryptionError, ShortURLNotFoundError
from sealedshortener.utils import get_short_url
from sealedshortener.utils.helpers import guarantee_500_response
from sealedshortener.lambdas.responses import response_302, response_400, response_404, response_500
from sealedshortener.lambdas.constants import (
    DECRYPTION_FAILED,
    MISSING_SHORTCODE,
    REDIRECT_FAILED,
    REDIRECT_SUCCESS,
    SERVICE_UNAVAILABLE,
    SHORT_URL_NOT_FOUND,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect URLs

    This handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Get the process-wide URL service (loads the encryption key once)
    - Step 3: Resolve the shortcode into its decrypted target URL
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: shortcode has no mapping
        500: Internal server error
            message: generic, internal details are only logged

    Args:
        event (dict):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'my-link'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/b'
    """
    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Get the URL service
    try:
        service = get_service()
    except (ConfigurationError, EncryptionError, DataStoreError):
        logger.exception('Failed to initialize URL service. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return response_500(error_code=SERVICE_UNAVAILABLE)

    # 3- Resolve shortcode into target URL
    try:
        target_url = service.resolve(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except DecryptionError:
        logger.exception(
            'Encryption error while retrieving URL. Responding with 500.',
            extra={'shortcode': shortcode, 'event': DECRYPTION_FAILED},
        )
        return response_500(message='failed to process URL data', error_code=DECRYPTION_FAILED)
    except DataStoreError:
        logger.exception(
            'Failed to retrieve URL. Responding with 500.',
            extra={'shortcode': shortcode, 'event': REDIRECT_FAILED},
        )
        return response_500(message='failed to retrieve URL', error_code=REDIRECT_FAILED)

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
