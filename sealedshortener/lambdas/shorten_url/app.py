import json
import logging
from typing import Any

from sealedshortener.service import get_service
from sealedshortener.dao.exceptions import DataStoreError
from sealedshortener.exceptions import (
    AliasAlreadyExistsError,
    ConfigurationError,
    EncryptionError,
    InvalidAliasError,
    InvalidURLError,
    ShortcodeGenerationError,
)
from sealedshortener.utils import base_url
from sealedshortener.utils.helpers import guarantee_500_response
from sealedshortener.lambdas.responses import response_200, response_400, response_409, response_500
from sealedshortener.lambdas.constants import (
    ALIAS_ALREADY_EXISTS,
    ENCRYPTION_FAILED,
    INVALID_ALIAS,
    INVALID_JSON_BODY,
    INVALID_URL,
    MISSING_URL,
    SERVICE_UNAVAILABLE,
    SHORTEN_FAILED,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This handler follows this procedure to shorten URLs:
    - Step 1: Extract original URL and optional custom alias from request body
    - Step 2: Get the process-wide URL service (loads the encryption key once)
    - Step 3: Map the URL to a short code (alias, existing code or new code)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            short_code: the short code (new or reused)
            original_url: normalized original URL
            short_url: public short URL
        400: Bad client request
            message: invalid JSON, missing `url`, invalid URL or invalid alias
        409: Conflict
            message: custom alias is bound to a different URL
        500: Internal server error
            message: generic, internal details are only logged

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"url": "https://example.com/b", "custom_alias": "my-link"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'http://localhost:3000/my-link'
    """
    # 1- Extract original URL and custom alias from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    url = request_body.get('url')
    custom_alias = request_body.get('custom_alias')
    if not url:
        logger.info("Missing 'url' in JSON body. Responding with 400.", extra={'event': MISSING_URL})
        return response_400(message="missing 'url' in JSON body", error_code=MISSING_URL)

    # 2- Get the URL service
    try:
        service = get_service()
    except (ConfigurationError, EncryptionError, DataStoreError):
        logger.exception('Failed to initialize URL service. Responding with 500.', extra={'event': SERVICE_UNAVAILABLE})
        return response_500(error_code=SERVICE_UNAVAILABLE)

    # 3- Map the URL to a short code
    try:
        short_url = service.shorten(url, custom_alias=custom_alias, base_url=base_url(event))
    except InvalidURLError:
        logger.info('Invalid URL format. Responding with 400.', extra={'event': INVALID_URL})
        return response_400(message='invalid URL format', error_code=INVALID_URL)
    except InvalidAliasError as e:
        logger.info('Invalid custom alias. Responding with 400.', extra={'event': INVALID_ALIAS, 'reason': str(e)})
        return response_400(message=f'invalid alias: {e}', error_code=INVALID_ALIAS)
    except AliasAlreadyExistsError:
        logger.info(
            'Custom alias is bound to a different URL. Responding with 409.',
            extra={'shortcode': custom_alias, 'event': ALIAS_ALREADY_EXISTS},
        )
        return response_409(message=f"alias '{custom_alias}' is already taken", error_code=ALIAS_ALREADY_EXISTS)
    except EncryptionError:
        logger.exception('Encryption error while shortening URL. Responding with 500.', extra={'event': ENCRYPTION_FAILED})
        return response_500(message='failed to secure URL data', error_code=ENCRYPTION_FAILED)
    except (DataStoreError, ShortcodeGenerationError):
        logger.exception('Failed to shorten URL. Responding with 500.', extra={'event': SHORTEN_FAILED})
        return response_500(message='failed to shorten URL', error_code=SHORTEN_FAILED)

    # 4- Return successful response to user
    logger.info('Shortened URL. Responding with 200.', extra={'shortcode': short_url.shortcode, 'event': SHORTEN_SUCCESS})
    return response_200(
        {
            'message': f'Successfully shortened {short_url.target} to {short_url.short_url}',
            'short_code': short_url.shortcode,
            'original_url': short_url.target,
            'short_url': short_url.short_url,
        }
    )
