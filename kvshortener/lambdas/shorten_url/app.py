import json
import asyncio
import logging
from urllib.parse import urlparse

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.settings import AllocatorSettings, RateLimiterSettings
from kvshortener.exceptions import ConfigurationError, AllocationExhaustedError, InvalidCustomPathError, PathInUseError
from kvshortener.dao.redis import KeyValueStoreRedisDAO
from kvshortener.services import KeyAllocator, RateLimiter, client_identity
from kvshortener.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from kvshortener.lambdas.responses import response_200, response_400, response_409, response_429, response_500
from kvshortener.lambdas.shorten_url.constants import (
    RATE_LIMITED,
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    INVALID_TARGET_URL,
    INVALID_CUSTOM_PATH,
    CUSTOM_PATH_IN_USE,
    ALLOCATION_EXHAUSTED,
    BAD_CONFIGURATION,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


def _is_http_url(value: str) -> bool:
    components = urlparse(value)
    return components.scheme in {'http', 'https'} and bool(components.netloc)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Check the client's request rate
    - Step 2: Extract target URL and optional custom path from request body
    - Step 3: Claim the custom path, or allocate a random short key
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            target_url: original url (provided in request)
            short_url: newly generated short url
            key: short key
            code_image_url: URL of the QR code image for the short url
        400: Bad client request
            message: invalid JSON, missing/invalid target_url or invalid custom_path
        409: Conflict
            message: custom path already in use
        429: Too many requests
            message: rate limit exceeded (Retry-After header set)
        500: Internal server error
            message: configuration error or key space retry budget exhausted

    Args:
        event (dict):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'http://localhost:3000/3f9a1c'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
        settings = app_config.get('settings') or {}
        limiter_settings = RateLimiterSettings.from_mapping(settings.get('rate_limiter'))
        allocator_settings = AllocatorSettings.from_mapping(settings.get('allocator'))
    except ConfigurationError:
        logger.exception('Failed to load configuration for shorten URL function. Responding with 500.', extra={'event': BAD_CONFIGURATION})
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for short links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    store = KeyValueStoreRedisDAO(**redis_config)
    return asyncio.run(_shorten(event, store, limiter_settings, allocator_settings))


async def _shorten(
    event: LambdaEvent,
    store: KeyValueStoreRedisDAO,
    limiter_settings: RateLimiterSettings,
    allocator_settings: AllocatorSettings,
) -> LambdaResponse:
    try:
        # 1- Check the client's request rate
        identity = client_identity(event.get('headers'), limiter_settings)
        decision = await RateLimiter(store, limiter_settings, prefix=app_prefix()).admit(identity)
        if not decision.allowed:
            logger.info('Rate limit exceeded. Responding with 429.', extra={'identity': identity, 'event': RATE_LIMITED})
            return response_429(
                retry_after=decision.retry_after_seconds,
                error_code=RATE_LIMITED,
                message='Too many requests. Please try again later.',
            )

        # 2- Extract target URL and optional custom path from request body
        try:
            request_body = json.loads(event.get('body') or '{}')
        except json.JSONDecodeError:
            logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
            return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
        if not isinstance(request_body, dict):
            return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

        target_url = request_body.get('target_url')
        if not target_url:
            logger.info('Missing "target_url" in body. Responding with 400.', extra={'event': MISSING_TARGET_URL})
            return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)
        if not isinstance(target_url, str) or not _is_http_url(target_url):
            logger.info('Invalid "target_url" in body. Responding with 400.', extra={'event': INVALID_TARGET_URL})
            return response_400(message="'target_url' must be an http(s) URL", error_code=INVALID_TARGET_URL)

        custom_path = request_body.get('custom_path')
        if custom_path is not None and not isinstance(custom_path, str):
            return response_400(message="'custom_path' must be a string", error_code=INVALID_CUSTOM_PATH)

        # 3- Claim the custom path, or allocate a random short key
        allocator = KeyAllocator(store, allocator_settings, prefix=app_prefix())
        try:
            if custom_path and custom_path.strip():
                key = await allocator.claim(custom_path, target_url)
            else:
                key = await allocator.allocate(target_url)
        except InvalidCustomPathError as e:
            logger.info('Invalid custom path. Responding with 400.', extra={'customPath': custom_path, 'event': INVALID_CUSTOM_PATH})
            return response_400(message=str(e), error_code=INVALID_CUSTOM_PATH)
        except PathInUseError as e:
            logger.info('Custom path already in use. Responding with 409.', extra={'customPath': custom_path, 'event': CUSTOM_PATH_IN_USE})
            return response_409(message=str(e), error_code=CUSTOM_PATH_IN_USE)
        except AllocationExhaustedError:
            logger.exception('Short key allocation exhausted. Responding with 500.', extra={'event': ALLOCATION_EXHAUSTED})
            return response_500(error_code=ALLOCATION_EXHAUSTED)

        # 4- Respond to user with 200 success
        short_url = get_short_url(key, event)
        logger.info('Shortened URL. Responding with 200.', extra={'key': key, 'event': SHORTEN_SUCCESS})
        return response_200(
            {
                'message': f'Successfully shortened {target_url} to {short_url}',
                'target_url': target_url,
                'short_url': short_url,
                'key': key,
                'code_image_url': get_short_url(f'qr/{key}.svg', event),
            }
        )
    finally:
        await store.close()
