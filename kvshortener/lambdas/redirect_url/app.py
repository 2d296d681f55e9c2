import asyncio
import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.exceptions import ConfigurationError
from kvshortener.dao.redis import KeyValueStoreRedisDAO
from kvshortener.dao.exceptions import ShortLinkNotFoundError
from kvshortener.services import KeyAllocator, is_valid_key
from kvshortener.utils import load_config, app_prefix, guarantee_500_response
from kvshortener.lambdas.responses import response_302, response_400, response_404, response_500
from kvshortener.lambdas.redirect_url.constants import (
    MISSING_KEY,
    INVALID_KEY,
    SHORT_LINK_NOT_FOUND,
    BAD_CONFIGURATION,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    Redirects are public and intentionally not rate limited.

    HTTP responses:
        302: Redirect
            headers:
                Location: target URL, or '/' when the key is unknown
        400: Bad client request
            message: missing key in path parameters
        404: Not found
            message: key contains characters outside [0-9a-z-]
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'key': '3f9a1c'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except ConfigurationError:
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.', extra={'event': BAD_CONFIGURATION})
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for short links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract key from request's path
    key = (event.get('pathParameters') or {}).get('key')
    if key is None:
        logger.info('Missing "key" in path. Responding with 400.', extra={'event': MISSING_KEY})
        return response_400(message="missing 'key' in path", error_code=MISSING_KEY)
    if not is_valid_key(key):
        # Keys outside [0-9a-z-] can't name a short link
        logger.info('Malformed "key" in path. Responding with 404.', extra={'key': key, 'event': INVALID_KEY})
        return response_404(message=f"invalid key '{key}'", error_code=INVALID_KEY)

    store = KeyValueStoreRedisDAO(**redis_config)
    return asyncio.run(_redirect(key, store))


async def _redirect(key: str, store: KeyValueStoreRedisDAO) -> LambdaResponse:
    try:
        # 2- Look up the target URL
        try:
            link = await KeyAllocator(store, prefix=app_prefix()).resolve(key)
        except ShortLinkNotFoundError:
            logger.info('Short link not found. Redirecting to home page.', extra={'key': key, 'event': SHORT_LINK_NOT_FOUND})
            return response_302(location='/')

        # 3- Redirect client to target URL
        logger.info('Redirecting client to target URL. Responding with 302.', extra={'key': key, 'event': REDIRECT_SUCCESS})
        return response_302(location=link.target)
    finally:
        await store.close()
