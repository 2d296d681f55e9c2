import asyncio
import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.constants import TTL
from kvshortener.settings import RendererSettings
from kvshortener.exceptions import ConfigurationError, EncodingFailedError
from kvshortener.dao.redis import KeyValueStoreRedisDAO
from kvshortener.dao.exceptions import ShortLinkNotFoundError
from kvshortener.services import KeyAllocator, is_valid_key, caption_for, render
from kvshortener.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from kvshortener.lambdas.responses import response_404, response_500, response_svg
from kvshortener.lambdas.render_code.constants import (
    NOT_AN_SVG_REQUEST,
    SHORT_LINK_NOT_FOUND,
    ENCODING_FAILED,
    BAD_CONFIGURATION,
    RENDER_SUCCESS,
)


logger = logging.getLogger(__name__)

SVG_SUFFIX = '.svg'


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for QR code images of short URLs

    The image embeds the full short URL and shows it, without scheme, as a
    caption in the middle. Images never change once a key is assigned, so
    they are served with a one year cache lifetime.

    HTTP responses:
        200: SVG document (Content-Type: image/svg+xml)
        404: Not found
            message: filename isn't `<key>.svg` or key doesn't exist
        500: Internal server error
            message: short URL can't be encoded as a QR code

    Example:
        >>> event = {'pathParameters': {'filename': '3f9a1c.svg'}}
        >>> response = lambda_handler(event, None)
        >>> response['headers']['Content-Type']
        'image/svg+xml'
    """
    # 0- Get application's config
    try:
        app_config = load_config('render_code')
        renderer_settings = RendererSettings.from_mapping((app_config.get('settings') or {}).get('renderer'))
    except ConfigurationError:
        logger.exception('Failed to load configuration for render code function. Responding with 500.', extra={'event': BAD_CONFIGURATION})
        return response_500()
    else:
        logger.debug('Assuming Redis as the backend database for short links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract key from requested filename
    filename = (event.get('pathParameters') or {}).get('filename') or ''
    key = filename.removesuffix(SVG_SUFFIX)
    if not filename.endswith(SVG_SUFFIX) or not is_valid_key(key):
        logger.info(
            'Requested file is not a short link SVG. Responding with 404.',
            extra={'requestedFile': filename, 'event': NOT_AN_SVG_REQUEST},
        )
        return response_404(error_code=NOT_AN_SVG_REQUEST)

    store = KeyValueStoreRedisDAO(**redis_config)
    return asyncio.run(_render(key, event, store, renderer_settings))


async def _render(key: str, event: LambdaEvent, store: KeyValueStoreRedisDAO, settings: RendererSettings) -> LambdaResponse:
    try:
        # 2- Make sure the short link exists
        try:
            await KeyAllocator(store, prefix=app_prefix()).resolve(key)
        except ShortLinkNotFoundError:
            logger.info('Short link not found. Responding with 404.', extra={'key': key, 'event': SHORT_LINK_NOT_FOUND})
            return response_404(error_code=SHORT_LINK_NOT_FOUND)
    finally:
        await store.close()

    # 3- Render the QR code image of the short URL
    short_url = get_short_url(key, event)
    try:
        image = render(short_url, caption_for(short_url), settings)
    except EncodingFailedError:
        logger.exception('Failed to encode short URL as QR code. Responding with 500.', extra={'key': key, 'event': ENCODING_FAILED})
        return response_500(message='error generating QR code', error_code=ENCODING_FAILED)

    logger.info('Rendered QR code image. Responding with 200.', extra={'key': key, 'event': RENDER_SUCCESS})
    return response_svg(image.to_svg(), max_age=TTL.ONE_YEAR)
