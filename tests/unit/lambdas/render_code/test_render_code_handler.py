"""Unit tests for the render_code AWS Lambda handler.

Test coverage includes:

1. Rendering
   - Ensures existing keys render as cacheable SVG documents (HTTP 200).
   - Ensures renderer settings from configuration are applied.

2. Not found
   - Ensures non-SVG filenames and unknown keys return HTTP 404.

3. Errors
   - Ensures encoding failures and configuration errors return HTTP 500.
"""

import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from kvshortener.types import LambdaEvent, LambdaContext, LambdaConfiguration
from kvshortener.lambdas.render_code import app
from kvshortener.dao.memory import KeyValueStoreMemoryDAO
from kvshortener.exceptions import EncodingFailedError


def render_event(filename: str | None) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/qr/{filename}',
        'httpMethod': 'GET',
        'pathParameters': None if filename is None else {'filename': filename},
        'requestContext': {'resourcePath': '/qr/{filename}', 'httpMethod': 'GET', 'domainName': 'sho.rt', 'stage': 'test'},
    })


class TestRenderCodeHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'render_code'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}, 'settings': {}}

    @pytest.fixture
    def store(self) -> KeyValueStoreMemoryDAO:
        return KeyValueStoreMemoryDAO(data={'abc123': 'https://example.com/blog/chuck-norris-is-awesome'})

    @pytest.fixture(autouse=True)
    def _patch_lambda_dependencies(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        store: KeyValueStoreMemoryDAO,
    ) -> None:
        # Patch Lambda dependencies
        monkeypatch.delenv('APP_NAME', raising=False)
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        self.redis_dao = MagicMock(return_value=store)
        monkeypatch.setattr(app, 'KeyValueStoreRedisDAO', self.redis_dao)

        self.context = context
        self.config = config

    # -------------------------------
    # 1. Rendering
    # -------------------------------

    def test_lambda_handler(self) -> None:
        response = app.lambda_handler(render_event('abc123.svg'), self.context)
        svg = response['body']

        assert response['statusCode'] == 200
        assert response['headers'] == {'Content-Type': 'image/svg+xml', 'Cache-Control': 'public, max-age=31536000'}
        assert response['isBase64Encoded'] is False
        assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg width="370" height="370"')
        # caption is the short url without its scheme
        assert '>sho.rt/abc123</text>' in svg
        assert svg.endswith('</svg>')

    def test_lambda_handler_is_deterministic(self) -> None:
        first = app.lambda_handler(render_event('abc123.svg'), self.context)
        second = app.lambda_handler(render_event('abc123.svg'), self.context)

        assert first['body'] == second['body']

    def test_lambda_handler_with_renderer_settings(self) -> None:
        self.config['settings'] = {'renderer': {'cell_size_px': 4, 'margin_cells': 2}}

        response = app.lambda_handler(render_event('abc123.svg'), self.context)

        assert response['statusCode'] == 200
        assert '<svg width="132" height="132"' in response['body']

    # -------------------------------
    # 2. Not found
    # -------------------------------

    @pytest.mark.parametrize('filename', [None, '', 'abc123', 'abc123.png', '.svg', 'ABC123.svg', 'abc123.svg.svg'])
    def test_lambda_handler_with_invalid_filename(self, filename: str | None) -> None:
        response = app.lambda_handler(render_event(filename), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['errorCode'] == 'NOT_AN_SVG_REQUEST'
        self.redis_dao.assert_not_called()

    def test_lambda_handler_with_invalid_filename_when_running_locally(self, monkeypatch: MonkeyPatch) -> None:
        # local runs re-raise unexpected errors, so a logging failure would surface here
        monkeypatch.setenv('APP_ENV', 'local')

        response = app.lambda_handler(render_event('abc123.png'), self.context)

        assert response['statusCode'] == 404

    def test_lambda_handler_with_unknown_key(self) -> None:
        response = app.lambda_handler(render_event('zzz999.svg'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body == {'message': 'Not Found', 'errorCode': 'SHORT_LINK_NOT_FOUND'}

    # -------------------------------
    # 3. Errors
    # -------------------------------

    def test_lambda_handler_with_encoding_failure(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setattr(app, 'render', MagicMock(side_effect=EncodingFailedError('too long')))

        response = app.lambda_handler(render_event('abc123.svg'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error (error generating QR code)', 'errorCode': 'ENCODING_FAILED'}

    def test_lambda_handler_with_short_url_over_capacity(self) -> None:
        event = render_event('abc123.svg')
        event['requestContext'] = {'domainName': 'x' * 3000 + '.example', 'stage': 'test'}

        response = app.lambda_handler(event, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'ENCODING_FAILED'

    def test_lambda_handler_with_null_settings(self) -> None:
        self.config['settings'] = None

        response = app.lambda_handler(render_event('abc123.svg'), self.context)

        assert response['statusCode'] == 200

    def test_lambda_handler_with_bad_renderer_settings(self) -> None:
        self.config['settings'] = {'renderer': {'error_correction': 'X'}}

        response = app.lambda_handler(render_event('abc123.svg'), self.context)

        assert response['statusCode'] == 500
        self.redis_dao.assert_not_called()
