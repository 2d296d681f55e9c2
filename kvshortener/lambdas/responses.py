"""API Gateway proxy response builders shared by the Lambda handlers"""

import json

from kvshortener.types import LambdaResponse


JSON_HEADERS = {'Content-Type': 'application/json'}


def _error_body(base: str, message: str | None, error_code: str | None) -> str:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json.dumps(body)


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {
        'statusCode': 400,
        'headers': dict(JSON_HEADERS),
        'body': _error_body('Bad Request', message, error_code),
    }


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {
        'statusCode': 404,
        'headers': dict(JSON_HEADERS),
        'body': _error_body('Not Found', message, error_code),
    }


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {
        'statusCode': 409,
        'headers': dict(JSON_HEADERS),
        'body': _error_body('Conflict', message, error_code),
    }


def response_429(*, retry_after: int, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    body = {'message': message or 'Too Many Requests'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 429,
        'headers': {
            **JSON_HEADERS,
            'Retry-After': str(retry_after),
        },
        'body': json.dumps(body),
    }


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {
        'statusCode': 500,
        'headers': dict(JSON_HEADERS),
        'body': _error_body('Internal Server Error', message, error_code),
    }


def response_svg(svg: str, *, max_age: int) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'image/svg+xml',
            'Cache-Control': f'public, max-age={max_age}',
        },
        'isBase64Encoded': False,
        'body': svg,
    }
