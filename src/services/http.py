"""
HTTP helpers for Lambda proxy integrations.

Converts Function URL / API Gateway events (payload format 1.0 and 2.0)
into HttpRequest objects and builds proxy responses.
"""

import base64
import binascii
import json
import logging
from typing import Dict, Any

from domain.models import HttpRequest

logger = logging.getLogger(__name__)

JSON_HEADERS = {'Content-Type': 'application/json'}


def parse_lambda_event(event: Dict[str, Any]) -> HttpRequest:
    """
    Extract method, path, headers and body from a Lambda proxy event.

    Args:
        event: Function URL or API Gateway proxy event

    Returns:
        HttpRequest: Normalized request (method uppercased, header names lowercased)

    Example:
        >>> request = parse_lambda_event({
        ...     "rawPath": "/send",
        ...     "requestContext": {"http": {"method": "POST"}},
        ...     "headers": {"authorization": "Bearer secret"},
        ...     "body": "{}"
        ... })
        >>> request.method, request.path
        ('POST', '/send')
    """
    request_context = event.get('requestContext') or {}
    http_context = request_context.get('http') or {}

    # Payload format 2.0 first, then 1.0
    method = http_context.get('method') or event.get('httpMethod') or ''
    path = event.get('rawPath') or http_context.get('path') or event.get('path') or ''

    # HTTP APIs on a named stage include it in rawPath (/prod/send)
    stage = request_context.get('stage')
    if http_context and stage and stage != '$default':
        prefix = f"/{stage}"
        if path == prefix or path.startswith(prefix + '/'):
            path = path[len(prefix):] or '/'

    headers = {
        str(name).lower(): str(value)
        for name, value in (event.get('headers') or {}).items()
        if value is not None
    }

    body = event.get('body') or ''
    if body and event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            # Leave the raw body in place; JSON parsing will report it
            logger.warning(f"Failed to decode base64 body: {e}")

    return HttpRequest(
        method=method.upper(),
        path=path,
        headers=headers,
        body=body,
    )


def json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a Lambda proxy response with a JSON body.

    Args:
        status_code: HTTP status code
        payload: JSON-serializable response body

    Returns:
        Dict with statusCode, headers and body
    """
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(payload),
    }
