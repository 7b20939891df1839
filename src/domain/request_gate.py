"""
Request gate - method, path and bearer-token checks.

Runs before any body processing and performs no I/O. A rejection is an
expected outcome and is returned as a GateRejection, not raised.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from .models import HttpRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateRejection:
    """Terminal response for a request that did not pass the gate."""
    status_code: int
    error: str
    message: str

    def to_payload(self) -> dict:
        return {'error': self.error, 'message': self.message}


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an "Authorization: Bearer <token>" header value.

    Returns:
        The token, or None if the header is absent or not a bearer credential
    """
    if not authorization:
        return None

    parts = authorization.strip().split(' ', 1)
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None

    token = parts[1].strip()
    return token or None


def check_request(request: HttpRequest, path: str, api_key: str) -> Optional[GateRejection]:
    """
    Check method, path and credentials, in that order.

    Args:
        request: Inbound request
        path: Configured path
        api_key: Expected bearer token

    Returns:
        None if the request is admitted, otherwise the GateRejection to return
    """
    if request.method != 'POST' or request.path != path:
        logger.info(f"Rejected {request.method} {request.path}: expected POST {path}")
        return GateRejection(
            status_code=400,
            error='Invalid request',
            message=f"Please send a POST request to {path}",
        )

    token = extract_bearer_token(request.header('Authorization'))
    if token is None or not hmac.compare_digest(token.encode('utf-8'), api_key.encode('utf-8')):
        logger.warning("Rejected request: invalid or missing API key")
        return GateRejection(
            status_code=401,
            error='Unauthorized',
            message='Invalid or missing API Key',
        )

    return None
