"""
AWS Lambda handler for the notification mailer endpoint.

Thin orchestration layer that delegates to NotificationMailer.
Policy: one send attempt per admitted request (no retries). Errors logged to CloudWatch.
"""

import logging
import os
from typing import Dict, Any

from config import load_config
from domain.notification_mailer import NotificationMailer
from services import http as http_service

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Load configuration and initialize mailer once at module level (reused across invocations)
mailer_config = load_config()
notification_mailer = NotificationMailer(mailer_config)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle a Function URL / API Gateway request.

    Expected request:
        POST <PATH_NAME>
        Authorization: Bearer <API_KEY>
        {
            "recipient": "recipient@example.com",
            "subject": "Your Email Subject",
            "data": {"key1": "value1", "key2": "value2"}
        }

    Args:
        event: Lambda proxy event
        context: Lambda context

    Returns:
        Dict with statusCode, headers and JSON body
    """
    request = http_service.parse_lambda_event(event)
    logger.info(f"Received {request.method} {request.path}")

    response = notification_mailer.handle(request)

    logger.info(f"Responded {response['statusCode']} to {request.method} {request.path}")
    return response


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return http_service.json_response(200, {
        'status': 'healthy',
        'environment': mailer_config.environment,
        'path': mailer_config.path,
        'senderConfigured': bool(mailer_config.sender.email)
    })
