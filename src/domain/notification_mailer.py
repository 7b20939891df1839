"""
Notification mailing pipeline - core business logic.

This module handles one HTTP request end to end:
1. Gate the request (method, path, bearer token)
2. Parse the JSON body into an EmailRequest
3. Build the MIME message
4. Hand the raw message to the delivery transport
5. Return the HTTP response (success or failure)

Gate rejections become 400/401 responses. Every other error is caught here,
logged, and returned as a 500 response. No exceptions propagate out of
handle() and failed sends are never retried.
"""

import logging
import time
from typing import Callable, Dict, Any, Optional

from config import MailerConfig
from .models import HttpRequest
from .message_builder import parse_email_request, build_message
from .request_gate import check_request
from services import http as http_service
from services import ses as ses_service

logger = logging.getLogger(__name__)

SendFunction = Callable[[str, str, bytes], Any]


class NotificationMailer:
    """
    Stateless handler for notification email requests.

    Constructed once per process from the static configuration; handle()
    may be called for any number of requests.
    """

    def __init__(self, config: MailerConfig, send: Optional[SendFunction] = None):
        """
        Initialize notification mailer.

        Args:
            config: MailerConfig with path, sender identity and API key
            send: Delivery callable (source, destination, raw_message).
                  Defaults to SES SendRawEmail.
        """
        self.config = config
        self._send = send

    def handle(self, request: HttpRequest) -> Dict[str, Any]:
        """
        Handle a single request.

        Args:
            request: Parsed HTTP request

        Returns:
            Lambda proxy response dict
        """
        rejection = check_request(request, self.config.path, self.config.api_key)
        if rejection is not None:
            return http_service.json_response(rejection.status_code, rejection.to_payload())

        try:
            self._send_notification(request)
        except Exception as e:
            logger.error(f"Error sending email: {e}", exc_info=True)
            return http_service.json_response(500, {
                'error': 'Failed to send email',
                'message': str(e)
            })

        return http_service.json_response(200, {
            'success': True,
            'message': 'Email sent successfully'
        })

    def _send_notification(self, request: HttpRequest) -> None:
        """
        Parse, build and dispatch one notification.

        Raises:
            Various exceptions from parsing, building or delivery (caught by caller)
        """
        email_request = parse_email_request(request.body)
        logger.info(
            f"Parsed: recipient={email_request.recipient}, "
            f"subject={email_request.subject}, has_data={email_request.has_data}"
        )

        message = build_message(email_request, self.config.sender)
        raw_message = message.as_raw()

        send_start_time = time.time()
        send = self._send or ses_service.send_raw_email
        send(message.sender_email, message.recipient, raw_message)

        send_time = time.time() - send_start_time
        logger.info(
            f"Dispatched {message.message_id} to {message.recipient} "
            f"({len(raw_message)} bytes, {send_time:.3f}s)"
        )
