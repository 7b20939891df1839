"""
SES operations utilities for Lambda handlers.

This module provides the delivery transport for rendered MIME messages
using Amazon SES SendRawEmail.
"""

import logging
import os

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Raised when SES refuses to deliver a message."""
    pass


# SES error codes reported with a readable message instead of the raw ClientError
_DELIVERY_ERRORS = {
    'MessageRejected': "Message rejected by SES",
    'MailFromDomainNotVerifiedException': "Sender domain is not verified in SES",
    'ConfigurationSetDoesNotExistException': "SES configuration set does not exist",
    'Throttling': "Request throttled by SES",
}

# Configure SES client with timeouts and no retries (failed sends are not retried)
ses_config = Config(
    retries={
        'max_attempts': 0,  # 0 attempts = 1 total call, NO retries
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=30      # 30 seconds max for reading response
)

region = os.environ.get('AWS_REGION', os.environ.get('AWS_DEFAULT_REGION', 'us-east-1'))

# Initialize SES client at module level (thread-safe, reused across invocations)
ses_client = boto3.client('ses', region_name=region, config=ses_config)
logger.info(f"SES client initialized: region={region}, connect=10s, read=30s, max_attempts=0")


def send_raw_email(source: str, destination: str, raw_message: bytes) -> str:
    """
    Send a raw MIME message through SES.

    Args:
        source: Envelope sender address (must be verified in SES)
        destination: Envelope recipient address
        raw_message: Rendered RFC 5322 message

    Returns:
        str: SES message ID

    Raises:
        ValueError: If any argument is empty
        DeliveryError: If SES rejects the message
        ClientError: For other AWS service errors

    Example:
        >>> message_id = send_raw_email(
        ...     source="notifications@example.com",
        ...     destination="user@example.com",
        ...     raw_message=message.as_raw()
        ... )
    """
    if not source:
        raise ValueError("Source address cannot be empty")
    if not destination:
        raise ValueError("Destination address cannot be empty")
    if not raw_message:
        raise ValueError("Raw message cannot be empty")

    logger.info(
        f"Sending raw email via SES: source={source}, destination={destination}, "
        f"size={len(raw_message)} bytes"
    )

    try:
        response = ses_client.send_raw_email(
            Source=source,
            Destinations=[destination],
            RawMessage={'Data': raw_message}
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))

        logger.error(
            f"Failed to send email via SES: destination={destination}, "
            f"error_code={error_code}, error_message={error_message}"
        )

        if error_code in _DELIVERY_ERRORS:
            raise DeliveryError(f"{_DELIVERY_ERRORS[error_code]}: {error_message}")
        raise

    message_id = response.get('MessageId', '')
    logger.info(f"SES accepted message: message_id={message_id}")
    return message_id
