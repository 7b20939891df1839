"""
Message building - JSON body to single-part plain-text MIME message.

Pipeline:
1. Parse JSON body into EmailRequest (parse_email_request)
2. Render the body text from the optional data map (render_body)
3. Assemble MimeMessage with sender, recipient, subject (build_message)

Errors are raised to the caller (NotificationMailer), which reports them
uniformly as a failed send.
"""

import json
import logging
from email.utils import formataddr, formatdate, make_msgid
from typing import Any, Dict, Optional, Union

from .models import EmailRequest, MimeMessage, SenderIdentity

logger = logging.getLogger(__name__)

BODY_PREAMBLE = "Notification Email from Your Service"
NO_DATA_TEXT = "No data provided."


class EmailRequestError(ValueError):
    """Raised when the JSON body does not describe a valid email request."""
    pass


class MessageBuildError(ValueError):
    """Raised when a header value cannot be placed safely in the message."""
    pass


def parse_email_request(body: Union[str, bytes]) -> EmailRequest:
    """
    Parse a JSON request body into an EmailRequest.

    Args:
        body: Raw request body

    Returns:
        EmailRequest: The validated request

    Raises:
        json.JSONDecodeError: If the body is not valid JSON
        EmailRequestError: If the JSON does not have the expected shape

    Example:
        >>> request = parse_email_request('{"recipient": "a@b.com", "subject": "Hi"}')
        >>> request.data is None
        True
    """
    payload = json.loads(body)

    if not isinstance(payload, dict):
        raise EmailRequestError(
            f"Request body must be a JSON object, got {type(payload).__name__}"
        )

    recipient = payload.get('recipient')
    subject = payload.get('subject')
    data = payload.get('data')

    if not isinstance(recipient, str) or not recipient.strip():
        raise EmailRequestError("recipient is required and must be a non-empty string")
    if not isinstance(subject, str) or not subject.strip():
        raise EmailRequestError("subject is required and must be a non-empty string")
    if data is not None and not isinstance(data, dict):
        raise EmailRequestError(
            f"data must be a JSON object, got {type(data).__name__}"
        )

    return EmailRequest(recipient=recipient.strip(), subject=subject, data=data)


def format_value(value: Any) -> str:
    """
    Convert a data value to its text form in the email body.

    Strings are kept as is, booleans and null use their JSON spelling,
    integral floats drop the fraction and nested lists/objects are written
    as compact JSON.
    """
    if isinstance(value, str):
        return value
    # bool before int: bool is a subclass of int
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
    raise EmailRequestError(f"Unsupported data value type: {type(value).__name__}")


def render_body(data: Optional[Dict[str, Any]]) -> str:
    """
    Render the plain text body.

    Args:
        data: Key/value data from the request, or None if absent

    Returns:
        str: Preamble, blank line, then one "key: value" line per entry
             (or the no-data placeholder)
    """
    if data is None:
        block = NO_DATA_TEXT
    else:
        block = '\n'.join(f"{key}: {format_value(value)}" for key, value in data.items())

    return f"{BODY_PREAMBLE}\n\n{block}\n"


def _check_header_value(name: str, value: str) -> None:
    if '\r' in value or '\n' in value:
        raise MessageBuildError(
            f"Invalid {name}: header values may not contain line breaks"
        )


def _check_address(name: str, value: str) -> None:
    _check_header_value(name, value)
    # No SMTPUTF8: encoded-words are not allowed inside an addr-spec
    if not value.isascii():
        raise MessageBuildError(
            f"Invalid {name}: email addresses must contain only ASCII characters"
        )


def build_message(request: EmailRequest, sender: SenderIdentity) -> MimeMessage:
    """
    Build a single-part text/plain message from a request and sender identity.

    Args:
        request: Validated email request
        sender: Configured sender identity

    Returns:
        MimeMessage: Message ready to be rendered with as_raw()

    Raises:
        MessageBuildError: If any header value contains CR or LF, or an
                           address contains non-ASCII characters
    """
    _check_header_value('sender name', sender.name)
    _check_address('sender email', sender.email)
    _check_address('recipient', request.recipient)
    _check_header_value('subject', request.subject)

    if sender.name:
        from_header = formataddr((sender.name, sender.email))
    else:
        from_header = sender.email

    domain = sender.email.rpartition('@')[2] or None

    message = MimeMessage(
        from_header=from_header,
        sender_email=sender.email,
        recipient=request.recipient,
        subject=request.subject,
        body=render_body(request.data),
        date=formatdate(usegmt=True),
        message_id=make_msgid(domain=domain),
    )

    logger.info(
        f"Built message: to={message.recipient}, subject={message.subject}, "
        f"body_length={len(message.body)}"
    )
    return message
