"""
Data models for the notification mailer domain.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass, field
from email.message import EmailMessage
from email import policy
from typing import Optional, Dict, Any

# CRLF line endings, non-ASCII bodies transfer-encoded for SES
MIME_POLICY = policy.SMTP.clone(cte_type='7bit')


@dataclass(frozen=True)
class SenderIdentity:
    """
    Static sender identity from configuration.

    Attributes:
        name: Display name (may be empty)
        email: Sender address, also used as the SES source
    """
    name: str
    email: str


@dataclass
class EmailRequest:
    """
    Validated notification request parsed from the JSON body.

    Attributes:
        recipient: Recipient email address
        subject: Email subject line
        data: Optional key/value data rendered into the body (order preserved)
    """
    recipient: str
    subject: str
    data: Optional[Dict[str, Any]] = None

    @property
    def has_data(self) -> bool:
        """Check if the request carries a data object (possibly empty)."""
        return self.data is not None


@dataclass(frozen=True)
class MimeMessage:
    """
    Single-part plain-text email ready for rendering.

    Attributes:
        from_header: Formatted From header value
        sender_email: Bare sender address (envelope source)
        recipient: Recipient address (To header and envelope destination)
        subject: Subject header value
        body: Plain text body
        date: RFC 2822 Date header value
        message_id: Message-ID header value
    """
    from_header: str
    sender_email: str
    recipient: str
    subject: str
    body: str
    date: str
    message_id: str
    content_type: str = field(default='text/plain', init=False)

    def to_email_message(self) -> EmailMessage:
        """Assemble the stdlib EmailMessage for this value."""
        msg = EmailMessage(policy=MIME_POLICY)
        msg['From'] = self.from_header
        msg['To'] = self.recipient
        msg['Subject'] = self.subject
        msg['Date'] = self.date
        msg['Message-ID'] = self.message_id
        msg.set_content(self.body, subtype='plain', charset='utf-8')
        return msg

    def as_raw(self) -> bytes:
        """
        Render the message to raw RFC 5322 bytes (CRLF line endings).

        Returns:
            bytes: Transport-ready MIME message
        """
        return self.to_email_message().as_bytes()


@dataclass
class HttpRequest:
    """
    Inbound HTTP request extracted from a Lambda proxy event.

    Attributes:
        method: Uppercase HTTP method
        path: Request path without query string
        headers: Headers with lowercased names
        body: Decoded request body (empty string if absent)
    """
    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ''

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())
