"""
Tests for message building (JSON body to MIME message).
"""

import json
import pytest
import sys
import os
from email import policy
from email.parser import BytesParser

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.models import EmailRequest, SenderIdentity
from domain.message_builder import (
    parse_email_request,
    format_value,
    render_body,
    build_message,
    EmailRequestError,
    MessageBuildError,
    BODY_PREAMBLE,
    NO_DATA_TEXT,
)


@pytest.fixture
def sender():
    return SenderIdentity(name="Test Notifier", email="notifications@example.com")


class TestParseEmailRequest:
    """Test JSON body parsing."""

    def test_parse_full_request(self):
        """Test parsing recipient, subject and data."""
        body = json.dumps({
            "recipient": "a@b.com",
            "subject": "Hi",
            "data": {"key1": "value1", "key2": "value2"}
        })

        request = parse_email_request(body)

        assert request.recipient == "a@b.com"
        assert request.subject == "Hi"
        assert list(request.data.items()) == [("key1", "value1"), ("key2", "value2")]

    def test_parse_bytes_body(self):
        """Test parsing a bytes body."""
        request = parse_email_request(b'{"recipient": "a@b.com", "subject": "Hi"}')

        assert request.recipient == "a@b.com"
        assert request.data is None

    def test_parse_null_data_is_absent(self):
        """Test data: null is treated as absent."""
        request = parse_email_request('{"recipient": "a@b.com", "subject": "Hi", "data": null}')

        assert request.has_data is False

    def test_parse_invalid_json(self):
        """Test malformed JSON raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            parse_email_request("not valid json")

    def test_parse_empty_body(self):
        """Test empty body raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            parse_email_request("")

    def test_parse_non_object(self):
        """Test a JSON array is rejected."""
        with pytest.raises(EmailRequestError, match="must be a JSON object"):
            parse_email_request('["a@b.com"]')

    @pytest.mark.parametrize("payload", [
        {"subject": "Hi"},
        {"recipient": "", "subject": "Hi"},
        {"recipient": "   ", "subject": "Hi"},
        {"recipient": 42, "subject": "Hi"},
    ])
    def test_parse_invalid_recipient(self, payload):
        """Test missing or empty recipient is rejected."""
        with pytest.raises(EmailRequestError, match="recipient is required"):
            parse_email_request(json.dumps(payload))

    @pytest.mark.parametrize("payload", [
        {"recipient": "a@b.com"},
        {"recipient": "a@b.com", "subject": ""},
        {"recipient": "a@b.com", "subject": None},
    ])
    def test_parse_invalid_subject(self, payload):
        """Test missing or empty subject is rejected."""
        with pytest.raises(EmailRequestError, match="subject is required"):
            parse_email_request(json.dumps(payload))

    def test_parse_data_not_object(self):
        """Test non-object data is rejected."""
        with pytest.raises(EmailRequestError, match="data must be a JSON object"):
            parse_email_request('{"recipient": "a@b.com", "subject": "Hi", "data": [1, 2]}')


class TestFormatValue:
    """Test data value conversion."""

    @pytest.mark.parametrize("value,expected", [
        ("value1", "value1"),
        ("", ""),
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (42, "42"),
        (-7, "-7"),
        (1.0, "1"),
        (2.5, "2.5"),
        ([1, "a"], '[1,"a"]'),
        ({"nested": "ü"}, '{"nested":"ü"}'),
    ])
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_format_unsupported_type(self):
        """Test values that cannot come from JSON are rejected."""
        with pytest.raises(EmailRequestError, match="Unsupported data value type"):
            format_value(object())


class TestRenderBody:
    """Test plain text body rendering."""

    def test_render_data_lines_in_order(self):
        """Test each entry renders as one line in insertion order."""
        body = render_body({"key1": "value1", "key2": "value2"})

        assert body.startswith(BODY_PREAMBLE)
        assert "key1: value1\nkey2: value2" in body
        assert body.index("key1: value1") < body.index("key2: value2")

    def test_render_without_data(self):
        """Test placeholder text when data is absent."""
        body = render_body(None)

        assert BODY_PREAMBLE in body
        assert NO_DATA_TEXT in body

    def test_render_empty_data(self):
        """Test an empty data object renders no lines and no placeholder."""
        body = render_body({})

        assert BODY_PREAMBLE in body
        assert NO_DATA_TEXT not in body
        assert body.strip() == BODY_PREAMBLE

    def test_render_mixed_values(self):
        """Test scalar values use their explicit text form."""
        body = render_body({"count": 3, "active": True, "ratio": 0.5, "note": None})

        assert "count: 3\nactive: true\nratio: 0.5\nnote: null" in body

    def test_render_is_deterministic(self):
        """Test rendering twice yields identical text."""
        data = {"x": "1", "y": 2}

        assert render_body(data) == render_body(data)


class TestBuildMessage:
    """Test MIME message construction."""

    def test_build_message_fields(self, sender):
        """Test sender, recipient, subject and body are set."""
        request = EmailRequest(recipient="a@b.com", subject="Hi", data={"x": "1"})

        message = build_message(request, sender)

        assert message.from_header == 'Test Notifier <notifications@example.com>'
        assert message.sender_email == 'notifications@example.com'
        assert message.recipient == 'a@b.com'
        assert message.subject == 'Hi'
        assert 'x: 1' in message.body
        assert message.message_id.endswith('@example.com>')

    def test_build_message_without_sender_name(self):
        """Test bare address is used when no display name is configured."""
        request = EmailRequest(recipient="a@b.com", subject="Hi")

        message = build_message(request, SenderIdentity(name="", email="notifications@example.com"))

        assert message.from_header == 'notifications@example.com'

    def test_build_message_raw(self, sender):
        """Test the rendered message is a single text/plain part."""
        request = EmailRequest(recipient="a@b.com", subject="Hi")

        raw = build_message(request, sender).as_raw()
        parsed = BytesParser(policy=policy.default).parsebytes(raw)

        assert parsed['To'] == 'a@b.com'
        assert parsed['Subject'] == 'Hi'
        assert parsed.get_content_type() == 'text/plain'
        assert NO_DATA_TEXT in parsed.get_content()

    def test_build_message_body_identical(self, sender):
        """Test building twice from the same input yields identical body text."""
        request = EmailRequest(recipient="a@b.com", subject="Hi", data={"k": "v"})

        first = build_message(request, sender)
        second = build_message(request, sender)

        assert first.body == second.body

    @pytest.mark.parametrize("subject", [
        "Hi\r\nBcc: victim@example.com",
        "Hi\nBcc: victim@example.com",
        "Hi\rthere",
    ])
    def test_build_message_rejects_subject_line_breaks(self, sender, subject):
        """Test header injection through the subject is rejected."""
        request = EmailRequest(recipient="a@b.com", subject=subject)

        with pytest.raises(MessageBuildError, match="Invalid subject"):
            build_message(request, sender)

    def test_build_message_rejects_recipient_line_breaks(self, sender):
        """Test header injection through the recipient is rejected."""
        request = EmailRequest(recipient="a@b.com\r\nCc: c@d.com", subject="Hi")

        with pytest.raises(MessageBuildError, match="Invalid recipient"):
            build_message(request, sender)

    @pytest.mark.parametrize("recipient", [
        "zoë@example.com",
        "user@bücher.example",
    ])
    def test_build_message_rejects_non_ascii_recipient(self, sender, recipient):
        """Test non-ASCII addresses are rejected instead of encoded into the addr-spec."""
        request = EmailRequest(recipient=recipient, subject="Hi")

        with pytest.raises(MessageBuildError, match="Invalid recipient: email addresses must contain only ASCII"):
            build_message(request, sender)

    def test_build_message_rejects_non_ascii_sender_email(self):
        """Test a non-ASCII sender address is rejected."""
        request = EmailRequest(recipient="a@b.com", subject="Hi")

        with pytest.raises(MessageBuildError, match="Invalid sender email"):
            build_message(request, SenderIdentity(name="Test Notifier", email="zöe@example.com"))

    def test_build_message_allows_non_ascii_display_name(self):
        """Test the sender display name may contain non-ASCII characters."""
        request = EmailRequest(recipient="a@b.com", subject="Grüße")

        raw = build_message(request, SenderIdentity(name="Zoë", email="notifications@example.com")).as_raw()
        parsed = BytesParser(policy=policy.default).parsebytes(raw)

        assert parsed["From"].addresses[0].display_name == "Zoë"
        assert parsed["Subject"] == "Grüße"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
