"""
Mailer configuration loaded from Lambda environment variables.

Configuration is read once at module import time of the handler and is
never mutated afterwards.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from domain.models import SenderIdentity

logger = logging.getLogger(__name__)

DEFAULT_PATH_NAME = '/send'


class ConfigurationError(Exception):
    """Raised when mailer configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class MailerConfig:
    """
    Static mailer configuration.

    Attributes:
        path: The only request path the mailer accepts (e.g. "/send")
        sender: Identity used in the From header and as SES source
        api_key: Shared secret expected in the bearer token
        environment: Deployment environment name (dev, prod, ...)
    """
    path: str
    sender: SenderIdentity
    api_key: str
    environment: str = 'dev'

    def __repr__(self) -> str:
        """Never expose the API key in logs."""
        return (
            f"MailerConfig(path={self.path!r}, sender={self.sender!r}, "
            f"environment={self.environment!r})"
        )


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, '').strip()
    if not value:
        raise ConfigurationError(
            f"{name} environment variable is required but not set. "
            f"Please configure this in your SAM template or Lambda environment."
        )
    return value


def load_config(environ: Optional[Mapping[str, str]] = None) -> MailerConfig:
    """
    Build MailerConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        MailerConfig: The validated configuration

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    if environ is None:
        environ = os.environ

    sender_email = _require(environ, 'SENDER_EMAIL')
    api_key = _require(environ, 'API_KEY')
    sender_name = environ.get('SENDER_NAME', '').strip()
    path = environ.get('PATH_NAME', '').strip() or DEFAULT_PATH_NAME

    if not path.startswith('/'):
        raise ConfigurationError(
            f"PATH_NAME must start with '/', got: '{path}'"
        )

    if '@' not in sender_email:
        raise ConfigurationError(
            f"SENDER_EMAIL is not an email address: '{sender_email}'"
        )

    config = MailerConfig(
        path=path,
        sender=SenderIdentity(name=sender_name, email=sender_email),
        api_key=api_key,
        environment=environ.get('ENVIRONMENT', 'dev'),
    )
    logger.info(f"Mailer configured: path={config.path}, sender={sender_email}")
    return config
