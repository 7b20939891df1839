"""
Utility functions for Lambda handler operations.

This package contains reusable service functions for HTTP event handling
and SES delivery.
"""

__all__ = ['http', 'ses']
