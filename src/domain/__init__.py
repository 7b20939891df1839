"""
Domain layer for notification mailing business logic.

This layer contains:
- Data models (type-safe structures)
- Request gate (method, path and API key checks)
- Message building (JSON body to MIME message)
- Notification pipeline (request to HTTP response)
"""
