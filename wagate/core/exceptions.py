"""Gateway exceptions.

Everything raised to the HTTP layer derives from ``AppException`` and is
rendered as ``{"success": false, "message": ...}`` with ``status_code``.
"""

from typing import Any

NOT_CONNECTED_MESSAGE = "WhatsApp is not connected. Please scan the QR code first."


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotConnectedError(AppException):
    def __init__(self, message: str = NOT_CONNECTED_MESSAGE):
        super().__init__(message=message, status_code=503)


class NotFoundError(AppException):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=404)


class ValidationError(AppException):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=400, details=details)


class AuthenticationError(AppException):
    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message=message, status_code=401)


class CollaboratorError(AppException):
    """The Baileys session failed to carry out a send or enumeration."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            status_code=500,
            details={"operation": operation} if operation else None,
        )


class PersistenceError(Exception):
    """Reading or writing a local file failed. Logged, never sent to callers."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
