"""
Application errors.

Each error carries the HTTP status it maps to and a human-readable message.
The handlers in ``stockroom.main`` render them as
``{"success": false, "message": ...}``.
"""


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None, status_code=None, extra=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "All fields required"


class Conflict(AppError):
    status_code = 400
    default_message = "Email already registered"


class EmailNotFound(AppError):
    status_code = 400
    default_message = "Email not registered"


class IncorrectPassword(AppError):
    status_code = 400
    default_message = "Incorrect password"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class InvalidRole(ValidationError):
    default_message = "Invalid role"


class SelfDeletionDenied(AppError):
    status_code = 400
    default_message = "You cannot delete your own account."


class MissingToken(AppError):
    status_code = 400
    default_message = "Token is required"


class TokenExpired(AppError):
    status_code = 400
    default_message = "Reset token has expired"


class InvalidToken(AppError):
    status_code = 400
    default_message = "Invalid token"


class ServerError(AppError):
    status_code = 500
    default_message = "Server error"


class MailDeliveryError(ServerError):
    """The mail transport could not deliver a message."""
