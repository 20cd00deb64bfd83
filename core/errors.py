"""
Error hierarchy for the user API.

Every error carries a client-facing message, a stable code and the HTTP status
it maps to. Storage errors never carry driver text to the client; the original
exception is kept on ``__cause__`` for server-side logging.
"""
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError


class UserAPIError(Exception):
    status_code = 500
    default_code = "internal_error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class InvalidRequestError(UserAPIError):
    status_code = 400
    default_code = "invalid_request"


class UserNotFoundError(UserAPIError):
    status_code = 404
    default_code = "not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class StorageError(UserAPIError):
    status_code = 500

    @classmethod
    def from_exception(cls, message: str, exc: SQLAlchemyError) -> "StorageError":
        """Classify a SQLAlchemy failure into a sanitized error code."""
        if isinstance(exc, IntegrityError):
            code = "conflict"
        elif isinstance(exc, (OperationalError, InterfaceError)):
            code = "db_unreachable"
        else:
            code = "internal_error"
        return cls(message, code=code)
