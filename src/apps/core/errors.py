"""Error kinds raised by the service layer and their public HTTP shape."""


class ServiceError(Exception):
    """Base class for errors that map onto a ``{success: false, message}`` response."""

    status: int = 500
    message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def as_payload(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(ServiceError):
    """Client-supplied data failed one or more field rules."""

    status = 400
    message = "Validation failed"

    def __init__(self, errors: dict[str, list[str]], message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message)

    def as_payload(self) -> dict:
        return {**super().as_payload(), "errors": self.errors}


class InvalidCredentials(ServiceError):
    """Unknown email or wrong password. Both cases share this message."""

    status = 401
    message = "Invalid credentials"


class AccountDisabled(ServiceError):
    status = 403
    message = "Account is deactivated"


class AccountLocked(ServiceError):
    status = 423
    message = "Account is temporarily locked due to too many failed login attempts. Please try again later."


class InvalidToken(ServiceError):
    """Malformed, expired or badly signed token."""

    status = 401
    message = "Invalid token"


class Unauthorized(ServiceError):
    status = 401
    message = "Access denied. No valid token provided."


class NotFound(ServiceError):
    status = 404
    message = "Not found"


class MethodNotAllowed(ServiceError):
    status = 405
    message = "Method not allowed"


class RateLimited(ServiceError):
    status = 429
    message = "Too many requests, please try again later."


class StorageError(ServiceError):
    """The database is unreachable or rejected the operation."""

    status = 500
    message = "A server error occurred. Please try again later."
