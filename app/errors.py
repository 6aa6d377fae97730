class FinanceError(Exception):
    """Base error carrying the HTTP status and a human-readable message."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FinanceError):
    status_code = 400
    default_message = "Invalid request."


class ConflictError(FinanceError):
    status_code = 400
    default_message = "User already exists."


class InvalidCredentialsError(FinanceError):
    status_code = 400
    default_message = "Invalid credentials."


class UnauthenticatedError(FinanceError):
    status_code = 401
    default_message = "Access denied. No token provided."


class InvalidTokenError(FinanceError):
    # 400 rather than 401 is what existing clients expect
    status_code = 400
    default_message = "Invalid token."


class ForbiddenError(FinanceError):
    status_code = 403
    default_message = "Forbidden."


class NotFoundError(FinanceError):
    status_code = 404
    default_message = "User not found"


class ConfigurationError(FinanceError):
    status_code = 500
    default_message = "Server is not configured for token operations."
