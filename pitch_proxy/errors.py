from pydantic import BaseModel


GENERIC_FAILURE_MESSAGE = "Failed to process the request."


class ErrorBody(BaseModel):
    error: str
    message: str | None = None


def error_body(*, error: str, message: str | None = None) -> ErrorBody:
    return ErrorBody(error=error, message=message)


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or malformed."""


class AuthError(Exception):
    """Raised when a request's bearer token is missing or fails verification."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
