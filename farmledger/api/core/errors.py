"""
Application errors and their mapping to HTTP responses

Routers and repositories raise these; the handlers registered in
``farmledger.api.main`` turn every one of them into the standard envelope.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that carry an HTTP status"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Request data is well-formed but violates a business rule"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    """The addressed row does not exist"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


def error_body(message: str) -> dict:
    """Envelope used for every non-2xx response"""
    return {
        "data": None,
        "message": message,
        "success": False,
        "error": message,
    }
