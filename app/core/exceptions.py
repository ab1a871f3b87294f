"""
Domain errors raised by services and converted to JSON envelopes in main.py
"""

from typing import Any, Iterable, Optional


class KivuEventError(Exception):
    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(KivuEventError):
    status_code = 400
    error_code = "validation_error"

    @classmethod
    def missing_fields(cls, fields: Iterable[str]) -> "ValidationError":
        names = list(fields)
        return cls(f"Missing required fields: {', '.join(names)}", details=names)


class NotFoundError(KivuEventError):
    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str = "Resource", details: Any = None):
        super().__init__(f"{resource} not found", details=details)
        self.resource = resource


class ConflictError(KivuEventError):
    status_code = 409
    error_code = "conflict"


class AuthError(KivuEventError):
    status_code = 401
    error_code = "unauthorized"

    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, details=details)


class RateLimitError(KivuEventError):
    status_code = 429
    error_code = "rate_limited"

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class StorageError(KivuEventError):
    status_code = 500
    error_code = "storage_error"

    def __init__(self, message: str = "An unexpected storage error occurred"):
        super().__init__(message)
