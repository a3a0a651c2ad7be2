"""
Application exceptions.

Domain functions raise these; the web layer maps them to HTTP responses.
"""

from __future__ import annotations


class InkwellError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(InkwellError):
    """A required field is missing or empty."""

    def __init__(self, message: str = "Validation failed") -> None:
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class NotFoundError(InkwellError):
    """The referenced id does not exist in the expected collection."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ExpiredError(InkwellError):
    """A deleted note exists but is past its retention deadline."""

    def __init__(self, message: str = "Note has expired") -> None:
        super().__init__(message, code="RES_EXPIRED")


class StorageError(InkwellError):
    """The database is unavailable or rejected the operation."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
