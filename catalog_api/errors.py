"""
Error taxonomy for the catalog API.

Every failure a stage can signal is an ApiError tagged with one of the
ErrorKind members. The kind fixes the HTTP status; the terminal error
handlers in pipeline.py are the only place these become responses.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NOT_FOUND = (404, "Resource not found")
    VALIDATION = (400, "Validation failed")
    AUTHENTICATION = (401, "Authentication failed")
    INTERNAL = (500, "Internal Server Error")

    def __init__(self, status_code: int, default_message: str):
        self.status_code = status_code
        self.default_message = default_message


class ApiError(Exception):
    """A failure with a known kind, carried through to the terminal stage."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"ApiError({self.kind.name}, {self.message!r})"


def not_found(message: Optional[str] = None) -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, message)


def invalid(message: Optional[str] = None) -> ApiError:
    return ApiError(ErrorKind.VALIDATION, message)


def unauthenticated(message: Optional[str] = None) -> ApiError:
    return ApiError(ErrorKind.AUTHENTICATION, message)
