"""Typed application errors shared by every layer of the service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence


class ErrorKind(str, Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation_error"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True, slots=True)
class FieldViolation:
    field: str
    message: str


class AppError(Exception):
    """Base error carrying an explicit kind and optional field-level violations.

    Instances are rendered by the HTTP error boundary as
    ``{"success": false, "error": message}`` with the status code mapped
    from :attr:`kind`.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        fields: Optional[Sequence[FieldViolation]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.fields: List[FieldViolation] = list(fields or [])
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists."


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found."


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized."


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid token."


class TokenExpiredError(InvalidTokenError):
    default_message = "Token expired."


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed."

    def __init__(self, fields: Sequence[FieldViolation], message: Optional[str] = None) -> None:
        if message is None and fields:
            message = ", ".join(violation.message for violation in fields)
        super().__init__(message, fields)


class InternalError(AppError):
    kind = ErrorKind.INTERNAL
